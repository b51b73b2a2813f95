from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

# Used for JWT and payment signing outside prod so a fresh checkout boots
# without any configuration.  load_settings() refuses it in prod.
DEV_SECRET = "dev-only-not-for-production"
DEFAULT_MAIL_FROM = "StudyNotion <no-reply@studynotion.dev>"
DEFAULT_MAIL_API_URL = "https://api.resend.com/emails"


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: str = "false") -> bool:
    return _getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    redis_url: str | None
    jwt_secret: str = DEV_SECRET
    razorpay_key_id: str | None = None
    razorpay_key_secret: str = DEV_SECRET
    payment_currency: str = "INR"
    mail_api_url: str = DEFAULT_MAIL_API_URL
    mail_api_key: str | None = None
    mail_from: str = DEFAULT_MAIL_FROM

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def _parse_port(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    port = _parse_port("PORT", _getenv("PORT", "8000"))

    jwt_secret = _getenv("JWT_SECRET", "")
    razorpay_key_secret = _getenv("RAZORPAY_KEY_SECRET", "")
    if app_env_raw == "prod":
        # Signatures keyed with a well-known secret are forgeable.
        missing = [
            name
            for name, value in (
                ("JWT_SECRET", jwt_secret),
                ("RAZORPAY_KEY_SECRET", razorpay_key_secret),
            )
            if not value
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} must be set when APP_ENV=prod")

    currency = _getenv("PAYMENT_CURRENCY", "INR").upper()
    if len(currency) != 3 or not currency.isalpha():
        raise ValueError(
            f"PAYMENT_CURRENCY must be a 3-letter ISO code (got {currency!r})"
        )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON"),
        port=port,
        database_url=_getenv("DATABASE_URL", "") or None,
        redis_url=_getenv("REDIS_URL", "") or None,
        jwt_secret=jwt_secret or DEV_SECRET,
        razorpay_key_id=_getenv("RAZORPAY_KEY_ID", "") or None,
        razorpay_key_secret=razorpay_key_secret or DEV_SECRET,
        payment_currency=currency,
        mail_api_url=_getenv("MAIL_API_URL", "") or DEFAULT_MAIL_API_URL,
        mail_api_key=_getenv("MAIL_API_KEY", "") or None,
        mail_from=_getenv("MAIL_FROM", "") or DEFAULT_MAIL_FROM,
    )


SETTINGS = load_settings()
