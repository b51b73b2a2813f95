"""JWT access token validation (HS256).

Buyers authenticate against the upstream auth service, which signs
access tokens with the shared JWT_SECRET.  This service only decodes
them; ``create_access_token`` exists for local tooling and tests.

Claims: sub (account id), iss, exp, iat, jti, roles.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import jwt

from studynotion.core.config import SETTINGS

ALGORITHM = "HS256"
ISSUER = "studynotion"
ACCESS_TOKEN_TTL_MIN = 60


def create_access_token(
    *,
    sub: str,
    roles: list[str] | None = None,
    ttl_minutes: int = ACCESS_TOKEN_TTL_MIN,
) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "exp": now + timedelta(minutes=ttl_minutes),
        "iat": now,
        "jti": str(uuid.uuid4()),
        "roles": roles if roles is not None else ["student"],
    }
    return jwt.encode(payload, SETTINGS.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and claims, return the payload.

    Pins the algorithm so a token cannot downgrade to alg:none.
    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    return jwt.decode(
        token,
        SETTINGS.jwt_secret,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        options={"require": ["sub", "exp", "iat"]},
    )
