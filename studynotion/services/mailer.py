"""Outbound email delivery.

HttpMailer posts each message as JSON to a transactional mail provider
(Resend-compatible ``POST /emails``) with ``httpx.AsyncClient``.
InMemoryMailer records messages in ``outbox`` and is used whenever
MAIL_API_KEY is not configured.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from studynotion.core.config import SETTINGS

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str


class Mailer(Protocol):
    async def send(self, email: OutgoingEmail) -> None: ...


class InMemoryMailer:
    def __init__(self) -> None:
        self.outbox: list[OutgoingEmail] = []

    async def send(self, email: OutgoingEmail) -> None:
        self.outbox.append(email)
        logger.info("Captured email to=%s subject=%r", email.to, email.subject)


class HttpMailer:
    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        sender: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout
        self._transport = transport

    async def send(self, email: OutgoingEmail) -> None:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "from": self._sender,
            "to": [email.to],
            "subject": email.subject,
            "html": email.body,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._api_url, headers=headers, json=payload)
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Mail provider rejected email to=%s", email.to)
            raise

        data = response.json() if response.content else {}
        provider_id = data.get("id") if isinstance(data, dict) else None
        logger.info(
            "Sent email to=%s subject=%r provider_id=%s",
            email.to,
            email.subject,
            provider_id,
        )


if SETTINGS.mail_api_key:
    mailer: Mailer = HttpMailer(
        api_url=SETTINGS.mail_api_url,
        api_key=SETTINGS.mail_api_key,
        sender=SETTINGS.mail_from,
    )
else:
    mailer = InMemoryMailer()
