"""Payment-order service client.

RazorpayGateway creates orders through the Razorpay SDK.  The SDK is a
blocking ``requests`` client, so calls run in a worker thread.  The
returned order dict is passed to the browser unmodified; the checkout
widget needs its ``id``, ``amount`` and ``currency``.

Without RAZORPAY_KEY_ID the InMemoryPaymentGateway fabricates orders of
the same shape so the checkout flow works in development and tests.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from typing import Protocol

import razorpay

from studynotion.core.config import SETTINGS

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    async def create_order(
        self, *, amount: int, currency: str, receipt: str, notes: dict[str, str]
    ) -> dict: ...


class RazorpayGateway:
    def __init__(self, key_id: str, key_secret: str) -> None:
        self._client = razorpay.Client(auth=(key_id, key_secret))

    async def create_order(
        self, *, amount: int, currency: str, receipt: str, notes: dict[str, str]
    ) -> dict:
        data = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
        }
        return await asyncio.to_thread(self._client.order.create, data=data)


class InMemoryPaymentGateway:
    def __init__(self) -> None:
        self.orders: list[dict] = []

    async def create_order(
        self, *, amount: int, currency: str, receipt: str, notes: dict[str, str]
    ) -> dict:
        order = {
            "id": f"order_{secrets.token_hex(7)}",
            "entity": "order",
            "amount": amount,
            "amount_paid": 0,
            "amount_due": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
            "attempts": 0,
            "notes": dict(notes),
            "created_at": int(time.time()),
        }
        self.orders.append(order)
        return order


if SETTINGS.razorpay_key_id:
    payment_gateway: PaymentGateway = RazorpayGateway(
        SETTINGS.razorpay_key_id, SETTINGS.razorpay_key_secret
    )
else:
    logger.info("No RAZORPAY_KEY_ID configured; orders are simulated in memory")
    payment_gateway = InMemoryPaymentGateway()
