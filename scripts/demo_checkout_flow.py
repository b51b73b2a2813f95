"""Demo: walk a purchase end to end using FastAPI TestClient.

Capture an order, sign it the way the checkout widget would, verify it,
review the course, then let the worker deliver the queued emails.

Run with (no DATABASE_URL / REDIS_URL / RAZORPAY_KEY_ID set):
    python scripts/demo_checkout_flow.py
"""

from __future__ import annotations

import asyncio

from fastapi.testclient import TestClient

from studynotion.core.config import SETTINGS
from studynotion.db.seed import DEMO_STUDENT_ID
from studynotion.main import app
from studynotion.services import token_service
from studynotion.services.mailer import mailer
from studynotion.services.payments_service import compute_signature
from studynotion.services.task_queue import EMAIL_QUEUE, task_queue
from studynotion.worker import process_task


async def _drain_email_queue() -> int:
    delivered = 0
    while (task := await task_queue.dequeue(EMAIL_QUEUE, timeout=1)) is not None:
        if await process_task(task):
            delivered += 1
    return delivered


def main() -> None:
    # Entering the client runs the lifespan, which seeds the demo catalog.
    with TestClient(app) as client:
        token = token_service.create_access_token(sub=str(DEMO_STUDENT_ID))
        auth = {"Authorization": f"Bearer {token}"}

        # ── Step 1: browse ──────────────────────────────────────────────
        r = client.get("/v1/courses")
        courses = r.json()["data"]
        basket = [c["id"] for c in courses[:2]]
        print(f"1. GET  /v1/courses          → {r.status_code}  {len(courses)} courses")

        # ── Step 2: capture ─────────────────────────────────────────────
        r = client.post("/v1/payments/capture", json={"courses": basket}, headers=auth)
        order = r.json()["order"]
        print(
            f"2. POST /v1/payments/capture → {r.status_code}  "
            f"order={order['id']} amount={order['amount']} {order['currency']}"
        )

        # ── Step 3: tampered signature ──────────────────────────────────
        payment_id = "pay_demo0001"
        r = client.post(
            "/v1/payments/verify",
            json={
                "razorpay_order_id": order["id"],
                "razorpay_payment_id": payment_id,
                "razorpay_signature": "0" * 64,
                "courses": basket,
            },
            headers=auth,
        )
        print(f"3. POST /v1/payments/verify (bad sig) → {r.status_code}  {r.json()['message']}")

        # ── Step 4: genuine signature ───────────────────────────────────
        signature = compute_signature(order["id"], payment_id, SETTINGS.razorpay_key_secret)
        r = client.post(
            "/v1/payments/verify",
            json={
                "razorpay_order_id": order["id"],
                "razorpay_payment_id": payment_id,
                "razorpay_signature": signature,
                "courses": basket,
            },
            headers=auth,
        )
        print(f"4. POST /v1/payments/verify  → {r.status_code}  {r.json()['message']}")

        # ── Step 5: payment receipt ─────────────────────────────────────
        r = client.post(
            "/v1/payments/success-email",
            json={"orderId": order["id"], "paymentId": payment_id, "amount": order["amount"]},
            headers=auth,
        )
        print(f"5. POST /v1/payments/success-email → {r.status_code}")

        # ── Step 6: review ──────────────────────────────────────────────
        r = client.post(
            "/v1/reviews",
            json={"courseId": basket[0], "rating": 5, "review": "Clear and practical."},
            headers=auth,
        )
        print(f"6. POST /v1/reviews          → {r.status_code}  {r.json()['message']}")

        r = client.get(f"/v1/courses/{basket[0]}/average-rating")
        print(f"7. GET  average-rating       → {r.status_code}  {r.json()['average_rating']}")

        r = client.get("/v1/me/courses", headers=auth)
        print(f"8. GET  /v1/me/courses       → {r.status_code}  {len(r.json()['data'])} enrolled")

    delivered = asyncio.run(_drain_email_queue())
    outbox = getattr(mailer, "outbox", [])
    print(f"9. worker delivered {delivered} email(s): {[m.subject for m in outbox]}")

    print("\nAll steps completed.")


if __name__ == "__main__":
    main()
