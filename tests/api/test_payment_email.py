from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from studynotion.models.account import Account
from studynotion.services.task_queue import task_queue
from tests.conftest import auth_headers, queued_emails


def test_success_email_is_queued_with_amount_in_units(
    client: TestClient, buyer: Account, buyer_headers: dict[str, str]
) -> None:
    resp = client.post(
        "/v1/payments/success-email",
        json={"orderId": "order_1", "paymentId": "pay_1", "amount": 120000},
        headers=buyer_headers,
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Payment success email sent"}
    [email] = queued_emails()
    assert email["to"] == buyer.email
    assert email["subject"] == "Payment Received"
    assert "INR 1,200.00" in email["body"]
    assert "pay_1" in email["body"]
    assert "order_1" in email["body"]


@pytest.mark.parametrize(
    "body",
    [
        {"paymentId": "pay_1", "amount": 100},
        {"orderId": "order_1", "amount": 100},
        {"orderId": "order_1", "paymentId": "pay_1"},
    ],
)
def test_success_email_missing_field_is_400(
    client: TestClient, buyer_headers: dict[str, str], body: dict
) -> None:
    resp = client.post("/v1/payments/success-email", json=body, headers=buyer_headers)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Provide all required fields"
    assert queued_emails() == []


def test_success_email_unknown_account_is_404(client: TestClient) -> None:
    ghost = Account.new(email="ghost@example.com", first_name="Ghost")
    resp = client.post(
        "/v1/payments/success-email",
        json={"orderId": "order_1", "paymentId": "pay_1", "amount": 100},
        headers=auth_headers(ghost),
    )
    assert resp.status_code == 404
    assert resp.json()["message"] == "User not found"


def test_success_email_queue_failure_is_500(
    client: TestClient,
    buyer_headers: dict[str, str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def _down(_queue: str, _payload: dict):
        raise ConnectionError("redis down")

    monkeypatch.setattr(task_queue, "enqueue", _down)
    resp = client.post(
        "/v1/payments/success-email",
        json={"orderId": "order_1", "paymentId": "pay_1", "amount": 100},
        headers=buyer_headers,
    )
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Could not send email"}
