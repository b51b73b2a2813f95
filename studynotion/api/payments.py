"""Checkout endpoints.

POST /v1/payments/capture        create a gateway order for a basket
POST /v1/payments/verify         verify the gateway signature, then enroll
POST /v1/payments/success-email  queue the payment receipt email

Bodies mirror what the checkout widget hands back, so every field is
optional at the schema level and the service reports what is missing.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from studynotion.api.dependencies import StoreDep, StudentDep
from studynotion.services import payments_service

router = APIRouter(prefix="/v1/payments", tags=["payments"])


class CaptureIn(BaseModel):
    courses: Any = None


class OrderOut(BaseModel):
    success: bool = True
    message: str
    order: dict


class VerifyIn(BaseModel):
    razorpay_order_id: str | None = None
    razorpay_payment_id: str | None = None
    razorpay_signature: str | None = None
    courses: Any = None


class VerifyOut(BaseModel):
    success: bool = True
    message: str
    enrolled: list[str]
    already_enrolled: list[str]


class SuccessEmailIn(BaseModel):
    order_id: str | None = Field(default=None, alias="orderId")
    payment_id: str | None = Field(default=None, alias="paymentId")
    amount: int | None = None


class MessageOut(BaseModel):
    success: bool = True
    message: str


@router.post("/capture", response_model=OrderOut)
async def capture_payment(
    body: CaptureIn, principal: StudentDep, store: StoreDep
) -> OrderOut:
    order = await payments_service.capture_payment(
        store, body.courses, principal.account_id
    )
    return OrderOut(message="Order created successfully", order=order)


@router.post("/verify", response_model=VerifyOut)
async def verify_payment(
    body: VerifyIn, principal: StudentDep, store: StoreDep
) -> VerifyOut:
    result = await payments_service.verify_payment(
        store,
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
        course_ids=body.courses,
        user_id=principal.account_id,
    )
    return VerifyOut(
        message="Payment verified and courses enrolled successfully",
        enrolled=[str(c) for c in result.enrolled],
        already_enrolled=[str(c) for c in result.skipped],
    )


@router.post("/success-email", response_model=MessageOut)
async def send_payment_success_email(
    body: SuccessEmailIn, principal: StudentDep, store: StoreDep
) -> MessageOut:
    await payments_service.send_payment_success_email(
        store,
        order_id=body.order_id,
        payment_id=body.payment_id,
        amount=body.amount,
        user_id=principal.account_id,
    )
    return MessageOut(message="Payment success email sent")
