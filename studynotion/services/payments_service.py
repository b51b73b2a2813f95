"""Checkout: order creation, payment verification and enrollment.

Two independent requests make up a purchase:

  1. capture_payment: validate the basket, price it and ask the gateway
     for an order.  Nothing is written locally.
  2. verify_payment: the browser hands back the gateway's
     (order_id, payment_id, signature) triple.  Only when the HMAC
     matches does enroll_students() write anything.

Enrollment commits one course at a time: the course's enrolled set, the
new progress record and the buyer's profile link change together or not
at all.  The confirmation email is queued after the commit.  A failure
stops the loop; courses already committed stay enrolled.  Courses the
buyer is already enrolled in are skipped, so a retried verification
neither duplicates records nor re-sends mail.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import uuid
from dataclasses import dataclass
from uuid import UUID

from studynotion.core.config import SETTINGS
from studynotion.core.metrics import ENROLLMENTS, ORDERS_CREATED, PAYMENT_VERIFICATIONS
from studynotion.models.course import Course
from studynotion.models.progress import CourseProgress
from studynotion.repos.progress_repo import ProgressExistsError
from studynotion.repos.store import Store
from studynotion.services.errors import (
    ConflictError,
    DependencyFailureError,
    EnrollmentFailedError,
    InvalidRequestError,
    MissingFieldsError,
    NotFoundError,
    ServiceError,
    VerificationFailedError,
)
from studynotion.services.ids import parse_id
from studynotion.services.mail_templates import (
    course_enrollment_email,
    payment_success_email,
)
from studynotion.services.payment_gateway import payment_gateway
from studynotion.services.task_queue import EMAIL_QUEUE, task_queue

logger = logging.getLogger(__name__)

# Prices are stored in whole units; the gateway bills in subunits (paise).
SUBUNITS_PER_UNIT = 100


@dataclass(frozen=True, slots=True)
class EnrollmentResult:
    enrolled: tuple[UUID, ...]
    skipped: tuple[UUID, ...]


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"<order_id>|<payment_id>"`` keyed with ``secret``."""
    body = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode(), body.encode(), hashlib.sha256).hexdigest()


def signature_matches(order_id: str, payment_id: str, signature: str, secret: str) -> bool:
    expected = compute_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode(), signature.encode())


# ---------------------------------------------------------------------------
# Order initiation
# ---------------------------------------------------------------------------


async def capture_payment(store: Store, course_ids: object, user_id: UUID) -> dict:
    """Price the basket and create a gateway order for it.

    Raises InvalidRequestError unless the basket is a non-empty list,
    NotFoundError for an unknown course, ConflictError when the buyer
    already owns one, and DependencyFailureError when the gateway call
    fails.
    """
    if not isinstance(course_ids, list) or not course_ids:
        raise InvalidRequestError("Provide valid course IDs")

    total = 0
    for raw_id, course in await _load_basket(store, course_ids):
        if course is None:
            logger.warning("Checkout rejected: unknown course id=%s", raw_id)
            raise NotFoundError(f"Course with ID {raw_id} does not exist")
        if course.has_student(user_id):
            logger.warning("Checkout rejected: already enrolled course=%s", course.id)
            raise ConflictError(f"User already enrolled in course {course.name}")
        total += course.price

    amount = total * SUBUNITS_PER_UNIT
    receipt = f"receipt_{uuid.uuid4().hex}"
    try:
        order = await payment_gateway.create_order(
            amount=amount,
            currency=SETTINGS.payment_currency,
            receipt=receipt,
            notes={"user_id": str(user_id)},
        )
    except Exception as exc:
        logger.exception("Gateway order creation failed receipt=%s", receipt)
        raise DependencyFailureError("Could not initiate order") from exc

    ORDERS_CREATED.inc()
    logger.info(
        "Order created amount=%d currency=%s receipt=%s",
        amount,
        SETTINGS.payment_currency,
        receipt,
        extra={"order_id": order.get("id")},
    )
    return order


async def _load_basket(
    store: Store, course_ids: list[str]
) -> list[tuple[str, Course | None]]:
    basket: list[tuple[str, Course | None]] = []
    seen: set[UUID] = set()
    for raw_id in course_ids:
        course_id = parse_id(raw_id)
        if course_id is None:
            basket.append((str(raw_id), None))
            continue
        if course_id in seen:
            continue
        seen.add(course_id)
        basket.append((str(raw_id), await store.courses.get(course_id)))
    return basket


# ---------------------------------------------------------------------------
# Verification and enrollment
# ---------------------------------------------------------------------------


async def verify_payment(
    store: Store,
    *,
    order_id: str | None,
    payment_id: str | None,
    signature: str | None,
    course_ids: object,
    user_id: UUID | None,
) -> EnrollmentResult:
    if (
        not order_id
        or not payment_id
        or not signature
        or not isinstance(course_ids, list)
        or not course_ids
        or user_id is None
    ):
        raise MissingFieldsError("Payment details are incomplete")

    if not signature_matches(order_id, payment_id, signature, SETTINGS.razorpay_key_secret):
        PAYMENT_VERIFICATIONS.labels(result="failed").inc()
        logger.warning(
            "Payment signature mismatch payment_id=%s",
            payment_id,
            extra={"order_id": order_id},
        )
        raise VerificationFailedError("Payment verification failed")

    PAYMENT_VERIFICATIONS.labels(result="verified").inc()
    logger.info("Payment verified payment_id=%s", payment_id, extra={"order_id": order_id})

    try:
        return await enroll_students(store, course_ids, user_id)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Enrollment failed after verified payment", extra={"order_id": order_id})
        raise EnrollmentFailedError("Enrollment failed") from exc


async def enroll_students(
    store: Store, course_ids: list[str], user_id: UUID
) -> EnrollmentResult:
    """Enroll ``user_id`` in each course, in list order."""
    account = await store.accounts.get_by_id(user_id)
    if account is None:
        logger.error("Enrollment aborted: account %s does not exist", user_id)
        raise EnrollmentFailedError("Enrollment failed")

    enrolled: list[UUID] = []
    skipped: list[UUID] = []

    for raw_id in dict.fromkeys(course_ids):
        course_id = parse_id(raw_id)
        if course_id is None:
            logger.error("Enrollment aborted: malformed course id=%s", raw_id)
            raise EnrollmentFailedError("Enrollment failed")

        already_enrolled = False
        async with store.transaction():
            course = await store.courses.get(course_id)
            if course is None:
                logger.error("Enrollment aborted: course %s not found", course_id)
                raise EnrollmentFailedError("Enrollment failed")

            if course.has_student(user_id):
                already_enrolled = True
            else:
                course = await store.courses.add_student(course_id, user_id)
                if course is None:
                    raise EnrollmentFailedError("Enrollment failed")
                progress = CourseProgress.new(course_id=course_id, user_id=user_id)
                try:
                    await store.progress.add(progress)
                except ProgressExistsError as exc:
                    logger.error("Progress record already exists course=%s", course_id)
                    raise EnrollmentFailedError("Enrollment failed") from exc
                linked = await store.accounts.link_course(user_id, course_id, progress.id)
                if linked is None:
                    raise EnrollmentFailedError("Enrollment failed")
                account = linked

        if already_enrolled:
            skipped.append(course_id)
            logger.info(
                "Already enrolled, skipping", extra={"course_id": str(course_id)}
            )
            continue

        enrolled.append(course_id)
        ENROLLMENTS.inc()
        logger.info("Enrolled in %r", course.name, extra={"course_id": str(course_id)})

        await _enqueue_email(
            to=account.email,
            subject=f"Successfully Enrolled in {course.name}",
            body=course_enrollment_email(course.name, account.first_name),
            failure_message="Enrollment failed",
        )

    return EnrollmentResult(enrolled=tuple(enrolled), skipped=tuple(skipped))


# ---------------------------------------------------------------------------
# Payment receipt email
# ---------------------------------------------------------------------------


async def send_payment_success_email(
    store: Store,
    *,
    order_id: str | None,
    payment_id: str | None,
    amount: int | None,
    user_id: UUID | None,
) -> None:
    if not order_id or not payment_id or not amount or user_id is None:
        raise MissingFieldsError("Provide all required fields")
    if amount < 0:
        raise InvalidRequestError("Amount must be positive")

    account = await store.accounts.get_by_id(user_id)
    if account is None:
        raise NotFoundError("User not found")

    await _enqueue_email(
        to=account.email,
        subject="Payment Received",
        body=payment_success_email(
            account.first_name,
            amount / SUBUNITS_PER_UNIT,
            SETTINGS.payment_currency,
            order_id,
            payment_id,
        ),
        failure_message="Could not send email",
    )


async def _enqueue_email(*, to: str, subject: str, body: str, failure_message: str) -> None:
    try:
        task = await task_queue.enqueue(
            EMAIL_QUEUE, {"to": to, "subject": subject, "body": body}
        )
    except Exception as exc:
        logger.exception("Could not queue email subject=%r", subject)
        raise DependencyFailureError(failure_message) from exc
    logger.debug("Queued email task=%s subject=%r", task.id, subject)
