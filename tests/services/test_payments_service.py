from __future__ import annotations

import asyncio
import hashlib
import hmac
import uuid

import pytest

from studynotion.repos.store import memory_store
from studynotion.services.errors import (
    EnrollmentFailedError,
    MissingFieldsError,
    VerificationFailedError,
)
from studynotion.services.payments_service import (
    compute_signature,
    enroll_students,
    signature_matches,
    verify_payment,
)
from tests.conftest import create_account, create_course, get_course, queued_emails

# ---- signature ----


def test_signature_is_hex_hmac_sha256_of_order_and_payment() -> None:
    expected = hmac.new(b"s3cret", b"order_1|pay_1", hashlib.sha256).hexdigest()
    assert compute_signature("order_1", "pay_1", "s3cret") == expected


def test_signature_is_deterministic() -> None:
    assert compute_signature("o", "p", "k") == compute_signature("o", "p", "k")


@pytest.mark.parametrize(
    "order_id, payment_id, secret",
    [("order_2", "pay_1", "k"), ("order_1", "pay_2", "k"), ("order_1", "pay_1", "other")],
)
def test_signature_changes_with_any_input(order_id: str, payment_id: str, secret: str) -> None:
    assert compute_signature(order_id, payment_id, secret) != compute_signature(
        "order_1", "pay_1", "k"
    )


def test_signature_matches_rejects_non_ascii_without_raising() -> None:
    assert signature_matches("order_1", "pay_1", "ünïcode", "k") is False


# ---- verify_payment ----


def test_verify_payment_requires_buyer_identity() -> None:
    with pytest.raises(MissingFieldsError):
        asyncio.run(
            verify_payment(
                memory_store,
                order_id="o",
                payment_id="p",
                signature=compute_signature("o", "p", "k"),
                course_ids=[str(uuid.uuid4())],
                user_id=None,
            )
        )


def test_verify_payment_bad_signature_raises() -> None:
    account = create_account()
    with pytest.raises(VerificationFailedError):
        asyncio.run(
            verify_payment(
                memory_store,
                order_id="o",
                payment_id="p",
                signature="deadbeef",
                course_ids=[str(uuid.uuid4())],
                user_id=account.id,
            )
        )


# ---- enroll_students ----


def test_enroll_students_reports_enrolled_and_skipped() -> None:
    account = create_account()
    c1 = create_course(name="One")
    c2 = create_course(name="Two")

    first = asyncio.run(enroll_students(memory_store, [str(c1.id)], account.id))
    second = asyncio.run(enroll_students(memory_store, [str(c1.id), str(c2.id)], account.id))

    assert first.enrolled == (c1.id,)
    assert second.enrolled == (c2.id,)
    assert second.skipped == (c1.id,)
    assert len(queued_emails()) == 2


def test_enroll_students_malformed_id_fails_before_writing() -> None:
    account = create_account()
    course = create_course()
    with pytest.raises(EnrollmentFailedError):
        asyncio.run(enroll_students(memory_store, ["bogus", str(course.id)], account.id))
    assert get_course(course).students_enrolled == ()


def test_enroll_students_rolls_back_course_when_link_fails(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    account = create_account()
    course = create_course()

    async def _lost_account(*_args):
        return None

    monkeypatch.setattr(memory_store.accounts, "link_course", _lost_account)

    with pytest.raises(EnrollmentFailedError):
        asyncio.run(enroll_students(memory_store, [str(course.id)], account.id))

    assert get_course(course).students_enrolled == ()
    assert memory_store.progress.snapshot() == {}
    assert queued_emails() == []
