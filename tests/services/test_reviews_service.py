from __future__ import annotations

import asyncio

import pytest

from studynotion.repos.store import memory_store
from studynotion.services.errors import DuplicateReviewError, InvalidRequestError
from studynotion.services.reviews_service import average_rating, create_review
from tests.conftest import create_account, create_course, enroll, get_course


def test_store_rejects_duplicate_when_precheck_is_bypassed(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Two racing submissions both pass the pre-check; the store stops one."""
    account = create_account()
    course = create_course()
    enroll(account, course)

    async def _never_found(*_args):
        return None

    monkeypatch.setattr(memory_store.reviews, "get_for", _never_found)

    async def _twice() -> None:
        await create_review(
            memory_store, course_id=str(course.id), rating=5, review="a", user_id=account.id
        )
        await create_review(
            memory_store, course_id=str(course.id), rating=1, review="b", user_id=account.id
        )

    with pytest.raises(DuplicateReviewError):
        asyncio.run(_twice())

    assert len(get_course(course).reviews) == 1
    assert asyncio.run(average_rating(memory_store, str(course.id))) == 5


def test_missing_rating_is_invalid() -> None:
    account = create_account()
    with pytest.raises(InvalidRequestError, match="Rating should be between 1 and 5"):
        asyncio.run(
            create_review(
                memory_store, course_id=None, rating=None, review="", user_id=account.id
            )
        )


def test_average_rating_of_malformed_course_id_is_zero() -> None:
    assert asyncio.run(average_rating(memory_store, "not-a-uuid")) == 0
