from __future__ import annotations

import logging
from uuid import UUID

from studynotion.core.metrics import REVIEWS_CREATED
from studynotion.models.review import MAX_RATING, MIN_RATING, Review, ReviewDetail
from studynotion.repos.review_repo import ReviewExistsError
from studynotion.repos.store import Store
from studynotion.services.errors import (
    DuplicateReviewError,
    InvalidRequestError,
    NotFoundError,
)
from studynotion.services.ids import parse_id

logger = logging.getLogger(__name__)


async def create_review(
    store: Store,
    *,
    course_id: str | None,
    rating: int | None,
    review: str,
    user_id: UUID,
) -> Review:
    """Record one rating per (course, buyer); the buyer must be enrolled.

    The pre-check gives the common case a clean 403; the store's
    uniqueness guard still rejects two concurrent submissions.
    """
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRequestError(
            f"Rating should be between {MIN_RATING} and {MAX_RATING}"
        )

    parsed = parse_id(course_id)
    course = await store.courses.get(parsed) if parsed is not None else None
    if course is None or not course.has_student(user_id):
        logger.warning("Review rejected: user not enrolled course=%s", course_id)
        raise NotFoundError("Student is not enrolled in the course")

    if await store.reviews.get_for(user_id, course.id) is not None:
        raise DuplicateReviewError("Course is already reviewed by the user")

    created = Review.new(
        user_id=user_id, course_id=course.id, rating=rating, review=review
    )
    try:
        async with store.transaction():
            await store.reviews.add(created)
            await store.courses.add_review(course.id, created.id)
    except ReviewExistsError as exc:
        logger.warning("Concurrent duplicate review rejected course=%s", course.id)
        raise DuplicateReviewError("Course is already reviewed by the user") from exc

    REVIEWS_CREATED.inc()
    logger.info(
        "Review recorded rating=%d", rating, extra={"course_id": str(course.id)}
    )
    return created


async def average_rating(store: Store, course_id: str) -> float:
    """Mean rating for the course, 0 when it has none (or does not exist)."""
    parsed = parse_id(course_id)
    if parsed is None:
        return 0
    value = await store.reviews.average_rating(parsed)
    return value if value is not None else 0


async def list_reviews(store: Store) -> list[ReviewDetail]:
    """Every review, highest rating first, with author and course name."""
    details: list[ReviewDetail] = []
    for review in await store.reviews.list_all():
        author = await store.accounts.get_by_id(review.user_id)
        course = await store.courses.get(review.course_id)
        details.append(
            ReviewDetail(
                review=review,
                first_name=author.first_name if author else "",
                last_name=author.last_name if author else "",
                email=author.email if author else "",
                course_name=course.name if course else "",
            )
        )
    return details
