from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import UUID, uuid4

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True, slots=True)
class Review:
    id: UUID
    user_id: UUID
    course_id: UUID
    rating: int
    review: str
    created_at: int

    @staticmethod
    def new(*, user_id: UUID, course_id: UUID, rating: int, review: str) -> Review:
        return Review(
            id=uuid4(),
            user_id=user_id,
            course_id=course_id,
            rating=rating,
            review=review,
            created_at=int(time.time()),
        )


@dataclass(frozen=True, slots=True)
class ReviewDetail:
    """A review joined with its author and course, for public listings."""

    review: Review
    first_name: str
    last_name: str
    email: str
    course_name: str
