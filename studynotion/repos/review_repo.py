from __future__ import annotations

from typing import Protocol
from uuid import UUID

from studynotion.models.review import Review


class ReviewExistsError(Exception):
    """The buyer already reviewed this course."""


class ReviewRepo(Protocol):
    async def get_for(self, user_id: UUID, course_id: UUID) -> Review | None: ...
    async def add(self, review: Review) -> None: ...
    async def average_rating(self, course_id: UUID) -> float | None: ...
    async def list_all(self) -> list[Review]: ...


class InMemoryReviewRepo:
    def __init__(self) -> None:
        self._by_pair: dict[tuple[UUID, UUID], Review] = {}

    async def get_for(self, user_id: UUID, course_id: UUID) -> Review | None:
        return self._by_pair.get((user_id, course_id))

    async def add(self, review: Review) -> None:
        key = (review.user_id, review.course_id)
        if key in self._by_pair:
            raise ReviewExistsError(f"{review.course_id}:{review.user_id}")
        self._by_pair[key] = review

    async def average_rating(self, course_id: UUID) -> float | None:
        ratings = [r.rating for r in self._by_pair.values() if r.course_id == course_id]
        if not ratings:
            return None
        return sum(ratings) / len(ratings)

    async def list_all(self) -> list[Review]:
        """Highest rating first; ties keep insertion order."""
        return sorted(self._by_pair.values(), key=lambda r: r.rating, reverse=True)

    def snapshot(self) -> dict[tuple[UUID, UUID], Review]:
        return dict(self._by_pair)

    def restore(self, state: dict[tuple[UUID, UUID], Review]) -> None:
        self._by_pair = state
