"""PostgreSQL implementation of ReviewRepo.

The (user_id, course_id) unique constraint is what makes "one review per
buyer per course" hold under concurrent requests; the service's pre-check
only produces a friendlier error in the common case.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studynotion.db.tables import ReviewRow
from studynotion.models.review import Review
from studynotion.repos.review_repo import ReviewExistsError


class PgReviewRepo:
    """Satisfies the ReviewRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for(self, user_id: UUID, course_id: UUID) -> Review | None:
        stmt = select(ReviewRow).where(
            ReviewRow.user_id == user_id, ReviewRow.course_id == course_id
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_review(row) if row is not None else None

    async def add(self, review: Review) -> None:
        self._session.add(
            ReviewRow(
                id=review.id,
                user_id=review.user_id,
                course_id=review.course_id,
                rating=review.rating,
                review=review.review,
                created_at=review.created_at,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ReviewExistsError(f"{review.course_id}:{review.user_id}") from exc

    async def average_rating(self, course_id: UUID) -> float | None:
        stmt = select(func.avg(ReviewRow.rating)).where(ReviewRow.course_id == course_id)
        value = (await self._session.execute(stmt)).scalar_one_or_none()
        return float(value) if value is not None else None

    async def list_all(self) -> list[Review]:
        stmt = select(ReviewRow).order_by(ReviewRow.rating.desc(), ReviewRow.created_at)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [_row_to_review(row) for row in rows]


def _row_to_review(row: ReviewRow) -> Review:
    return Review(
        id=row.id,
        user_id=row.user_id,
        course_id=row.course_id,
        rating=row.rating,
        review=row.review or "",
        created_at=row.created_at,
    )
