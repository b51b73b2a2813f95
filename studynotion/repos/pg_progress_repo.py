"""PostgreSQL implementation of ProgressRepo."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studynotion.db.tables import CourseProgressRow
from studynotion.models.progress import CourseProgress
from studynotion.repos.progress_repo import ProgressExistsError


class PgProgressRepo:
    """Satisfies the ProgressRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, progress_id: UUID) -> CourseProgress | None:
        row = await self._session.get(CourseProgressRow, progress_id)
        return _row_to_progress(row) if row is not None else None

    async def get_for(self, user_id: UUID, course_id: UUID) -> CourseProgress | None:
        stmt = select(CourseProgressRow).where(
            CourseProgressRow.user_id == user_id,
            CourseProgressRow.course_id == course_id,
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return _row_to_progress(row) if row is not None else None

    async def add(self, progress: CourseProgress) -> None:
        self._session.add(
            CourseProgressRow(
                id=progress.id,
                course_id=progress.course_id,
                user_id=progress.user_id,
                completed_videos=list(progress.completed_videos),
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ProgressExistsError(
                f"{progress.course_id}:{progress.user_id}"
            ) from exc


def _row_to_progress(row: CourseProgressRow) -> CourseProgress:
    return CourseProgress(
        id=row.id,
        course_id=row.course_id,
        user_id=row.user_id,
        completed_videos=tuple(row.completed_videos or ()),
    )
