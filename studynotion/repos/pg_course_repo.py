"""PostgreSQL implementation of CourseRepo."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from studynotion.db.tables import CourseRow, CourseStudentRow, ReviewRow
from studynotion.models.course import Course


class PgCourseRepo:
    """Satisfies the CourseRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, course_id: UUID) -> Course | None:
        row = await self._session.get(CourseRow, course_id)
        if row is None:
            return None
        return await self._hydrate(row)

    async def list_all(self) -> list[Course]:
        stmt = select(CourseRow).order_by(CourseRow.created_at, CourseRow.name)
        rows = (await self._session.execute(stmt)).scalars().all()
        return [await self._hydrate(row) for row in rows]

    async def add(self, course: Course) -> None:
        self._session.add(
            CourseRow(
                id=course.id,
                name=course.name,
                description=course.description,
                price=course.price,
                category=course.category,
                instructor_id=course.instructor_id,
                created_at=course.created_at,
            )
        )
        await self._session.flush()

    async def add_student(self, course_id: UUID, user_id: UUID) -> Course | None:
        # Lock the course row so concurrent enrollments get distinct positions.
        stmt = select(CourseRow).where(CourseRow.id == course_id).with_for_update()
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        if row is None:
            return None

        next_position = select(
            func.coalesce(func.max(CourseStudentRow.position), 0) + 1
        ).where(CourseStudentRow.course_id == course_id)
        position = (await self._session.execute(next_position)).scalar_one()

        await self._session.execute(
            insert(CourseStudentRow)
            .values(course_id=course_id, user_id=user_id, position=position)
            .on_conflict_do_nothing(index_elements=["course_id", "user_id"])
        )
        return await self._hydrate(row)

    async def add_review(self, course_id: UUID, review_id: UUID) -> Course | None:
        # reviews.course_id is the reference; nothing extra to write.
        return await self.get(course_id)

    async def _hydrate(self, row: CourseRow) -> Course:
        students_stmt = (
            select(CourseStudentRow.user_id)
            .where(CourseStudentRow.course_id == row.id)
            .order_by(CourseStudentRow.position)
        )
        reviews_stmt = (
            select(ReviewRow.id)
            .where(ReviewRow.course_id == row.id)
            .order_by(ReviewRow.created_at)
        )
        students = (await self._session.execute(students_stmt)).scalars().all()
        reviews = (await self._session.execute(reviews_stmt)).scalars().all()
        return Course(
            id=row.id,
            name=row.name,
            price=row.price,
            description=row.description or "",
            category=row.category,
            instructor_id=row.instructor_id,
            students_enrolled=tuple(students),
            reviews=tuple(reviews),
            created_at=row.created_at,
        )
