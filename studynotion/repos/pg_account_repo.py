"""PostgreSQL implementation of AccountRepo."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from studynotion.db.tables import AccountCourseRow, AccountRow
from studynotion.models.account import Account


class PgAccountRepo:
    """Satisfies the AccountRepo Protocol using PostgreSQL via SQLAlchemy."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: UUID) -> Account | None:
        row = await self._session.get(AccountRow, user_id)
        if row is None:
            return None
        stmt = (
            select(AccountCourseRow.course_id, AccountCourseRow.progress_id)
            .where(AccountCourseRow.user_id == user_id)
            .order_by(AccountCourseRow.position)
        )
        links = (await self._session.execute(stmt)).all()
        return Account(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name or "",
            account_type=row.account_type,
            courses=tuple(link.course_id for link in links),
            course_progress=tuple(link.progress_id for link in links),
        )

    async def add(self, account: Account) -> None:
        self._session.add(
            AccountRow(
                id=account.id,
                email=account.email,
                first_name=account.first_name,
                last_name=account.last_name,
                account_type=account.account_type,
            )
        )
        await self._session.flush()

    async def link_course(
        self, user_id: UUID, course_id: UUID, progress_id: UUID
    ) -> Account | None:
        # Lock the account row so concurrent enrollments get distinct positions.
        stmt = select(AccountRow).where(AccountRow.id == user_id).with_for_update()
        if (await self._session.execute(stmt)).scalar_one_or_none() is None:
            return None

        next_position = select(
            func.coalesce(func.max(AccountCourseRow.position), 0) + 1
        ).where(AccountCourseRow.user_id == user_id)
        position = (await self._session.execute(next_position)).scalar_one()

        await self._session.execute(
            insert(AccountCourseRow)
            .values(
                user_id=user_id,
                course_id=course_id,
                progress_id=progress_id,
                position=position,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "course_id"])
        )
        return await self.get_by_id(user_id)
