"""Repository bundle plus a unit-of-work boundary.

Services take a Store and wrap each multi-entity write in
``async with store.transaction():`` so the writes land together or not
at all:

  PgStore       one AsyncSession per request; transaction() commits on
                success and rolls back on exception.
  InMemoryStore module-level dicts for dev/tests; transaction() serializes
                writers with an asyncio.Lock and restores a snapshot of
                every repo on exception.

Reads outside a transaction are allowed in both.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from studynotion.repos.account_repo import AccountRepo, InMemoryAccountRepo
from studynotion.repos.course_repo import CourseRepo, InMemoryCourseRepo
from studynotion.repos.pg_account_repo import PgAccountRepo
from studynotion.repos.pg_course_repo import PgCourseRepo
from studynotion.repos.pg_progress_repo import PgProgressRepo
from studynotion.repos.pg_review_repo import PgReviewRepo
from studynotion.repos.progress_repo import InMemoryProgressRepo, ProgressRepo
from studynotion.repos.review_repo import InMemoryReviewRepo, ReviewRepo


class Store(Protocol):
    courses: CourseRepo
    accounts: AccountRepo
    progress: ProgressRepo
    reviews: ReviewRepo

    def transaction(self) -> AbstractAsyncContextManager[None]: ...


class InMemoryStore:
    def __init__(self) -> None:
        self.courses = InMemoryCourseRepo()
        self.accounts = InMemoryAccountRepo()
        self.progress = InMemoryProgressRepo()
        self.reviews = InMemoryReviewRepo()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self._lock:
            repos = (self.courses, self.accounts, self.progress, self.reviews)
            snapshots = [repo.snapshot() for repo in repos]
            try:
                yield
            except BaseException:
                for repo, state in zip(repos, snapshots):
                    repo.restore(state)  # type: ignore[arg-type]
                raise

    def clear(self) -> None:
        self.courses = InMemoryCourseRepo()
        self.accounts = InMemoryAccountRepo()
        self.progress = InMemoryProgressRepo()
        self.reviews = InMemoryReviewRepo()


class PgStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.courses = PgCourseRepo(session)
        self.accounts = PgAccountRepo(session)
        self.progress = PgProgressRepo(session)
        self.reviews = PgReviewRepo(session)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except BaseException:
            await self._session.rollback()
            raise


memory_store = InMemoryStore()
