from __future__ import annotations

from dataclasses import replace
from typing import Protocol
from uuid import UUID

from studynotion.models.account import Account


class AccountRepo(Protocol):
    async def get_by_id(self, user_id: UUID) -> Account | None: ...
    async def add(self, account: Account) -> None: ...
    async def link_course(
        self, user_id: UUID, course_id: UUID, progress_id: UUID
    ) -> Account | None: ...


class InMemoryAccountRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Account] = {}

    async def get_by_id(self, user_id: UUID) -> Account | None:
        return self._by_id.get(user_id)

    async def add(self, account: Account) -> None:
        if any(a.email == account.email for a in self._by_id.values()):
            raise ValueError("email already exists")
        self._by_id[account.id] = account

    async def link_course(
        self, user_id: UUID, course_id: UUID, progress_id: UUID
    ) -> Account | None:
        """Record the course and its progress record on the buyer's profile."""
        account = self._by_id.get(user_id)
        if account is None:
            return None
        if course_id in account.courses:
            return account
        updated = replace(
            account,
            courses=(*account.courses, course_id),
            course_progress=(*account.course_progress, progress_id),
        )
        self._by_id[user_id] = updated
        return updated

    def snapshot(self) -> dict[UUID, Account]:
        return dict(self._by_id)

    def restore(self, state: dict[UUID, Account]) -> None:
        self._by_id = state
