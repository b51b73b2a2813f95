from __future__ import annotations

from typing import Protocol
from uuid import UUID

from studynotion.models.progress import CourseProgress


class ProgressExistsError(Exception):
    """A progress record already exists for this (course, buyer) pair."""


class ProgressRepo(Protocol):
    async def get(self, progress_id: UUID) -> CourseProgress | None: ...
    async def get_for(self, user_id: UUID, course_id: UUID) -> CourseProgress | None: ...
    async def add(self, progress: CourseProgress) -> None: ...


class InMemoryProgressRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, CourseProgress] = {}

    async def get(self, progress_id: UUID) -> CourseProgress | None:
        return self._by_id.get(progress_id)

    async def get_for(self, user_id: UUID, course_id: UUID) -> CourseProgress | None:
        for p in self._by_id.values():
            if p.user_id == user_id and p.course_id == course_id:
                return p
        return None

    async def add(self, progress: CourseProgress) -> None:
        # No await between the check and the insert, so this is atomic
        # on the event loop.
        for p in self._by_id.values():
            if p.user_id == progress.user_id and p.course_id == progress.course_id:
                raise ProgressExistsError(f"{progress.course_id}:{progress.user_id}")
        self._by_id[progress.id] = progress

    def snapshot(self) -> dict[UUID, CourseProgress]:
        return dict(self._by_id)

    def restore(self, state: dict[UUID, CourseProgress]) -> None:
        self._by_id = state
