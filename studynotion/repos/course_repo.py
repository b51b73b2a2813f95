from __future__ import annotations

from dataclasses import replace
from typing import Protocol
from uuid import UUID

from studynotion.models.course import Course


class CourseRepo(Protocol):
    async def get(self, course_id: UUID) -> Course | None: ...
    async def list_all(self) -> list[Course]: ...
    async def add(self, course: Course) -> None: ...
    async def add_student(self, course_id: UUID, user_id: UUID) -> Course | None: ...
    async def add_review(self, course_id: UUID, review_id: UUID) -> Course | None: ...


class InMemoryCourseRepo:
    def __init__(self) -> None:
        self._by_id: dict[UUID, Course] = {}

    async def get(self, course_id: UUID) -> Course | None:
        return self._by_id.get(course_id)

    async def list_all(self) -> list[Course]:
        return sorted(self._by_id.values(), key=lambda c: (c.created_at, c.name))

    async def add(self, course: Course) -> None:
        if course.id in self._by_id:
            raise ValueError("course already exists")
        self._by_id[course.id] = course

    async def add_student(self, course_id: UUID, user_id: UUID) -> Course | None:
        """Append ``user_id`` to the enrolled set; no-op if already present.

        Returns the updated course, or None when the course does not exist.
        """
        course = self._by_id.get(course_id)
        if course is None:
            return None
        if course.has_student(user_id):
            return course
        updated = replace(course, students_enrolled=(*course.students_enrolled, user_id))
        self._by_id[course_id] = updated
        return updated

    async def add_review(self, course_id: UUID, review_id: UUID) -> Course | None:
        course = self._by_id.get(course_id)
        if course is None:
            return None
        updated = replace(course, reviews=(*course.reviews, review_id))
        self._by_id[course_id] = updated
        return updated

    def snapshot(self) -> dict[UUID, Course]:
        return dict(self._by_id)

    def restore(self, state: dict[UUID, Course]) -> None:
        self._by_id = state
