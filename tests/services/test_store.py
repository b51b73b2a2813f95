from __future__ import annotations

import asyncio

import pytest

from studynotion.models.course import Course
from studynotion.models.progress import CourseProgress
from studynotion.repos.progress_repo import ProgressExistsError
from studynotion.repos.store import InMemoryStore


def test_transaction_commits_all_writes() -> None:
    store = InMemoryStore()
    course = Course.new(name="Atomic", price=100)

    async def _run() -> None:
        async with store.transaction():
            await store.courses.add(course)
            await store.progress.add(CourseProgress.new(course_id=course.id, user_id=course.id))

    asyncio.run(_run())

    assert asyncio.run(store.courses.get(course.id)) is not None
    assert len(store.progress.snapshot()) == 1


def test_transaction_restores_every_repo_on_error() -> None:
    store = InMemoryStore()
    course = Course.new(name="Atomic", price=100)

    async def _run() -> None:
        async with store.transaction():
            await store.courses.add(course)
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(_run())

    assert asyncio.run(store.courses.get(course.id)) is None


def test_progress_is_unique_per_course_and_buyer() -> None:
    store = InMemoryStore()
    course = Course.new(name="Once", price=0)

    async def _run() -> None:
        await store.progress.add(CourseProgress.new(course_id=course.id, user_id=course.id))
        await store.progress.add(CourseProgress.new(course_id=course.id, user_id=course.id))

    with pytest.raises(ProgressExistsError):
        asyncio.run(_run())


def test_add_student_is_idempotent() -> None:
    store = InMemoryStore()
    course = Course.new(name="Set", price=0)

    async def _run() -> tuple:
        await store.courses.add(course)
        await store.courses.add_student(course.id, course.id)
        updated = await store.courses.add_student(course.id, course.id)
        return updated.students_enrolled if updated else ()

    assert asyncio.run(_run()) == (course.id,)


def test_course_rejects_negative_price() -> None:
    with pytest.raises(ValueError, match="price"):
        Course.new(name="Broken", price=-1)
