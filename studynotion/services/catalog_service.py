"""Read-only catalog queries and the buyer's own enrollments."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from studynotion.models.course import Course
from studynotion.models.progress import CourseProgress
from studynotion.repos.store import Store
from studynotion.services.errors import NotFoundError
from studynotion.services.ids import parse_id


@dataclass(frozen=True, slots=True)
class RatedCourse:
    course: Course
    average_rating: float


@dataclass(frozen=True, slots=True)
class Enrollment:
    course: Course
    progress: CourseProgress | None


async def list_courses(store: Store) -> list[RatedCourse]:
    return [
        RatedCourse(course=c, average_rating=await _average(store, c.id))
        for c in await store.courses.list_all()
    ]


async def course_details(store: Store, course_id: str) -> RatedCourse:
    parsed = parse_id(course_id)
    course = await store.courses.get(parsed) if parsed is not None else None
    if course is None:
        raise NotFoundError(f"Could not find course {course_id}")
    return RatedCourse(course=course, average_rating=await _average(store, course.id))


async def list_categories(store: Store) -> list[str]:
    return sorted({c.category for c in await store.courses.list_all()})


async def enrolled_courses(store: Store, user_id: UUID) -> list[Enrollment]:
    """Courses on the buyer's profile, in enrollment order."""
    account = await store.accounts.get_by_id(user_id)
    if account is None:
        raise NotFoundError("User not found")

    enrollments: list[Enrollment] = []
    for course_id in account.courses:
        course = await store.courses.get(course_id)
        if course is None:
            continue
        progress = await store.progress.get_for(user_id, course_id)
        enrollments.append(Enrollment(course=course, progress=progress))
    return enrollments


async def _average(store: Store, course_id: UUID) -> float:
    value = await store.reviews.average_rating(course_id)
    return value if value is not None else 0
