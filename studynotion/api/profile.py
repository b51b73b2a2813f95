"""GET /v1/me/courses: the authenticated buyer's enrollments."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from studynotion.api.dependencies import StoreDep, UserDep
from studynotion.services import catalog_service

router = APIRouter(prefix="/v1/me", tags=["profile"])


class EnrolledCourseOut(BaseModel):
    course_id: str
    name: str
    category: str
    progress_id: str | None
    completed_videos: int


class EnrolledCoursesOut(BaseModel):
    success: bool = True
    message: str
    data: list[EnrolledCourseOut]


@router.get("/courses", response_model=EnrolledCoursesOut)
async def enrolled_courses(principal: UserDep, store: StoreDep) -> EnrolledCoursesOut:
    enrollments = await catalog_service.enrolled_courses(store, principal.account_id)
    return EnrolledCoursesOut(
        message="Enrolled courses fetched successfully",
        data=[
            EnrolledCourseOut(
                course_id=str(e.course.id),
                name=e.course.name,
                category=e.course.category,
                progress_id=str(e.progress.id) if e.progress else None,
                completed_videos=len(e.progress.completed_videos) if e.progress else 0,
            )
            for e in enrollments
        ],
    )
