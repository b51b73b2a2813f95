"""Public catalog endpoints.

GET /v1/courses                              course summaries
GET /v1/courses/{course_id}                  one course
GET /v1/courses/{course_id}/average-rating   mean rating, 0 when unrated
GET /v1/categories                           distinct categories
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from studynotion.api.dependencies import StoreDep
from studynotion.services import catalog_service, reviews_service
from studynotion.services.catalog_service import RatedCourse

router = APIRouter(tags=["courses"])


class CourseSummaryOut(BaseModel):
    id: str
    name: str
    price: int
    category: str
    students_enrolled: int
    average_rating: float

    @staticmethod
    def from_rated(rated: RatedCourse) -> CourseSummaryOut:
        c = rated.course
        return CourseSummaryOut(
            id=str(c.id),
            name=c.name,
            price=c.price,
            category=c.category,
            students_enrolled=len(c.students_enrolled),
            average_rating=rated.average_rating,
        )


class CourseDetailOut(CourseSummaryOut):
    description: str
    instructor_id: str | None
    review_count: int
    created_at: int

    @staticmethod
    def from_rated(rated: RatedCourse) -> CourseDetailOut:
        c = rated.course
        return CourseDetailOut(
            **CourseSummaryOut.from_rated(rated).model_dump(),
            description=c.description,
            instructor_id=str(c.instructor_id) if c.instructor_id else None,
            review_count=len(c.reviews),
            created_at=c.created_at,
        )


class CourseListOut(BaseModel):
    success: bool = True
    message: str
    data: list[CourseSummaryOut]


class CourseDetailResponse(BaseModel):
    success: bool = True
    message: str
    data: CourseDetailOut


class AverageRatingOut(BaseModel):
    success: bool = True
    message: str
    average_rating: float


class CategoryListOut(BaseModel):
    success: bool = True
    message: str
    data: list[str]


@router.get("/v1/courses", response_model=CourseListOut)
async def list_courses(store: StoreDep) -> CourseListOut:
    courses = await catalog_service.list_courses(store)
    return CourseListOut(
        message="All courses fetched successfully",
        data=[CourseSummaryOut.from_rated(c) for c in courses],
    )


@router.get("/v1/courses/{course_id}", response_model=CourseDetailResponse)
async def course_details(course_id: str, store: StoreDep) -> CourseDetailResponse:
    rated = await catalog_service.course_details(store, course_id)
    return CourseDetailResponse(
        message="Course details fetched successfully",
        data=CourseDetailOut.from_rated(rated),
    )


@router.get("/v1/courses/{course_id}/average-rating", response_model=AverageRatingOut)
async def average_rating(course_id: str, store: StoreDep) -> AverageRatingOut:
    value = await reviews_service.average_rating(store, course_id)
    if not value:
        return AverageRatingOut(
            message="Average rating is 0, no ratings given till now",
            average_rating=0,
        )
    return AverageRatingOut(
        message="Average rating retrieved successfully", average_rating=value
    )


@router.get("/v1/categories", response_model=CategoryListOut)
async def list_categories(store: StoreDep) -> CategoryListOut:
    return CategoryListOut(
        message="All categories fetched successfully",
        data=await catalog_service.list_categories(store),
    )
