from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from studynotion.api.dependencies import StoreDep, StudentDep
from studynotion.models.review import Review
from studynotion.services import reviews_service

router = APIRouter(prefix="/v1/reviews", tags=["reviews"])


class ReviewIn(BaseModel):
    course_id: str | None = Field(default=None, alias="courseId")
    rating: int | None = None
    review: str = ""


class ReviewOut(BaseModel):
    id: str
    user_id: str
    course_id: str
    rating: int
    review: str
    created_at: int

    @staticmethod
    def from_review(review: Review) -> ReviewOut:
        return ReviewOut(
            id=str(review.id),
            user_id=str(review.user_id),
            course_id=str(review.course_id),
            rating=review.rating,
            review=review.review,
            created_at=review.created_at,
        )


class ReviewCreatedOut(BaseModel):
    success: bool = True
    message: str
    review: ReviewOut


class ReviewListItem(ReviewOut):
    first_name: str
    last_name: str
    email: str
    course_name: str


class ReviewListOut(BaseModel):
    success: bool = True
    message: str
    data: list[ReviewListItem]


@router.post("", response_model=ReviewCreatedOut)
async def create_review(
    body: ReviewIn, principal: StudentDep, store: StoreDep
) -> ReviewCreatedOut:
    review = await reviews_service.create_review(
        store,
        course_id=body.course_id,
        rating=body.rating,
        review=body.review,
        user_id=principal.account_id,
    )
    return ReviewCreatedOut(
        message="Rating and Review created successfully",
        review=ReviewOut.from_review(review),
    )


@router.get("", response_model=ReviewListOut)
async def list_reviews(store: StoreDep) -> ReviewListOut:
    details = await reviews_service.list_reviews(store)
    return ReviewListOut(
        message="All reviews fetched successfully",
        data=[
            ReviewListItem(
                **ReviewOut.from_review(d.review).model_dump(),
                first_name=d.first_name,
                last_name=d.last_name,
                email=d.email,
                course_name=d.course_name,
            )
            for d in details
        ],
    )
