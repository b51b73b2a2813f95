from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class CourseProgress:
    """Per (course, buyer) record of watched lectures.

    Created empty when the buyer is enrolled; at most one per pair.
    """

    id: UUID
    course_id: UUID
    user_id: UUID
    completed_videos: tuple[UUID, ...] = ()

    @staticmethod
    def new(*, course_id: UUID, user_id: UUID) -> CourseProgress:
        return CourseProgress(id=uuid4(), course_id=course_id, user_id=user_id)
