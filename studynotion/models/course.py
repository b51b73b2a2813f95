from __future__ import annotations

import time
from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class Course:
    id: UUID
    name: str
    price: int  # whole currency units; the gateway is billed in subunits
    description: str = ""
    category: str = "general"
    instructor_id: UUID | None = None
    students_enrolled: tuple[UUID, ...] = ()  # unique, enrollment order
    reviews: tuple[UUID, ...] = ()
    created_at: int = 0

    @staticmethod
    def new(
        *,
        name: str,
        price: int,
        description: str = "",
        category: str = "general",
        instructor_id: UUID | None = None,
    ) -> Course:
        if price < 0:
            raise ValueError("price must be >= 0")
        return Course(
            id=uuid4(),
            name=name,
            price=price,
            description=description,
            category=category,
            instructor_id=instructor_id,
            created_at=int(time.time()),
        )

    def has_student(self, user_id: UUID) -> bool:
        return user_id in self.students_enrolled
