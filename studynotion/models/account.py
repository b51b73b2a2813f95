from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class Account:
    id: UUID
    email: str
    first_name: str
    last_name: str = ""
    account_type: str = "student"  # student|instructor|admin
    courses: tuple[UUID, ...] = ()
    course_progress: tuple[UUID, ...] = ()

    @staticmethod
    def new(
        *,
        email: str,
        first_name: str,
        last_name: str = "",
        account_type: str = "student",
    ) -> Account:
        return Account(
            id=uuid4(),
            email=email.strip().lower(),
            first_name=first_name,
            last_name=last_name,
            account_type=account_type,
        )
