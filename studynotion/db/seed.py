"""Sample catalog for development against the in-memory store."""

from __future__ import annotations

import logging
import time
from uuid import UUID

from studynotion.models.account import Account
from studynotion.models.course import Course
from studynotion.repos.store import Store

logger = logging.getLogger(__name__)

DEMO_STUDENT_ID = UUID("00000000-0000-0000-0000-0000000000a1")
DEMO_INSTRUCTOR_ID = UUID("00000000-0000-0000-0000-0000000000b1")

_COURSES = [
    ("00000000-0000-0000-0000-000000000c01", "Python for Data Science", 499, "data-science"),
    ("00000000-0000-0000-0000-000000000c02", "FastAPI from Scratch", 699, "web-development"),
    ("00000000-0000-0000-0000-000000000c03", "Intro to Machine Learning", 999, "data-science"),
]


async def seed_demo_data(store: Store) -> None:
    """Insert a demo student, an instructor and three courses. Idempotent."""
    if await store.accounts.get_by_id(DEMO_STUDENT_ID) is not None:
        return

    now = int(time.time())
    async with store.transaction():
        await store.accounts.add(
            Account(
                id=DEMO_STUDENT_ID,
                email="student@studynotion.dev",
                first_name="Demo",
                last_name="Student",
            )
        )
        await store.accounts.add(
            Account(
                id=DEMO_INSTRUCTOR_ID,
                email="instructor@studynotion.dev",
                first_name="Demo",
                last_name="Instructor",
                account_type="instructor",
            )
        )
        for offset, (course_id, name, price, category) in enumerate(_COURSES):
            await store.courses.add(
                Course(
                    id=UUID(course_id),
                    name=name,
                    price=price,
                    category=category,
                    instructor_id=DEMO_INSTRUCTOR_ID,
                    created_at=now + offset,
                )
            )
    logger.info("Seeded demo catalog with %d courses", len(_COURSES))
