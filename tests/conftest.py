from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from studynotion.main import app
from studynotion.models.account import Account
from studynotion.models.course import Course
from studynotion.models.progress import CourseProgress
from studynotion.repos.store import memory_store
from studynotion.services import token_service
from studynotion.services.mailer import mailer
from studynotion.services.payment_gateway import payment_gateway
from studynotion.services.task_queue import task_queue

# Ensure repo root is on sys.path so `import studynotion` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reset_store() -> None:
    """Fresh in-memory repositories for every test."""
    memory_store.clear()


@pytest.fixture(autouse=True)
def reset_task_queue() -> None:
    """Clear task queues between tests."""
    if hasattr(task_queue, "_queues"):
        task_queue._queues.clear()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def reset_payment_gateway() -> None:
    if hasattr(payment_gateway, "orders"):
        payment_gateway.orders.clear()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def reset_outbox() -> None:
    if hasattr(mailer, "outbox"):
        mailer.outbox.clear()  # type: ignore[union-attr]


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(user_id: str, roles: list[str] | None = None) -> str:
    """Create a valid HS256 JWT for testing."""
    return token_service.create_access_token(sub=user_id, roles=roles)


def auth_headers(account: Account, roles: list[str] | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(str(account.id), roles)}"}


# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def create_account(
    email: str = "buyer@example.com",
    first_name: str = "Asha",
    last_name: str = "Rao",
    account_type: str = "student",
) -> Account:
    account = Account.new(
        email=email,
        first_name=first_name,
        last_name=last_name,
        account_type=account_type,
    )
    asyncio.run(memory_store.accounts.add(account))
    return account


def create_course(
    name: str = "Python Basics",
    price: int = 500,
    category: str = "programming",
) -> Course:
    course = Course.new(name=name, price=price, category=category)
    asyncio.run(memory_store.courses.add(course))
    return course


def enroll(account: Account, course: Course) -> CourseProgress:
    """Enroll directly through the repositories, bypassing checkout."""

    async def _enroll() -> CourseProgress:
        progress = CourseProgress.new(course_id=course.id, user_id=account.id)
        await memory_store.courses.add_student(course.id, account.id)
        await memory_store.progress.add(progress)
        await memory_store.accounts.link_course(account.id, course.id, progress.id)
        return progress

    return asyncio.run(_enroll())


def get_course(course: Course) -> Course:
    found = asyncio.run(memory_store.courses.get(course.id))
    assert found is not None
    return found


def get_account(account: Account) -> Account:
    found = asyncio.run(memory_store.accounts.get_by_id(account.id))
    assert found is not None
    return found


def queued_emails() -> list[dict]:
    return [t.payload for t in task_queue._queues.get("email", [])]  # type: ignore[union-attr]


@pytest.fixture
def buyer() -> Account:
    return create_account()


@pytest.fixture
def buyer_headers(buyer: Account) -> dict[str, str]:
    return auth_headers(buyer)
