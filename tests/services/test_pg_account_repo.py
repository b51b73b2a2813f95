from __future__ import annotations

import asyncio
import uuid

from sqlalchemy.dialects import postgresql

from studynotion.repos.pg_account_repo import PgAccountRepo


class _Result:
    def scalar_one_or_none(self):
        return None


class _RecordingSession:
    def __init__(self) -> None:
        self.statements: list = []

    async def execute(self, stmt):
        self.statements.append(stmt)
        return _Result()


def test_link_course_locks_account_row_before_positioning() -> None:
    session = _RecordingSession()
    repo = PgAccountRepo(session)  # type: ignore[arg-type]

    result = asyncio.run(repo.link_course(uuid.uuid4(), uuid.uuid4(), uuid.uuid4()))

    assert result is None
    [lock] = session.statements
    sql = str(lock.compile(dialect=postgresql.dialect()))
    assert "FROM accounts" in sql
    assert "FOR UPDATE" in sql
