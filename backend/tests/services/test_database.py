"""Database Session Manager: rollback + error mapping at the session boundary, readiness ping."""

import pytest
from sqlalchemy import text

from journal_coach.core.errors import DatabaseError
from journal_coach.infrastructure.database import DatabaseSessionManager


@pytest.fixture
async def manager():
    m = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    yield m
    await m.dispose()


async def test_sqlalchemy_error_leaves_as_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.code == "DATABASE_ERROR"
    assert exc.value.http_status == 503


async def test_other_errors_propagate_unchanged(manager):
    with pytest.raises(KeyError):
        async with manager.session():
            raise KeyError("boom")


async def test_ping(manager):
    assert await manager.ping() is True


async def test_ping_unreachable_database():
    m = DatabaseSessionManager("sqlite+aiosqlite:////nonexistent-dir/journal.db")
    assert await m.ping() is False
    await m.dispose()
