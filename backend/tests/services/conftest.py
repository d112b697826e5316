"""Service test fixtures: async DB, FastAPI test client, in-memory collaborators.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so readiness probes see the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - bcrypt cost 4 (the minimum) in every fixture: hashing stays real but fast
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import journal_coach.infrastructure.database as db_module
import journal_coach.models  # noqa: F401
from journal_coach.db.base import Base
from journal_coach.infrastructure.credential_repository import SqlCredentialRepository
from journal_coach.infrastructure.database import DatabaseSessionManager, get_db
from journal_coach.main import app
from journal_coach.services.credential_store import CredentialStore
from journal_coach.services.tool_dispatch import ToolDispatcher
from journal_coach.services.tools_registry import build_tool_registry
from tests.services.fakes import (
    FakeCategoryService,
    FakeGoalService,
    FakeJournalService,
    InMemoryCredentialRepository,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def credential_repo():
    return InMemoryCredentialRepository()


@pytest.fixture
def credential_store(credential_repo):
    return CredentialStore(credential_repo, hash_rounds=4)


@pytest.fixture
async def sql_credential_store(test_db):
    return CredentialStore(SqlCredentialRepository(test_db), hash_rounds=4)


@pytest.fixture
def registry():
    return build_tool_registry()


@pytest.fixture
def goals():
    return FakeGoalService()


@pytest.fixture
def journal():
    return FakeJournalService()


@pytest.fixture
def categories():
    return FakeCategoryService()


@pytest.fixture
def dispatcher(registry, goals, journal, categories):
    return ToolDispatcher(registry, goals=goals, journal=journal, categories=categories)
