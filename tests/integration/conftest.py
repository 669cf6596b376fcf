"""Integration test fixtures for the database and the per-service API clients.

Each service app runs over ASGITransport against a shared in-memory SQLite
database. The remote services an app calls are served by `FakeRemote`
through httpx.MockTransport, so tests control what the other side answers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from src.workforce.api.dependencies.db import get_db_session
from src.workforce.core.config import Settings, get_settings
from src.workforce.core.db import create_service_tables, get_session
from src.workforce.main import create_app
from src.workforce.models.enums import ServiceName
from tests.fakes import FakeRemote


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory database holding the tables of all three services."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with foreign keys switched on
    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    for service in ServiceName:
        await create_service_tables(service, test_engine)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for asserting on stored rows directly."""
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def settings() -> Settings:
    """Per-test settings; tests may change policies before making requests."""
    return Settings()


@asynccontextmanager
async def service_client(
    service: ServiceName,
    engine: AsyncEngine,
    remote: FakeRemote,
    settings: Settings,
) -> AsyncGenerator[AsyncClient]:
    app = create_app(service)

    await app.state.http_client.aclose()
    http = remote.http_client()
    app.state.http_client = http
    app.state.employee_client = remote.employee_client(http)
    app.state.department_client = remote.department_client(http)

    async def _session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_settings] = lambda: settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    await http.aclose()


@pytest.fixture
async def employee_api(
    engine: AsyncEngine, remote: FakeRemote, settings: Settings
) -> AsyncGenerator[AsyncClient]:
    async with service_client(ServiceName.EMPLOYEE, engine, remote, settings) as client:
        yield client


@pytest.fixture
async def department_api(
    engine: AsyncEngine, remote: FakeRemote, settings: Settings
) -> AsyncGenerator[AsyncClient]:
    async with service_client(ServiceName.DEPARTMENT, engine, remote, settings) as client:
        yield client


@pytest.fixture
async def project_api(
    engine: AsyncEngine, remote: FakeRemote, settings: Settings
) -> AsyncGenerator[AsyncClient]:
    async with service_client(ServiceName.PROJECT, engine, remote, settings) as client:
        yield client

