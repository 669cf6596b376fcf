"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from src.workforce.core.config import get_settings
from src.workforce.core.logging import get_logger
from src.workforce.models import SERVICE_TABLES
from src.workforce.models.enums import ServiceName

logger = get_logger(__name__)

_engine: AsyncEngine | None = None


def _engine_kwargs(database_url: str) -> dict[str, Any]:
    """Pool options; SQLite drivers do not accept pool sizing."""
    if database_url.startswith("sqlite"):
        return {}
    settings = get_settings()
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            **_engine_kwargs(settings.database_url),
        )
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None


@asynccontextmanager
async def get_session(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        engine: Optional engine override for testing.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


def tables_for(service: ServiceName) -> list[Table]:
    """Tables owned by a record service."""
    names = SERVICE_TABLES[service]
    return [SQLModel.metadata.tables[name] for name in names]


async def create_service_tables(service: ServiceName, engine: AsyncEngine | None = None) -> None:
    """Create only the tables the given service owns."""
    if engine is None:
        engine = get_engine()

    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all, tables=tables_for(service))
    logger.info("Service tables ready", tables=SERVICE_TABLES[service])
