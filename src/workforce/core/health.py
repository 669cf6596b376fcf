"""Health endpoint for one record service.

Only the service's own database decides between healthy and unhealthy. An
unreachable Redis idempotency store makes the service "degraded". Remote
services are listed as configured but never checked, so an outage elsewhere
does not take this service out of rotation.
"""

import time
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.api.dependencies.db import get_db_session
from src.workforce.core.config import get_settings
from src.workforce.core.idempotency import IdempotencyStore, RedisIdempotencyStore
from src.workforce.core.logging import get_logger

logger = get_logger(__name__)

HEALTH_CACHE_TTL = 10  # seconds


@dataclass
class _CachedReport:
    report: dict[str, Any]
    checked_at: float


_cached: _CachedReport | None = None


def reset_health_cache() -> None:
    """Forget the last report (for testing)."""
    global _cached
    _cached = None


async def _check_database(session: AsyncSession) -> str:
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Health check: database unreachable", error=str(e))
        return f"unhealthy: {e!s}"
    return "healthy"


async def _check_store(store: IdempotencyStore) -> str:
    if not isinstance(store, RedisIdempotencyStore):
        return "memory"
    try:
        await store.redis.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning("Health check: Redis unreachable", error=str(e))
        return f"redis unhealthy: {e!s}"
    return "redis"


def _respond(report: dict[str, Any]) -> JSONResponse:
    return JSONResponse(content=report, status_code=503 if report["status"] == "unhealthy" else 200)


def setup_health_endpoint(app: FastAPI) -> None:
    """Register `/health`; results are reused for `HEALTH_CACHE_TTL` seconds."""

    @app.get("/health")
    async def health(
        session: Annotated[AsyncSession, Depends(get_db_session)],
    ) -> JSONResponse:
        global _cached

        now = time.time()
        if _cached is not None and now - _cached.checked_at < HEALTH_CACHE_TTL:
            return _respond(
                _cached.report
                | {"cached": True, "cache_age_seconds": round(now - _cached.checked_at, 1)}
            )

        settings = get_settings()
        database = await _check_database(session)
        store = await _check_store(app.state.idempotency.store)

        if database != "healthy":
            status = "unhealthy"
        elif store.startswith("redis "):
            status = "degraded"
        else:
            status = "healthy"

        report: dict[str, Any] = {
            "status": status,
            "service": app.state.service.value,
            "database": database,
            "idempotency_store": store,
            "remotes": {
                "employee": settings.employee_service_url,
                "department": settings.department_service_url,
            },
            "cached": False,
            "timestamp": now,
        }
        _cached = _CachedReport(report, now)
        return _respond(report)
