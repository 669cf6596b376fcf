import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.base import RequestResponseEndpoint

from src.workforce.api.v1.router import build_api_router
from src.workforce.clients import DepartmentClient, EmployeeClient, build_http_client
from src.workforce.core.config import get_settings
from src.workforce.core.db import create_service_tables, dispose_engine
from src.workforce.core.exceptions import setup_exception_handlers
from src.workforce.core.health import setup_health_endpoint
from src.workforce.core.idempotency import (
    IdempotencyCache,
    InMemoryIdempotencyStore,
    build_idempotency_store,
)
from src.workforce.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.workforce.models.enums import ServiceName

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    service: ServiceName = app.state.service
    setup_logging(settings.debug, service.value)
    logger.info(f"Starting {settings.app_name}")

    if settings.auto_create_tables:
        await create_service_tables(service)

    # Swap in the Redis store when one is reachable
    store = await build_idempotency_store(settings)
    app.state.idempotency = IdempotencyCache(store)

    yield

    logger.info("Closing connections...")
    await app.state.http_client.aclose()
    await app.state.idempotency.store.aclose()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "employees", "description": "Employee records (employee service)"},
    {"name": "departments", "description": "Department records (department service)"},
    {"name": "projects", "description": "Project records (project service)"},
    {"name": "members", "description": "Project membership (project service)"},
]


def create_app(service: ServiceName | None = None) -> FastAPI:
    """Build the application for one record service.

    Args:
        service: Which service to serve; defaults to the SERVICE setting.
    """
    settings = get_settings()
    service = service or settings.service

    app = FastAPI(
        title=f"{settings.app_name} - {service.value} service",
        description="Employee, department and project records across independent services",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )

    # One shared HTTP client for every remote reference client
    http_client = build_http_client(settings)
    app.state.service = service
    app.state.http_client = http_client
    app.state.employee_client = EmployeeClient(
        settings.employee_service_url, http_client, settings.remote_timeout_seconds
    )
    app.state.department_client = DepartmentClient(
        settings.department_service_url, http_client, settings.remote_timeout_seconds
    )
    app.state.idempotency = IdempotencyCache(
        InMemoryIdempotencyStore(settings.idempotency_ttl_seconds)
    )

    setup_exception_handlers(app)

    @app.middleware("http")
    async def logging_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Bind request_id and service name to log context for all requests."""
        clear_request_context()
        bind_request_context(correlation_id.get(), service.value)
        try:
            response = await call_next(request)
            return response
        finally:
            clear_request_context()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Idempotency-Key", "X-Request-ID"],
    )

    # Added last so it runs outermost and the id is set before logging binds it
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(build_api_router(service))

    # Prometheus metrics instrumentation
    instrumentator = Instrumentator().instrument(app)

    # Protect /metrics endpoint if API key is configured
    if settings.metrics_api_key:
        api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

        async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
            if (
                api_key is None
                or settings.metrics_api_key is None
                or not secrets.compare_digest(api_key, settings.metrics_api_key)
            ):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Invalid or missing metrics API key",
                )

        instrumentator.expose(app, endpoint="/metrics", dependencies=[Depends(verify_metrics_key)])
    else:
        instrumentator.expose(app, endpoint="/metrics")

    setup_health_endpoint(app)

    return app


app = create_app()
