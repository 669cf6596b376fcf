"""Domain errors and the handlers that render them as problem details."""

from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any
from uuid import uuid4

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.workforce.core.config import get_settings
from src.workforce.core.logging import get_logger
from src.workforce.schemas.problem import FieldErrorDetail, ProblemDetail

logger = get_logger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    problem_type: str = "internal-error"
    title: str = "Internal Server Error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def extra(self) -> dict[str, Any]:
        """Additional problem properties for this error."""
        return {}


class NotFoundError(ServiceError):
    status_code = 404
    problem_type = "not-found"
    title = "Resource Not Found"

    def __init__(self, resource: str, value: object, field: str = "id"):
        self.resource = resource
        self.value = value
        self.field = field
        super().__init__(f"{resource} not found with {field}: {value}")


class DuplicateFieldError(ServiceError):
    status_code = 409
    problem_type = "duplicate-resource"
    title = "Duplicate Resource"

    def __init__(self, resource: str, field: str, value: object, detail: str | None = None):
        self.resource = resource
        self.field = field
        self.value = value
        super().__init__(detail or f"{resource} with {field} '{value}' already exists")

    def extra(self) -> dict[str, Any]:
        return {"field": self.field, "value": self.value}


class ReferencedEntityMissingError(ServiceError):
    """A soft-referenced ID does not resolve in the owning service."""

    status_code = 422
    problem_type = "referenced-entity-not-found"
    title = "Referenced Entity Not Found"

    def __init__(self, resource: str, field: str, reference_id: int):
        self.resource = resource
        self.field = field
        self.reference_id = reference_id
        super().__init__(f"Referenced {resource.lower()} not found with id: {reference_id}")

    def extra(self) -> dict[str, Any]:
        return {"field": self.field}


class DependentsExistError(ServiceError):
    status_code = 409
    problem_type = "resource-in-use"
    title = "Resource Has Dependents"

    def __init__(self, resource: str, owner_id: int, dependents: str, count: int):
        self.resource = resource
        self.owner_id = owner_id
        self.dependents = dependents
        self.count = count
        super().__init__(
            f"Cannot delete {resource.lower()} {owner_id}: {count} {dependents} still assigned. "
            f"Remove or reassign them before deleting the {resource.lower()}."
        )

    def extra(self) -> dict[str, Any]:
        return {"dependentCount": self.count}


class RemoteUnavailableError(ServiceError):
    """A fail-closed remote check could not be completed."""

    status_code = 503
    problem_type = "remote-unavailable"
    title = "Dependent Service Unavailable"

    def __init__(self, target: str, operation: str):
        self.target = target
        self.operation = operation
        super().__init__(f"The {target} service is unavailable; cannot {operation}")


class MalformedInputError(ServiceError):
    status_code = 400
    problem_type = "validation-error"
    title = "Validation Error"

    def __init__(
        self,
        errors: list[FieldErrorDetail],
        detail: str = "Validation failed for one or more fields",
    ):
        self.errors = errors
        super().__init__(detail)


def _trace_id() -> str:
    return correlation_id.get() or str(uuid4())


def problem_response(
    request: Request,
    *,
    status_code: int,
    problem_type: str,
    title: str,
    detail: str,
    errors: list[FieldErrorDetail] | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    """Render a problem detail response for the current request."""
    settings = get_settings()
    problem = ProblemDetail(
        type=f"{settings.problem_type_base}/{problem_type}",
        title=title,
        status=status_code,
        detail=detail,
        timestamp=datetime.now(UTC).isoformat(),
        trace_id=_trace_id(),
        instance=request.url.path,
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=problem.to_body(extra),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def _field_name(loc: tuple[int | str, ...]) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that render problem details with a trace id."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Request failed",
            error=type(exc).__name__,
            detail=exc.detail,
            path=request.url.path,
        )
        return problem_response(
            request,
            status_code=exc.status_code,
            problem_type=exc.problem_type,
            title=exc.title,
            detail=exc.detail,
            errors=exc.errors if isinstance(exc, MalformedInputError) else None,
            extra=exc.extra(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            FieldErrorDetail(field=_field_name(tuple(err["loc"])), message=err["msg"])
            for err in exc.errors()
        ]
        logger.warning("Validation error", path=request.url.path, error_count=len(errors))
        return problem_response(
            request,
            status_code=400,
            problem_type=MalformedInputError.problem_type,
            title=MalformedInputError.title,
            detail="Validation failed for one or more fields",
            errors=errors,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        phrase = HTTPStatus(exc.status_code).phrase
        return problem_response(
            request,
            status_code=exc.status_code,
            problem_type="http-error",
            title=phrase,
            detail=str(exc.detail),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
        )
        return problem_response(
            request,
            status_code=500,
            problem_type=ServiceError.problem_type,
            title=ServiceError.title,
            detail="An unexpected error occurred. Please try again later.",
        )
