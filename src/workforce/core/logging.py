"""Structured logging for the record services."""

import logging
import sys

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from structlog.typing import EventDict, Processor, WrappedLogger

QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


def _add_service(service: str) -> Processor:
    """Stamp every event with the service name, including startup and shutdown logs."""

    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return processor


def _build_processors(debug: bool, service: str | None) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if service:
        processors.append(_add_service(service))

    if debug:
        return processors + [structlog.dev.ConsoleRenderer(colors=True)]
    return processors + [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(debug: bool = False, service: str | None = None) -> None:
    """Configure structlog.

    Args:
        debug: Colored console output when True, JSON lines otherwise.
        service: Name of the record service this process runs.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    structlog.configure(
        processors=_build_processors(debug, service),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Remote calls are logged by the reference clients themselves
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None, service: str | None = None) -> None:
    """Bind the correlation id and service name to subsequent log calls.

    None values are not bound.
    """
    if request_id:
        bind_contextvars(request_id=request_id)
    if service:
        bind_contextvars(service=service)


def clear_request_context() -> None:
    clear_contextvars()
