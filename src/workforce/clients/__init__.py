"""Clients for entities owned by other services."""

from src.workforce.clients.base import (
    Lookup,
    LookupStatus,
    RemoteReferenceClient,
    build_http_client,
)
from src.workforce.clients.department import DepartmentClient
from src.workforce.clients.employee import EmployeeClient

__all__ = [
    "DepartmentClient",
    "EmployeeClient",
    "Lookup",
    "LookupStatus",
    "RemoteReferenceClient",
    "build_http_client",
]
