"""Process-wide collaborators created by the app factory and kept on `app.state`."""

from typing import Annotated

from fastapi import Depends, Request

from src.workforce.clients import DepartmentClient, EmployeeClient
from src.workforce.core.config import Settings, get_settings
from src.workforce.core.idempotency import IdempotencyCache


def get_employee_client(request: Request) -> EmployeeClient:
    return request.app.state.employee_client


def get_department_client(request: Request) -> DepartmentClient:
    return request.app.state.department_client


def get_idempotency_cache(request: Request) -> IdempotencyCache:
    return request.app.state.idempotency


AppSettings = Annotated[Settings, Depends(get_settings)]
EmployeeClientDep = Annotated[EmployeeClient, Depends(get_employee_client)]
DepartmentClientDep = Annotated[DepartmentClient, Depends(get_department_client)]
IdempotencyCacheDep = Annotated[IdempotencyCache, Depends(get_idempotency_cache)]
