"""FastAPI dependency injection definitions.

Re-exports all dependencies.
"""

# Database
from src.workforce.api.dependencies.db import DBSession, get_db_session

# Pagination
from src.workforce.api.dependencies.pagination import PageParams, Paging, get_page_params

# Repositories
from src.workforce.api.dependencies.repositories import (
    DepartmentRepo,
    EmployeeRepo,
    MemberRepo,
    ProjectRepo,
    get_department_repository,
    get_employee_repository,
    get_member_repository,
    get_project_repository,
)

# Services
from src.workforce.api.dependencies.services import (
    DepartmentServiceDep,
    EmployeeServiceDep,
    MemberServiceDep,
    ProjectServiceDep,
    get_department_service,
    get_employee_service,
    get_member_service,
    get_project_service,
)

# App state
from src.workforce.api.dependencies.state import (
    AppSettings,
    DepartmentClientDep,
    EmployeeClientDep,
    IdempotencyCacheDep,
    get_department_client,
    get_employee_client,
    get_idempotency_cache,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Pagination
    "PageParams",
    "Paging",
    "get_page_params",
    # App state
    "AppSettings",
    "DepartmentClientDep",
    "EmployeeClientDep",
    "IdempotencyCacheDep",
    "get_department_client",
    "get_employee_client",
    "get_idempotency_cache",
    # Repositories
    "DepartmentRepo",
    "EmployeeRepo",
    "MemberRepo",
    "ProjectRepo",
    "get_department_repository",
    "get_employee_repository",
    "get_member_repository",
    "get_project_repository",
    # Services
    "DepartmentServiceDep",
    "EmployeeServiceDep",
    "MemberServiceDep",
    "ProjectServiceDep",
    "get_department_service",
    "get_employee_service",
    "get_member_service",
    "get_project_service",
]
