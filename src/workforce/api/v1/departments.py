"""Department endpoints (department service)."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.workforce.api.dependencies import DepartmentServiceDep, Paging
from src.workforce.schemas.department import (
    DepartmentCreate,
    DepartmentPatch,
    DepartmentRead,
    DepartmentUpdate,
    EmployeeSummary,
)
from src.workforce.schemas.pagination import PageResponse

router = APIRouter(prefix="/departments", tags=["departments"])

SORTABLE = frozenset({"id", "code", "name", "location", "created_at", "updated_at"})


@router.get(
    "",
    response_model=PageResponse[DepartmentRead],
    summary="List departments",
    description="Page through departments, optionally filtered by name or code.",
)
async def list_departments(
    service: DepartmentServiceDep,
    paging: Paging,
    name: Annotated[str | None, Query()] = None,
    code: Annotated[str | None, Query()] = None,
) -> PageResponse[DepartmentRead]:
    request = paging.to_request(SORTABLE, {"name": name, "code": code})
    return await service.list_departments(request)


@router.get(
    "/search",
    response_model=PageResponse[DepartmentRead],
    summary="Search departments",
)
async def search_departments(
    service: DepartmentServiceDep,
    paging: Paging,
    q: Annotated[str, Query(description="Matches name, code or description")],
) -> PageResponse[DepartmentRead]:
    return await service.search(q.strip(), paging.to_request(SORTABLE))


@router.get(
    "/by-ids",
    response_model=list[DepartmentRead],
    summary="Get departments by ids",
    description="Batch lookup used by other services. Unknown ids are omitted.",
)
async def get_departments_by_ids(
    service: DepartmentServiceDep,
    ids: Annotated[list[int] | None, Query()] = None,
) -> list[DepartmentRead]:
    return await service.get_by_ids(ids or [])


@router.get(
    "/by-code/{code}",
    response_model=DepartmentRead,
    summary="Get department by code",
    responses={404: {"description": "Department not found"}},
)
async def get_department_by_code(code: str, service: DepartmentServiceDep) -> DepartmentRead:
    return await service.get_by_code(code)


@router.get(
    "/{department_id}",
    response_model=DepartmentRead,
    summary="Get department",
    responses={404: {"description": "Department not found"}},
)
async def get_department(department_id: int, service: DepartmentServiceDep) -> DepartmentRead:
    return await service.get_department(department_id)


@router.get("/{department_id}/exists", response_model=bool, summary="Check department exists")
async def department_exists(department_id: int, service: DepartmentServiceDep) -> bool:
    return await service.exists(department_id)


@router.get(
    "/{department_id}/employees",
    response_model=list[EmployeeSummary],
    summary="List department employees",
    description="Employees reported by the employee service; empty when it is unreachable.",
    responses={404: {"description": "Department not found"}},
)
async def list_department_employees(
    department_id: int, service: DepartmentServiceDep
) -> list[EmployeeSummary]:
    return await service.list_employees(department_id)


@router.post(
    "",
    response_model=DepartmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create department",
    responses={
        400: {"description": "Malformed input"},
        409: {"description": "Code or name already in use"},
    },
)
async def create_department(
    body: DepartmentCreate, service: DepartmentServiceDep
) -> DepartmentRead:
    return await service.create_department(body)


@router.put(
    "/{department_id}",
    response_model=DepartmentRead,
    summary="Replace department",
    responses={
        404: {"description": "Department not found"},
        409: {"description": "Code or name already in use"},
    },
)
async def update_department(
    department_id: int, body: DepartmentUpdate, service: DepartmentServiceDep
) -> DepartmentRead:
    return await service.update_department(department_id, body)


@router.patch(
    "/{department_id}",
    response_model=DepartmentRead,
    summary="Update department",
    responses={
        404: {"description": "Department not found"},
        409: {"description": "Code or name already in use"},
    },
)
async def patch_department(
    department_id: int, body: DepartmentPatch, service: DepartmentServiceDep
) -> DepartmentRead:
    return await service.patch_department(department_id, body)


@router.delete(
    "/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete department",
    description="Refused while employees are still assigned to the department.",
    responses={
        404: {"description": "Department not found"},
        409: {"description": "Employees still assigned"},
        503: {"description": "Employee service unavailable"},
    },
)
async def delete_department(department_id: int, service: DepartmentServiceDep) -> None:
    await service.delete_department(department_id)
