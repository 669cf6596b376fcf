"""Employee endpoints (employee service)."""

from typing import Annotated

from fastapi import APIRouter, Header, Query, status

from src.workforce.api.dependencies import EmployeeServiceDep, IdempotencyCacheDep, Paging
from src.workforce.schemas.employee import (
    BulkCreateResult,
    BulkEmployeeCreate,
    EmployeeCreate,
    EmployeePatch,
    EmployeeRead,
    EmployeeStats,
    EmployeeUpdate,
)
from src.workforce.schemas.pagination import PageResponse

router = APIRouter(prefix="/employees", tags=["employees"])

SORTABLE = frozenset(
    {"id", "first_name", "last_name", "email", "department_id", "created_at", "updated_at"}
)

ERROR_RESPONSES = {
    400: {"description": "Malformed input"},
    409: {"description": "Email already in use"},
    422: {"description": "Referenced department does not exist"},
    503: {"description": "Department service unavailable"},
}


@router.get(
    "",
    response_model=PageResponse[EmployeeRead],
    summary="List employees",
    description="Page through employees. Text filters match case-insensitively by substring.",
)
async def list_employees(
    service: EmployeeServiceDep,
    paging: Paging,
    email: Annotated[str | None, Query()] = None,
    last_name: Annotated[str | None, Query(alias="lastName")] = None,
    department_id: Annotated[int | None, Query(alias="departmentId")] = None,
    enrich: Annotated[bool, Query(description="Attach department details")] = True,
) -> PageResponse[EmployeeRead]:
    request = paging.to_request(
        SORTABLE,
        {"email": email, "last_name": last_name, "department_id": department_id},
    )
    return await service.list_employees(request, enrich)


@router.get("/search", response_model=list[EmployeeRead], summary="Search employees")
async def search_employees(
    service: EmployeeServiceDep,
    q: Annotated[str, Query(description="Matches first name, last name or email")],
) -> list[EmployeeRead]:
    return await service.search(q)


@router.get("/stats", response_model=EmployeeStats, summary="Employee statistics")
async def employee_stats(service: EmployeeServiceDep) -> EmployeeStats:
    return await service.stats()


@router.get(
    "/by-ids",
    response_model=list[EmployeeRead],
    summary="Get employees by ids",
    description="Batch lookup used by other services. Unknown ids are omitted.",
)
async def get_employees_by_ids(
    service: EmployeeServiceDep,
    ids: Annotated[list[int] | None, Query()] = None,
) -> list[EmployeeRead]:
    return await service.get_by_ids(ids or [])


@router.get(
    "/count-by-department/{department_id}",
    response_model=int,
    summary="Count employees in a department",
)
async def count_by_department(department_id: int, service: EmployeeServiceDep) -> int:
    return await service.count_by_department(department_id)


@router.get(
    "/by-department/{department_id}",
    response_model=list[EmployeeRead],
    summary="List employees in a department",
)
async def list_by_department(
    department_id: int, service: EmployeeServiceDep
) -> list[EmployeeRead]:
    return await service.list_by_department(department_id)


@router.post(
    "",
    response_model=EmployeeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create employee",
    description=(
        "Create an employee. Repeating a request with the same Idempotency-Key "
        "returns the first result without creating another employee."
    ),
    responses=ERROR_RESPONSES,
)
async def create_employee(
    body: EmployeeCreate,
    service: EmployeeServiceDep,
    cache: IdempotencyCacheDep,
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> EmployeeRead:
    return await cache.get_or_compute(
        idempotency_key,
        lambda: service.create_employee(body),
        EmployeeRead,
        scope="employees:create",
    )


@router.post(
    "/bulk",
    response_model=BulkCreateResult,
    summary="Create employees in bulk",
    description="Create up to 100 employees; each item succeeds or fails on its own.",
)
async def bulk_create_employees(
    body: BulkEmployeeCreate, service: EmployeeServiceDep
) -> BulkCreateResult:
    return await service.bulk_create(body)


@router.get(
    "/{employee_id}",
    response_model=EmployeeRead,
    summary="Get employee",
    responses={404: {"description": "Employee not found"}},
)
async def get_employee(
    employee_id: int,
    service: EmployeeServiceDep,
    enrich: Annotated[bool, Query(description="Attach department details")] = True,
) -> EmployeeRead:
    return await service.get_employee(employee_id, enrich)


@router.get("/{employee_id}/exists", response_model=bool, summary="Check employee exists")
async def employee_exists(employee_id: int, service: EmployeeServiceDep) -> bool:
    return await service.exists(employee_id)


@router.put(
    "/{employee_id}",
    response_model=EmployeeRead,
    summary="Replace employee",
    responses={404: {"description": "Employee not found"}, **ERROR_RESPONSES},
)
async def update_employee(
    employee_id: int, body: EmployeeUpdate, service: EmployeeServiceDep
) -> EmployeeRead:
    return await service.update_employee(employee_id, body)


@router.patch(
    "/{employee_id}",
    response_model=EmployeeRead,
    summary="Update employee",
    description="Partial update; omitted or blank fields are left unchanged.",
    responses={404: {"description": "Employee not found"}, **ERROR_RESPONSES},
)
async def patch_employee(
    employee_id: int, body: EmployeePatch, service: EmployeeServiceDep
) -> EmployeeRead:
    return await service.patch_employee(employee_id, body)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete employee",
    responses={404: {"description": "Employee not found"}},
)
async def delete_employee(employee_id: int, service: EmployeeServiceDep) -> None:
    await service.delete_employee(employee_id)
