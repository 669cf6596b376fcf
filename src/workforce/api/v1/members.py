"""Project member endpoints (project service)."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.workforce.api.dependencies import MemberServiceDep
from src.workforce.schemas.project import (
    BulkMemberCreate,
    BulkMemberResult,
    MemberCreate,
    ProjectMemberRead,
)

router = APIRouter(prefix="/projects/{project_id}/members", tags=["members"])

Enrich = Annotated[bool, Query(description="Attach employee details")]


@router.get(
    "",
    response_model=list[ProjectMemberRead],
    summary="List project members",
    responses={404: {"description": "Project not found"}},
)
async def list_members(
    project_id: int, service: MemberServiceDep, enrich: Enrich = False
) -> list[ProjectMemberRead]:
    return await service.list_members(project_id, enrich)


@router.post(
    "/bulk",
    response_model=BulkMemberResult,
    summary="Add members in bulk",
    description="Add up to 100 members; each item succeeds or fails on its own.",
    responses={404: {"description": "Project not found"}},
)
async def bulk_add_members(
    project_id: int, body: BulkMemberCreate, service: MemberServiceDep
) -> BulkMemberResult:
    return await service.bulk_add(project_id, body)


@router.get(
    "/{employee_id}",
    response_model=ProjectMemberRead,
    summary="Get project member",
    responses={404: {"description": "Project or member not found"}},
)
async def get_member(
    project_id: int, employee_id: int, service: MemberServiceDep, enrich: Enrich = False
) -> ProjectMemberRead:
    return await service.get_member(project_id, employee_id, enrich)


@router.post(
    "",
    response_model=ProjectMemberRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add project member",
    responses={
        400: {"description": "Malformed input"},
        404: {"description": "Project not found"},
        409: {"description": "Employee already a member"},
        422: {"description": "Employee does not exist"},
        503: {"description": "Employee service unavailable"},
    },
)
async def add_member(
    project_id: int, body: MemberCreate, service: MemberServiceDep
) -> ProjectMemberRead:
    return await service.add_member(project_id, body)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove project member",
    responses={404: {"description": "Project or member not found"}},
)
async def remove_member(project_id: int, employee_id: int, service: MemberServiceDep) -> None:
    await service.remove_member(project_id, employee_id)
