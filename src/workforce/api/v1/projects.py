"""Project endpoints (project service)."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Query, status

from src.workforce.api.dependencies import Paging, ProjectServiceDep
from src.workforce.models.enums import ProjectStatus
from src.workforce.schemas.pagination import PageResponse
from src.workforce.schemas.project import (
    ProjectCreate,
    ProjectPatch,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])

SORTABLE = frozenset(
    {"id", "code", "name", "status", "start_date", "end_date", "created_at", "updated_at"}
)


@router.get(
    "",
    response_model=PageResponse[ProjectRead],
    summary="List projects",
    description="Page through projects with their members.",
)
async def list_projects(
    service: ProjectServiceDep,
    paging: Paging,
    status_filter: Annotated[ProjectStatus | None, Query(alias="status")] = None,
    code: Annotated[str | None, Query()] = None,
    name: Annotated[str | None, Query()] = None,
    start_from: Annotated[date | None, Query(alias="from", description="Starts on/after")] = None,
    end_to: Annotated[date | None, Query(alias="to", description="Ends on/before")] = None,
) -> PageResponse[ProjectRead]:
    request = paging.to_request(
        SORTABLE,
        {
            "status": status_filter,
            "code": code,
            "name": name,
            "start_from": start_from,
            "end_to": end_to,
        },
    )
    return await service.list_projects(request)


@router.get("/stats", response_model=ProjectStats, summary="Project statistics")
async def project_stats(service: ProjectServiceDep) -> ProjectStats:
    return await service.stats()


@router.get(
    "/by-code/{code}",
    response_model=ProjectRead,
    summary="Get project by code",
    responses={404: {"description": "Project not found"}},
)
async def get_project_by_code(code: str, service: ProjectServiceDep) -> ProjectRead:
    return await service.get_by_code(code)


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(project_id: int, service: ProjectServiceDep) -> ProjectRead:
    return await service.get_project(project_id)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        400: {"description": "Malformed input"},
        409: {"description": "Code already in use"},
    },
)
async def create_project(body: ProjectCreate, service: ProjectServiceDep) -> ProjectRead:
    return await service.create_project(body)


@router.put(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Replace project",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Code already in use"},
    },
)
async def update_project(
    project_id: int, body: ProjectUpdate, service: ProjectServiceDep
) -> ProjectRead:
    return await service.update_project(project_id, body)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={
        400: {"description": "Merged date range is invalid"},
        404: {"description": "Project not found"},
        409: {"description": "Code already in use"},
    },
)
async def patch_project(
    project_id: int, body: ProjectPatch, service: ProjectServiceDep
) -> ProjectRead:
    return await service.patch_project(project_id, body)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Refused while the project still has members.",
    responses={
        404: {"description": "Project not found"},
        409: {"description": "Project still has members"},
    },
)
async def delete_project(project_id: int, service: ProjectServiceDep) -> None:
    await service.delete_project(project_id)
