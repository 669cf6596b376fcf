from fastapi import APIRouter

from src.workforce.api.v1 import departments, employees, members, projects
from src.workforce.models.enums import ServiceName

SERVICE_ROUTERS: dict[ServiceName, list[APIRouter]] = {
    ServiceName.EMPLOYEE: [employees.router],
    ServiceName.DEPARTMENT: [departments.router],
    ServiceName.PROJECT: [projects.router, members.router],
}


def build_api_router(service: ServiceName) -> APIRouter:
    """Routes served by one record service."""
    api_router = APIRouter(prefix="/api/v1")
    for router in SERVICE_ROUTERS[service]:
        api_router.include_router(router)
    return api_router
