"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.workforce.api.dependencies.db import DBSession
from src.workforce.api.dependencies.repositories import (
    DepartmentRepo,
    EmployeeRepo,
    MemberRepo,
    ProjectRepo,
)
from src.workforce.api.dependencies.state import (
    AppSettings,
    DepartmentClientDep,
    EmployeeClientDep,
)
from src.workforce.services import (
    DepartmentService,
    EmployeeService,
    MemberService,
    ProjectService,
)


def get_employee_service(
    repo: EmployeeRepo,
    session: DBSession,
    department_client: DepartmentClientDep,
    settings: AppSettings,
) -> EmployeeService:
    """Get employee service; department references follow the configured policy."""
    return EmployeeService(
        repo, session, department_client, settings.reference_check_on_remote_failure
    )


def get_department_service(
    repo: DepartmentRepo,
    session: DBSession,
    employee_client: EmployeeClientDep,
    settings: AppSettings,
) -> DepartmentService:
    """Get department service; the deletion guard follows the configured policy."""
    return DepartmentService(
        repo, session, employee_client, settings.deletion_guard_on_remote_failure
    )


def get_project_service(
    project_repo: ProjectRepo,
    member_repo: MemberRepo,
    session: DBSession,
) -> ProjectService:
    return ProjectService(project_repo, member_repo, session)


def get_member_service(
    project_repo: ProjectRepo,
    member_repo: MemberRepo,
    session: DBSession,
    employee_client: EmployeeClientDep,
    settings: AppSettings,
) -> MemberService:
    return MemberService(
        project_repo,
        member_repo,
        session,
        employee_client,
        settings.reference_check_on_remote_failure,
    )


EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
DepartmentServiceDep = Annotated[DepartmentService, Depends(get_department_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]
