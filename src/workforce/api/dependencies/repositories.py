"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.workforce.api.dependencies.db import DBSession
from src.workforce.repositories import (
    DepartmentRepository,
    EmployeeRepository,
    ProjectMemberRepository,
    ProjectRepository,
)


def get_employee_repository(session: DBSession) -> EmployeeRepository:
    return EmployeeRepository(session)


def get_department_repository(session: DBSession) -> DepartmentRepository:
    return DepartmentRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_member_repository(session: DBSession) -> ProjectMemberRepository:
    return ProjectMemberRepository(session)


EmployeeRepo = Annotated[EmployeeRepository, Depends(get_employee_repository)]
DepartmentRepo = Annotated[DepartmentRepository, Depends(get_department_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
MemberRepo = Annotated[ProjectMemberRepository, Depends(get_member_repository)]
