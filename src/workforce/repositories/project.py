"""Repositories for Project and ProjectMember entities."""

from typing import Any

from sqlalchemy import func
from sqlmodel import select

from src.workforce.models import Project, ProjectMember
from src.workforce.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def get_by_code(self, code: str) -> Project | None:
        """Get project by code, ignoring case."""
        return await self.find_by_field_ci("code", code)

    def apply_filters(self, query: Any, filters: dict[str, Any]) -> Any:
        """Date bounds filter on the project's start/end; the rest are column filters."""
        remaining = dict(filters)
        start_from = remaining.pop("start_from", None)
        end_to = remaining.pop("end_to", None)
        if start_from is not None:
            query = query.where(Project.start_date >= start_from)
        if end_to is not None:
            query = query.where(Project.end_date <= end_to)
        return super().apply_filters(query, remaining)

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(Project.status, func.count()).group_by(Project.status)
        )
        return {_status_name(row[0]): row[1] for row in result.all()}


def _status_name(status: Any) -> str:
    return status.value if hasattr(status, "value") else str(status)


class ProjectMemberRepository(BaseRepository[ProjectMember]):
    model = ProjectMember

    async def list_by_project(self, project_id: int) -> list[ProjectMember]:
        result = await self.session.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.id)
        )
        return list(result.scalars().all())

    async def list_by_projects(self, project_ids: list[int]) -> list[ProjectMember]:
        if not project_ids:
            return []
        result = await self.session.execute(
            select(ProjectMember)
            .where(ProjectMember.project_id.in_(project_ids))  # type: ignore[attr-defined]
            .order_by(ProjectMember.id)
        )
        return list(result.scalars().all())

    async def get_member(self, project_id: int, employee_id: int) -> ProjectMember | None:
        result = await self.session.execute(
            select(ProjectMember).where(
                ProjectMember.project_id == project_id,
                ProjectMember.employee_id == employee_id,
            )
        )
        return result.scalar_one_or_none()

    async def count_by_project(self, project_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ProjectMember)
            .where(ProjectMember.project_id == project_id)
        )
        return result.scalar_one()
