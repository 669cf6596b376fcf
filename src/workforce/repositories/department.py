"""Repository for Department entity."""

from typing import Any

from sqlalchemy import func, or_
from sqlmodel import select

from src.workforce.models import Department
from src.workforce.repositories.base import BaseRepository


class DepartmentRepository(BaseRepository[Department]):
    model = Department

    async def get_by_code(self, code: str) -> Department | None:
        """Get department by code, ignoring case."""
        return await self.find_by_field_ci("code", code)

    def search_query(self, term: str) -> Any:
        """Query matching name, code or description by case-insensitive substring."""
        pattern = term.lower()
        return select(Department).where(
            or_(
                func.lower(Department.name).contains(pattern, autoescape=True),
                func.lower(Department.code).contains(pattern, autoescape=True),
                func.lower(Department.description).contains(pattern, autoescape=True),
            )
        )
