"""Repository for Employee entity."""

from sqlalchemy import func, or_
from sqlmodel import select

from src.workforce.models import Employee
from src.workforce.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    async def list_by_department(self, department_id: int) -> list[Employee]:
        result = await self.session.execute(
            select(Employee).where(Employee.department_id == department_id).order_by(Employee.id)
        )
        return list(result.scalars().all())

    async def count_by_department(self, department_id: int) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Employee)
            .where(Employee.department_id == department_id)
        )
        return result.scalar_one()

    async def count_grouped_by_department(self) -> list[tuple[int | None, int]]:
        """Employee count per department id (None for unassigned)."""
        result = await self.session.execute(
            select(Employee.department_id, func.count())
            .group_by(Employee.department_id)
            .order_by(Employee.department_id)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def search(self, term: str) -> list[Employee]:
        """Case-insensitive substring match on first name, last name or email."""
        pattern = term.lower()
        result = await self.session.execute(
            select(Employee)
            .where(
                or_(
                    func.lower(Employee.first_name).contains(pattern, autoescape=True),
                    func.lower(Employee.last_name).contains(pattern, autoescape=True),
                    func.lower(Employee.email).contains(pattern, autoescape=True),
                )
            )
            .order_by(Employee.id)
        )
        return list(result.scalars().all())
