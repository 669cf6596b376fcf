"""Repository layer - data access abstraction."""

from src.workforce.repositories.base import BaseRepository
from src.workforce.repositories.department import DepartmentRepository
from src.workforce.repositories.employee import EmployeeRepository
from src.workforce.repositories.project import ProjectMemberRepository, ProjectRepository

__all__ = [
    "BaseRepository",
    "DepartmentRepository",
    "EmployeeRepository",
    "ProjectMemberRepository",
    "ProjectRepository",
]
