"""Client for the employee service."""

from src.workforce.clients.base import RemoteReferenceClient
from src.workforce.schemas.department import EmployeeSummary


class EmployeeClient(RemoteReferenceClient[EmployeeSummary]):
    """Employees, with departments as their owner."""

    target = "employee"
    collection = "employees"
    owner = "department"
    detail_model = EmployeeSummary
