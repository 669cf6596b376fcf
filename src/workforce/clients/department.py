"""Client for the department service."""

from src.workforce.clients.base import RemoteReferenceClient
from src.workforce.schemas.employee import DepartmentSummary


class DepartmentClient(RemoteReferenceClient[DepartmentSummary]):
    target = "department"
    collection = "departments"
    detail_model = DepartmentSummary
