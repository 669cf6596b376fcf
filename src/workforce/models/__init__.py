"""Model exports.

Import from here: `from src.workforce.models import Employee, Department`
"""

from src.workforce.models.department import Department
from src.workforce.models.employee import Employee
from src.workforce.models.enums import OnRemoteFailure, ProjectStatus, ServiceName
from src.workforce.models.project import Project, ProjectMember

# Tables each independently deployed service owns
SERVICE_TABLES: dict[ServiceName, list[str]] = {
    ServiceName.EMPLOYEE: ["employees"],
    ServiceName.DEPARTMENT: ["departments"],
    ServiceName.PROJECT: ["projects", "project_members"],
}

__all__ = [
    # Enums
    "OnRemoteFailure",
    "ProjectStatus",
    "ServiceName",
    # Tables
    "Department",
    "Employee",
    "Project",
    "ProjectMember",
    "SERVICE_TABLES",
]
