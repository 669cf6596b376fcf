from src.workforce.services.department_service import DepartmentService
from src.workforce.services.employee_service import EmployeeService
from src.workforce.services.member_service import MemberService
from src.workforce.services.project_service import ProjectService

__all__ = ["DepartmentService", "EmployeeService", "MemberService", "ProjectService"]
