"""Test factories for generating request payloads.

Re-exports all factories for convenient imports:
    from tests.factories import EmployeeCreateFactory, payload
"""

from tests.factories.base import payload, unique_suffix
from tests.factories.department import DepartmentCreateFactory
from tests.factories.employee import EmployeeCreateFactory
from tests.factories.project import MemberCreateFactory, ProjectCreateFactory

__all__ = [
    # Base
    "payload",
    "unique_suffix",
    # Payloads
    "DepartmentCreateFactory",
    "EmployeeCreateFactory",
    "MemberCreateFactory",
    "ProjectCreateFactory",
]
