"""Department record service."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.clients.employee import EmployeeClient
from src.workforce.core.exceptions import DuplicateFieldError, NotFoundError
from src.workforce.core.logging import get_logger
from src.workforce.models import Department
from src.workforce.models.base import utc_now
from src.workforce.models.enums import OnRemoteFailure
from src.workforce.repositories import DepartmentRepository
from src.workforce.schemas.department import (
    DepartmentCreate,
    DepartmentPatch,
    DepartmentRead,
    DepartmentUpdate,
    EmployeeSummary,
)
from src.workforce.schemas.pagination import PageRequest, PageResponse
from src.workforce.services.deletion_guard import DeletionGuard, RemoteDependentCounter
from src.workforce.services.validation import UniquenessValidator

logger = get_logger(__name__)

RESOURCE = "Department"

# Patch fields whose explicit null clears the stored value
CLEARABLE_FIELDS = frozenset({"description", "location"})


class DepartmentService:
    """Department CRUD; deletion is refused while employees are assigned."""

    def __init__(
        self,
        repo: DepartmentRepository,
        session: AsyncSession,
        employee_client: EmployeeClient,
        deletion_policy: OnRemoteFailure,
    ):
        self.repo = repo
        self.session = session
        self.employee_client = employee_client
        self.uniqueness = UniquenessValidator(repo, RESOURCE, ["name", "code"])
        self.guard: DeletionGuard[Department] = DeletionGuard(
            RESOURCE,
            repo.get_by_id,
            RemoteDependentCounter(employee_client, deletion_policy, "employees"),
        )

    async def _get_or_404(self, department_id: int) -> Department:
        department = await self.repo.get_by_id(department_id)
        if department is None:
            raise NotFoundError(RESOURCE, department_id)
        return department

    async def _commit(self, department: Department) -> None:
        name = department.name
        try:
            await self.session.commit()
            await self.session.refresh(department)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateFieldError(
                RESOURCE,
                "name",
                name,
                detail="Department with the same code or name already exists",
            ) from e
        except Exception:
            await self.session.rollback()
            raise

    async def list_departments(self, request: PageRequest) -> PageResponse[DepartmentRead]:
        departments, total = await self.repo.find_page(request)
        content = [DepartmentRead.model_validate(d) for d in departments]
        return PageResponse[DepartmentRead].of(content, request, total)

    async def search(self, term: str, request: PageRequest) -> PageResponse[DepartmentRead]:
        """Page through departments whose name, code or description contain `term`."""
        departments, total = await self.repo.find_page(request, self.repo.search_query(term))
        content = [DepartmentRead.model_validate(d) for d in departments]
        return PageResponse[DepartmentRead].of(content, request, total)

    async def get_department(self, department_id: int) -> DepartmentRead:
        return DepartmentRead.model_validate(await self._get_or_404(department_id))

    async def get_by_code(self, code: str) -> DepartmentRead:
        department = await self.repo.get_by_code(code.strip())
        if department is None:
            raise NotFoundError(RESOURCE, code, field="code")
        return DepartmentRead.model_validate(department)

    async def list_employees(self, department_id: int) -> list[EmployeeSummary]:
        """Employees assigned to the department, as reported by the employee service.

        An unreachable employee service yields an empty list.
        """
        await self._get_or_404(department_id)
        lookup = await self.employee_client.list_dependents(department_id)
        return lookup.value if lookup.is_found and lookup.value is not None else []

    async def create_department(self, data: DepartmentCreate) -> DepartmentRead:
        """Create a department.

        Raises:
            DuplicateFieldError: Code or name already used (case-insensitive).
        """
        await self.uniqueness.validate_create(data.model_dump())

        department = Department(**data.model_dump())
        self.repo.add(department)
        await self._commit(department)

        logger.info("Department created", department_id=department.id, code=department.code)
        return DepartmentRead.model_validate(department)

    async def update_department(
        self, department_id: int, data: DepartmentUpdate
    ) -> DepartmentRead:
        department = await self._get_or_404(department_id)
        values = data.model_dump()
        await self.uniqueness.validate_update(values, department_id)

        for field, value in values.items():
            setattr(department, field, value)
        department.updated_at = utc_now()
        await self._commit(department)
        return DepartmentRead.model_validate(department)

    async def patch_department(self, department_id: int, data: DepartmentPatch) -> DepartmentRead:
        department = await self._get_or_404(department_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_FIELDS
        }
        await self.uniqueness.validate_update(changes, department_id)

        for field, value in changes.items():
            setattr(department, field, value)
        department.updated_at = utc_now()
        await self._commit(department)
        return DepartmentRead.model_validate(department)

    async def delete_department(self, department_id: int) -> None:
        """Delete a department that has no employees left.

        Raises:
            NotFoundError: Unknown department.
            DependentsExistError: Employees are still assigned.
            RemoteUnavailableError: Employee count unavailable under a BLOCK policy.
        """
        department = await self.guard.assert_deletable(department_id)
        await self.repo.delete(department)
        await self.session.commit()
        logger.info("Department deleted", department_id=department_id)

    # Reference endpoints consumed by other services

    async def get_by_ids(self, ids: list[int]) -> list[DepartmentRead]:
        return [DepartmentRead.model_validate(d) for d in await self.repo.get_by_ids(ids)]

    async def exists(self, department_id: int) -> bool:
        return await self.repo.exists_by_id(department_id)
