"""Employee record service."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.clients.department import DepartmentClient
from src.workforce.core.exceptions import DuplicateFieldError, NotFoundError, ServiceError
from src.workforce.core.logging import get_logger
from src.workforce.models import Employee
from src.workforce.models.base import utc_now
from src.workforce.models.enums import OnRemoteFailure
from src.workforce.repositories import EmployeeRepository
from src.workforce.schemas.employee import (
    BulkCreateFailure,
    BulkCreateResult,
    BulkEmployeeCreate,
    DepartmentCount,
    DepartmentSummary,
    EmployeeCreate,
    EmployeePatch,
    EmployeeRead,
    EmployeeStats,
    EmployeeUpdate,
)
from src.workforce.schemas.pagination import PageRequest, PageResponse
from src.workforce.services.enrichment import ReferenceEnricher
from src.workforce.services.validation import ReferenceValidator, UniquenessValidator

logger = get_logger(__name__)

RESOURCE = "Employee"


def error_code(exc: ServiceError) -> str:
    """Stable machine-readable code for a per-item failure."""
    return exc.problem_type.upper().replace("-", "_")


class EmployeeService:
    """Employee CRUD with a soft reference to the department service."""

    def __init__(
        self,
        repo: EmployeeRepository,
        session: AsyncSession,
        department_client: DepartmentClient,
        reference_policy: OnRemoteFailure,
    ):
        self.repo = repo
        self.session = session
        self.department_client = department_client
        self.uniqueness = UniquenessValidator(repo, RESOURCE, ["email"])
        self.departments = ReferenceValidator(department_client, "Department", reference_policy)
        self.enricher: ReferenceEnricher[EmployeeRead, DepartmentSummary] = ReferenceEnricher(
            department_client, "department_id", "department"
        )

    async def _get_or_404(self, employee_id: int) -> Employee:
        employee = await self.repo.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(RESOURCE, employee_id)
        return employee

    async def _commit(self, employee: Employee) -> None:
        email = employee.email
        try:
            await self.session.commit()
            await self.session.refresh(employee)
        except IntegrityError as e:
            # Unique index caught a concurrent write the pre-check missed
            await self.session.rollback()
            raise DuplicateFieldError(RESOURCE, "email", email) from e
        except Exception:
            await self.session.rollback()
            raise

    async def list_employees(
        self, request: PageRequest, enrich: bool
    ) -> PageResponse[EmployeeRead]:
        employees, total = await self.repo.find_page(request)
        content = [EmployeeRead.model_validate(e) for e in employees]
        if enrich:
            content = await self.enricher.enrich_many(content)
        return PageResponse[EmployeeRead].of(content, request, total)

    async def get_employee(self, employee_id: int, enrich: bool = True) -> EmployeeRead:
        employee = EmployeeRead.model_validate(await self._get_or_404(employee_id))
        if enrich:
            employee = await self.enricher.enrich_one(employee)
        return employee

    async def create_employee(self, data: EmployeeCreate) -> EmployeeRead:
        """Create an employee.

        Raises:
            DuplicateFieldError: Email already used (case-insensitive).
            ReferencedEntityMissingError: departmentId does not resolve.
            RemoteUnavailableError: Department service unreachable under a BLOCK policy.
        """
        await self.uniqueness.validate_create({"email": data.email})
        await self.departments.require(data.department_id, "departmentId")

        employee = Employee(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            department_id=data.department_id,
        )
        self.repo.add(employee)
        await self._commit(employee)

        logger.info("Employee created", employee_id=employee.id)
        return EmployeeRead.model_validate(employee)

    async def bulk_create(self, data: BulkEmployeeCreate) -> BulkCreateResult:
        """Create each employee independently; failures do not abort the batch."""
        successful: list[EmployeeRead] = []
        failures: list[BulkCreateFailure] = []

        for index, item in enumerate(data.employees):
            try:
                successful.append(await self.create_employee(item))
            except ServiceError as e:
                failures.append(
                    BulkCreateFailure(
                        index=index,
                        employee=item,
                        reason=e.detail,
                        error_code=error_code(e),
                    )
                )

        logger.info(
            "Bulk employee creation finished",
            total=len(data.employees),
            succeeded=len(successful),
            failed=len(failures),
        )
        return BulkCreateResult(
            total_processed=len(data.employees),
            success_count=len(successful),
            failure_count=len(failures),
            successful=successful,
            failures=failures,
        )

    async def update_employee(self, employee_id: int, data: EmployeeUpdate) -> EmployeeRead:
        """Replace every field of an employee."""
        employee = await self._get_or_404(employee_id)
        await self.uniqueness.validate_update({"email": data.email}, employee_id)
        if data.department_id != employee.department_id:
            await self.departments.require(data.department_id, "departmentId")

        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.email = data.email
        employee.department_id = data.department_id
        employee.updated_at = utc_now()
        await self._commit(employee)
        return EmployeeRead.model_validate(employee)

    async def patch_employee(self, employee_id: int, data: EmployeePatch) -> EmployeeRead:
        """Apply the provided, non-blank fields; everything else is unchanged."""
        employee = await self._get_or_404(employee_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes:
            await self.uniqueness.validate_update(changes, employee_id)
        if changes.get("department_id", employee.department_id) != employee.department_id:
            await self.departments.require(changes["department_id"], "departmentId")

        for field, value in changes.items():
            setattr(employee, field, value)
        employee.updated_at = utc_now()
        await self._commit(employee)
        return EmployeeRead.model_validate(employee)

    async def delete_employee(self, employee_id: int) -> None:
        employee = await self._get_or_404(employee_id)
        await self.repo.delete(employee)
        await self.session.commit()
        logger.info("Employee deleted", employee_id=employee_id)

    async def search(self, term: str) -> list[EmployeeRead]:
        term = term.strip()
        if not term:
            return []
        return [EmployeeRead.model_validate(e) for e in await self.repo.search(term)]

    async def stats(self) -> EmployeeStats:
        """Totals per department; names come from one batch fetch and may be missing."""
        total = await self.repo.count()
        grouped = await self.repo.count_grouped_by_department()

        lookup = await self.department_client.fetch_many(dept_id for dept_id, _ in grouped)
        names = {d.id: d.name for d in lookup.value} if lookup.is_found and lookup.value else {}

        return EmployeeStats(
            total_employees=total,
            counts_by_department=[
                DepartmentCount(
                    department_id=dept_id,
                    department_name=names.get(dept_id) if dept_id is not None else None,
                    count=count,
                )
                for dept_id, count in grouped
            ],
        )

    # Reference endpoints consumed by other services

    async def get_by_ids(self, ids: list[int]) -> list[EmployeeRead]:
        return [EmployeeRead.model_validate(e) for e in await self.repo.get_by_ids(ids)]

    async def exists(self, employee_id: int) -> bool:
        return await self.repo.exists_by_id(employee_id)

    async def count_by_department(self, department_id: int) -> int:
        return await self.repo.count_by_department(department_id)

    async def list_by_department(self, department_id: int) -> list[EmployeeRead]:
        return [
            EmployeeRead.model_validate(e)
            for e in await self.repo.list_by_department(department_id)
        ]
