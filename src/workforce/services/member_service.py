"""Project membership service.

Members belong to the project service; the employee they name is a soft
reference checked against the employee service when the member is added.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.clients.employee import EmployeeClient
from src.workforce.core.exceptions import DuplicateFieldError, NotFoundError, ServiceError
from src.workforce.core.logging import get_logger
from src.workforce.models import ProjectMember
from src.workforce.models.enums import OnRemoteFailure
from src.workforce.repositories import ProjectMemberRepository, ProjectRepository
from src.workforce.schemas.department import EmployeeSummary
from src.workforce.schemas.project import (
    BulkMemberCreate,
    BulkMemberResult,
    MemberCreate,
    MemberOperationResult,
    ProjectMemberRead,
)
from src.workforce.services.enrichment import ReferenceEnricher
from src.workforce.services.validation import ReferenceValidator

logger = get_logger(__name__)


def already_member(project_id: int, employee_id: int) -> DuplicateFieldError:
    return DuplicateFieldError(
        "Member",
        "employeeId",
        employee_id,
        detail=f"Employee {employee_id} is already a member of project {project_id}",
    )


class MemberService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        member_repo: ProjectMemberRepository,
        session: AsyncSession,
        employee_client: EmployeeClient,
        reference_policy: OnRemoteFailure,
    ):
        self.project_repo = project_repo
        self.member_repo = member_repo
        self.session = session
        self.employees = ReferenceValidator(employee_client, "Employee", reference_policy)
        self.enricher: ReferenceEnricher[ProjectMemberRead, EmployeeSummary] = ReferenceEnricher(
            employee_client, "employee_id", "employee"
        )

    async def _require_project(self, project_id: int) -> None:
        if not await self.project_repo.exists_by_id(project_id):
            raise NotFoundError("Project", project_id)

    async def _get_member_or_404(self, project_id: int, employee_id: int) -> ProjectMember:
        member = await self.member_repo.get_member(project_id, employee_id)
        if member is None:
            raise NotFoundError(f"Member of project {project_id}", employee_id, field="employeeId")
        return member

    async def list_members(self, project_id: int, enrich: bool) -> list[ProjectMemberRead]:
        """Members of a project; with `enrich`, employee details come from one batch call."""
        await self._require_project(project_id)
        members = [
            ProjectMemberRead.model_validate(m)
            for m in await self.member_repo.list_by_project(project_id)
        ]
        if enrich:
            members = await self.enricher.enrich_many(members)
        return members

    async def get_member(
        self, project_id: int, employee_id: int, enrich: bool
    ) -> ProjectMemberRead:
        await self._require_project(project_id)
        member = ProjectMemberRead.model_validate(
            await self._get_member_or_404(project_id, employee_id)
        )
        if enrich:
            member = await self.enricher.enrich_one(member)
        return member

    async def add_member(self, project_id: int, data: MemberCreate) -> ProjectMemberRead:
        """Add an employee to a project.

        Raises:
            NotFoundError: Unknown project.
            DuplicateFieldError: The employee is already a member.
            ReferencedEntityMissingError: The employee does not exist remotely.
            RemoteUnavailableError: Employee service unreachable under a BLOCK policy.
        """
        await self._require_project(project_id)
        if await self.member_repo.get_member(project_id, data.employee_id) is not None:
            raise already_member(project_id, data.employee_id)
        await self.employees.require(data.employee_id, "employeeId")

        member = ProjectMember(
            project_id=project_id,
            employee_id=data.employee_id,
            role=data.role,
            allocation_percent=data.allocation_percent,
        )
        self.member_repo.add(member)
        try:
            await self.session.commit()
            await self.session.refresh(member)
        except IntegrityError as e:
            await self.session.rollback()
            raise already_member(project_id, data.employee_id) from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Member added", project_id=project_id, employee_id=data.employee_id)
        return ProjectMemberRead.model_validate(member)

    async def bulk_add(self, project_id: int, data: BulkMemberCreate) -> BulkMemberResult:
        """Add each member independently and report a result per item."""
        await self._require_project(project_id)

        results: list[MemberOperationResult] = []
        for item in data.members:
            try:
                member = await self.add_member(project_id, item)
            except ServiceError as e:
                results.append(
                    MemberOperationResult(
                        employee_id=item.employee_id, success=False, error=e.detail
                    )
                )
            else:
                results.append(
                    MemberOperationResult(employee_id=item.employee_id, success=True, member=member)
                )

        success_count = sum(1 for r in results if r.success)
        return BulkMemberResult(
            total_processed=len(results),
            success_count=success_count,
            error_count=len(results) - success_count,
            results=results,
        )

    async def remove_member(self, project_id: int, employee_id: int) -> None:
        await self._require_project(project_id)
        member = await self._get_member_or_404(project_id, employee_id)
        await self.member_repo.delete(member)
        await self.session.commit()
        logger.info("Member removed", project_id=project_id, employee_id=employee_id)
