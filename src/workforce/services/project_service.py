"""Project record service."""

from collections import defaultdict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.workforce.core.exceptions import DuplicateFieldError, MalformedInputError, NotFoundError
from src.workforce.core.logging import get_logger
from src.workforce.models import Project, ProjectMember
from src.workforce.models.base import utc_now
from src.workforce.models.enums import ProjectStatus
from src.workforce.repositories import ProjectMemberRepository, ProjectRepository
from src.workforce.schemas.pagination import PageRequest, PageResponse
from src.workforce.schemas.problem import FieldErrorDetail
from src.workforce.schemas.project import (
    ProjectCreate,
    ProjectMemberRead,
    ProjectPatch,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)
from src.workforce.services.deletion_guard import DeletionGuard, LocalDependentCounter
from src.workforce.services.validation import UniquenessValidator

logger = get_logger(__name__)

RESOURCE = "Project"


def to_read(project: Project, members: list[ProjectMember]) -> ProjectRead:
    read = ProjectRead.model_validate(project)
    return read.model_copy(
        update={"members": [ProjectMemberRead.model_validate(m) for m in members]}
    )


class ProjectService:
    """Project CRUD; deletion is refused while the project has members."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        member_repo: ProjectMemberRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.member_repo = member_repo
        self.session = session
        self.uniqueness = UniquenessValidator(project_repo, RESOURCE, ["code"])
        self.guard: DeletionGuard[Project] = DeletionGuard(
            RESOURCE,
            project_repo.get_by_id,
            LocalDependentCounter(member_repo.count_by_project, "members"),
        )

    async def _get_or_404(self, project_id: int) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError(RESOURCE, project_id)
        return project

    async def _commit(self, project: Project) -> None:
        code = project.code
        try:
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateFieldError(RESOURCE, "code", code) from e
        except Exception:
            await self.session.rollback()
            raise

    async def _with_members(self, project: Project) -> ProjectRead:
        members = await self.member_repo.list_by_project(project.id)  # type: ignore[arg-type]
        return to_read(project, members)

    async def list_projects(self, request: PageRequest) -> PageResponse[ProjectRead]:
        """Page through projects; members of the whole page are loaded in one query."""
        projects, total = await self.project_repo.find_page(request)
        members = await self.member_repo.list_by_projects([p.id for p in projects if p.id])
        by_project: dict[int, list[ProjectMember]] = defaultdict(list)
        for member in members:
            by_project[member.project_id].append(member)

        content = [to_read(p, by_project[p.id]) for p in projects]  # type: ignore[index]
        return PageResponse[ProjectRead].of(content, request, total)

    async def get_project(self, project_id: int) -> ProjectRead:
        return await self._with_members(await self._get_or_404(project_id))

    async def get_by_code(self, code: str) -> ProjectRead:
        project = await self.project_repo.get_by_code(code.strip())
        if project is None:
            raise NotFoundError(RESOURCE, code, field="code")
        return await self._with_members(project)

    async def create_project(self, data: ProjectCreate) -> ProjectRead:
        await self.uniqueness.validate_create({"code": data.code})

        project = Project(**data.model_dump())
        self.project_repo.add(project)
        await self._commit(project)

        logger.info("Project created", project_id=project.id, code=project.code)
        return to_read(project, [])

    async def update_project(self, project_id: int, data: ProjectUpdate) -> ProjectRead:
        project = await self._get_or_404(project_id)
        await self.uniqueness.validate_update({"code": data.code}, project_id)

        for field, value in data.model_dump().items():
            setattr(project, field, value)
        project.updated_at = utc_now()
        await self._commit(project)
        return await self._with_members(project)

    async def patch_project(self, project_id: int, data: ProjectPatch) -> ProjectRead:
        """Apply provided fields, then check the merged date range.

        Raises:
            MalformedInputError: The merged end date precedes the start date.
        """
        project = await self._get_or_404(project_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        start = changes.get("start_date", project.start_date)
        end = changes.get("end_date", project.end_date)
        if end is not None and end < start:
            raise MalformedInputError(
                [
                    FieldErrorDetail(
                        field="endDate", message="End date must be on or after start date"
                    )
                ]
            )
        if "code" in changes:
            await self.uniqueness.validate_update(changes, project_id)

        for field, value in changes.items():
            setattr(project, field, value)
        project.updated_at = utc_now()
        await self._commit(project)
        return await self._with_members(project)

    async def delete_project(self, project_id: int) -> None:
        """Delete a project with no members.

        Raises:
            NotFoundError: Unknown project.
            DependentsExistError: The project still has members.
        """
        project = await self.guard.assert_deletable(project_id)
        await self.project_repo.delete(project)
        await self.session.commit()
        logger.info("Project deleted", project_id=project_id)

    async def stats(self) -> ProjectStats:
        counts = await self.project_repo.count_by_status()
        return ProjectStats(
            total_projects=sum(counts.values()),
            count_by_status={s.value: counts.get(s.value, 0) for s in ProjectStatus},
        )
