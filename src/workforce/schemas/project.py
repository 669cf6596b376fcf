"""Project and project member schemas for API request/response."""

from datetime import date, datetime

from pydantic import Field, ValidationInfo, field_validator

from src.workforce.models.enums import ProjectStatus
from src.workforce.schemas.base import CamelModel, blank_to_none, strip_optional, strip_required
from src.workforce.schemas.department import EmployeeSummary

PROJECT_CODE_PATTERN = r"^[A-Z0-9-]{3,20}$"


class ProjectCreate(CamelModel):
    """Schema for creating a project (also the shape of a full update)."""

    code: str = Field(pattern=PROJECT_CODE_PATTERN)
    name: str = Field(min_length=3, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    status: ProjectStatus
    start_date: date
    end_date: date | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v, "Project name")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return strip_optional(v)

    @field_validator("end_date")
    @classmethod
    def validate_date_range(cls, v: date | None, info: ValidationInfo) -> date | None:
        start = info.data.get("start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("End date must be on or after start date")
        return v


class ProjectUpdate(ProjectCreate):
    """Schema for a full update: every field is replaced."""


class ProjectPatch(CamelModel):
    """Schema for a partial update; the date range is checked after merging."""

    code: str | None = Field(default=None, pattern=PROJECT_CODE_PATTERN)
    name: str | None = Field(default=None, min_length=3, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    status: ProjectStatus | None = None
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("code", "name", mode="before")
    @classmethod
    def ignore_blank(cls, v: object) -> object:
        return blank_to_none(v)


class ProjectMemberRead(CamelModel):
    id: int
    project_id: int
    employee_id: int
    role: str
    allocation_percent: int
    assigned_at: datetime
    employee: EmployeeSummary | None = None


class ProjectRead(CamelModel):
    id: int
    code: str
    name: str
    description: str | None
    status: ProjectStatus
    start_date: date
    end_date: date | None
    members: list[ProjectMemberRead] = []
    created_at: datetime
    updated_at: datetime


class ProjectStats(CamelModel):
    total_projects: int
    count_by_status: dict[str, int]


class MemberCreate(CamelModel):
    employee_id: int = Field(ge=1)
    role: str = Field(min_length=2, max_length=60)
    allocation_percent: int = Field(ge=0, le=100)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        return strip_required(v, "Role")


class BulkMemberCreate(CamelModel):
    members: list[MemberCreate] = Field(min_length=1, max_length=100)


class MemberOperationResult(CamelModel):
    employee_id: int
    success: bool
    member: ProjectMemberRead | None = None
    error: str | None = None


class BulkMemberResult(CamelModel):
    total_processed: int
    success_count: int
    error_count: int
    results: list[MemberOperationResult]
