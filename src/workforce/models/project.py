"""Project and ProjectMember models - owned by the project service."""

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, UniqueConstraint
from sqlmodel import Field, SQLModel

from src.workforce.models.base import utc_now
from src.workforce.models.enums import ProjectStatus


class Project(SQLModel, table=True):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="chk_project_dates"),
    )

    id: int | None = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, unique=True, index=True)
    name: str = Field(max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    status: ProjectStatus = Field(index=True)
    start_date: date = Field(index=True)
    end_date: date | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectMember(SQLModel, table=True):
    """Membership of an employee in a project.

    The project reference is strong (same service, cascade delete); the
    employee reference is soft and validated against the employee service
    when the member is added.
    """

    __tablename__ = "project_members"
    __table_args__ = (
        UniqueConstraint("project_id", "employee_id", name="uq_project_member"),
        CheckConstraint(
            "allocation_percent >= 0 AND allocation_percent <= 100",
            name="chk_allocation_percent",
        ),
    )

    id: int | None = Field(default=None, primary_key=True)
    project_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    employee_id: int = Field(index=True)
    role: str = Field(max_length=60)
    allocation_percent: int
    assigned_at: datetime = Field(default_factory=utc_now)
