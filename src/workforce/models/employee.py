"""Employee model - owned by the employee service."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.workforce.models.base import utc_now


class Employee(SQLModel, table=True):
    """Employee record.

    `department_id` is a soft reference to the department service: it is
    validated when written and never enforced by the database.
    """

    __tablename__ = "employees"

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=120)
    last_name: str = Field(max_length=120, index=True)
    email: str = Field(max_length=200, unique=True, index=True)
    department_id: int | None = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
