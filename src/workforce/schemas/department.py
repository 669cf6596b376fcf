"""Department schemas for API request/response."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from src.workforce.schemas.base import CamelModel, blank_to_none, strip_optional, strip_required

CODE_PATTERN = r"^[A-Z0-9-]+$"


class DepartmentCreate(CamelModel):
    """Schema for creating a department (also the shape of a full update)."""

    code: str = Field(min_length=2, max_length=20, pattern=CODE_PATTERN)
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    manager_email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return strip_required(v, "Department name")

    @field_validator("description", "location")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return strip_optional(v)

    @field_validator("manager_email", mode="before")
    @classmethod
    def ignore_blank_email(cls, v: object) -> object:
        return blank_to_none(v)


class DepartmentUpdate(DepartmentCreate):
    """Schema for a full update: every field is replaced."""


class DepartmentPatch(CamelModel):
    """Schema for a partial update.

    Blank name/code are ignored; optional text fields are replaced whenever
    they are present.
    """

    code: str | None = Field(default=None, min_length=2, max_length=20, pattern=CODE_PATTERN)
    name: str | None = Field(default=None, max_length=120)
    description: str | None = Field(default=None, max_length=2000)
    manager_email: EmailStr | None = None
    location: str | None = Field(default=None, max_length=100)

    @field_validator("code", "name", "manager_email", mode="before")
    @classmethod
    def ignore_blank(cls, v: object) -> object:
        return blank_to_none(v)


class DepartmentRead(CamelModel):
    id: int
    code: str
    name: str
    description: str | None
    manager_email: str | None
    location: str | None
    created_at: datetime
    updated_at: datetime


class EmployeeSummary(CamelModel):
    """Employee as reported by the employee service."""

    id: int
    first_name: str
    last_name: str
    email: str
    department_id: int | None = None
