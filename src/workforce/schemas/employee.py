"""Employee schemas for API request/response."""

from pydantic import EmailStr, Field, field_validator

from src.workforce.schemas.base import CamelModel, blank_to_none, strip_required


class DepartmentSummary(CamelModel):
    """Department detail attached to an employee by enrichment."""

    id: int
    name: str
    code: str | None = None


class EmployeeCreate(CamelModel):
    """Schema for creating an employee (also the shape of a full update)."""

    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    department_id: int | None = Field(default=None, ge=1)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v: str) -> str:
        return strip_required(v, "Name")


class EmployeeUpdate(EmployeeCreate):
    """Schema for a full update: every field is replaced."""


class EmployeePatch(CamelModel):
    """Schema for a partial update: omitted or blank fields are left unchanged."""

    first_name: str | None = Field(default=None, max_length=120)
    last_name: str | None = Field(default=None, max_length=120)
    email: EmailStr | None = None
    department_id: int | None = Field(default=None, ge=1)

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def ignore_blank(cls, v: object) -> object:
        return blank_to_none(v)


class EmployeeRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    department_id: int | None
    department: DepartmentSummary | None = None


class BulkEmployeeCreate(CamelModel):
    employees: list[EmployeeCreate] = Field(min_length=1, max_length=100)


class BulkCreateFailure(CamelModel):
    index: int
    employee: EmployeeCreate
    reason: str
    error_code: str


class BulkCreateResult(CamelModel):
    total_processed: int
    success_count: int
    failure_count: int
    successful: list[EmployeeRead]
    failures: list[BulkCreateFailure]


class DepartmentCount(CamelModel):
    department_id: int | None
    department_name: str | None = None
    count: int


class EmployeeStats(CamelModel):
    total_employees: int
    counts_by_department: list[DepartmentCount]
