"""Department model - owned by the department service."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.workforce.models.base import utc_now


class Department(SQLModel, table=True):
    __tablename__ = "departments"

    id: int | None = Field(default=None, primary_key=True)
    code: str = Field(max_length=20, unique=True, index=True)
    name: str = Field(max_length=120, unique=True, index=True)
    description: str | None = Field(default=None, max_length=2000)
    manager_email: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=100)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
