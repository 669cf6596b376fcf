"""Shared schema configuration and field helpers."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase; snake_case input is accepted too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def strip_required(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} cannot be empty or whitespace only")
    return v


def strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


def blank_to_none(v: Any) -> Any:
    """Patch semantics: a blank string means "leave unchanged"."""
    if isinstance(v, str) and not v.strip():
        return None
    return v
