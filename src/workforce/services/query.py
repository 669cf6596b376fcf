"""Turns raw list parameters into a well-formed, bounded `PageRequest`."""

from collections.abc import Collection, Mapping
from typing import Any

from pydantic.alias_generators import to_snake

from src.workforce.core.exceptions import MalformedInputError
from src.workforce.schemas.pagination import PageRequest, SortDirection, SortOrder
from src.workforce.schemas.problem import FieldErrorDetail

ID_FIELD = "id"


def _parse_direction(raw: str | None) -> SortDirection:
    if raw is None:
        return SortDirection.ASC
    try:
        return SortDirection(raw.strip().lower())
    except ValueError:
        return SortDirection.ASC


def parse_sort(sort: str | None, sortable: Collection[str]) -> tuple[SortOrder, ...]:
    """Parse `"<field>,<asc|desc>"` into orders ending with the id tie-breaker.

    Field names may be camelCase or snake_case. A missing or unrecognised
    direction means ascending.

    Raises:
        MalformedInputError: If the field is not sortable.
    """
    if sort is None or not sort.strip():
        return (SortOrder(ID_FIELD),)

    raw_field, _, raw_direction = sort.partition(",")
    field = to_snake(raw_field.strip())
    if field not in sortable:
        allowed = ", ".join(sorted(sortable))
        raise MalformedInputError(
            [
                FieldErrorDetail(
                    field="sort",
                    message=f"Unknown sort field '{raw_field.strip()}'; allowed: {allowed}",
                )
            ],
            detail=f"Invalid sort parameter: {sort}",
        )

    order = SortOrder(field, _parse_direction(raw_direction or None))
    if field == ID_FIELD:
        return (order,)
    return (order, SortOrder(ID_FIELD))


def clean_filters(filters: Mapping[str, Any] | None) -> dict[str, Any]:
    """Drop unset and blank filters; strip string values."""
    active: dict[str, Any] = {}
    for name, value in (filters or {}).items():
        if value is None:
            continue
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        active[name] = value
    return active


def build_query(
    page: int | None,
    size: int | None,
    sort: str | None,
    filters: Mapping[str, Any] | None = None,
    *,
    sortable: Collection[str],
    default_size: int,
    max_size: int,
) -> PageRequest:
    """Compose a page request from raw query parameters.

    Args:
        page: 0-based page index; defaults to 0.
        size: Page size; defaults to `default_size`, clamped to `max_size`.
        sort: Optional `"<field>,<direction>"`.
        filters: Raw filter values keyed by model attribute.
        sortable: Model attributes the caller may sort by.
        default_size: Size used when none is given.
        max_size: Upper bound for the page size.

    Raises:
        MalformedInputError: On a negative page, a size below 1 or an unknown sort field.
    """
    page = 0 if page is None else page
    size = default_size if size is None else size

    errors = []
    if page < 0:
        errors.append(FieldErrorDetail(field="page", message="must be greater than or equal to 0"))
    if size < 1:
        errors.append(FieldErrorDetail(field="size", message="must be greater than or equal to 1"))
    if errors:
        raise MalformedInputError(errors, detail="Invalid pagination parameters")

    return PageRequest(
        page=page,
        size=min(size, max_size),
        orders=parse_sort(sort, sortable),
        filters=clean_filters(filters),
    )
