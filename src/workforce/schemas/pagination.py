"""Pagination schemas for page/size pagination."""

from dataclasses import dataclass, field
from enum import Enum
from math import ceil
from typing import Any, Generic, TypeVar

from pydantic import Field

from src.workforce.schemas.base import CamelModel

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    """One ordering term; `field` is a model attribute name."""

    field: str
    direction: SortDirection = SortDirection.ASC

    def __str__(self) -> str:
        return f"{self.field}: {self.direction.value.upper()}"


@dataclass(frozen=True)
class PageRequest:
    """A well-formed, bounded query: page window, ordering and active filters.

    `orders` always ends with the identity field so ties break the same way
    on every page.
    """

    page: int
    size: int
    orders: tuple[SortOrder, ...]
    filters: dict[str, Any] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def sort_description(self) -> str:
        return ", ".join(str(order) for order in self.orders)


class PageResponse(CamelModel, Generic[T]):
    """Generic page of results.

    `page` is 0-based. `first`/`last` tell clients whether earlier or later
    pages exist without computing it from the totals.
    """

    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    sort: str = Field(description="Applied ordering, e.g. 'last_name: ASC, id: ASC'")
    first: bool
    last: bool

    @classmethod
    def of(cls, content: list[T], request: PageRequest, total: int) -> "PageResponse[T]":
        total_pages = ceil(total / request.size) if request.size else 0
        return cls(
            content=content,
            page=request.page,
            size=request.size,
            total_elements=total,
            total_pages=total_pages,
            sort=request.sort_description,
            first=request.page == 0,
            last=request.page >= total_pages - 1,
        )
