"""Common list parameters: page window and sort."""

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Query

from src.workforce.api.dependencies.state import AppSettings
from src.workforce.schemas.pagination import PageRequest
from src.workforce.services.query import build_query


@dataclass
class PageParams:
    page: int | None
    size: int | None
    sort: str | None
    default_size: int
    max_size: int

    def to_request(
        self, sortable: Collection[str], filters: Mapping[str, Any] | None = None
    ) -> PageRequest:
        return build_query(
            self.page,
            self.size,
            self.sort,
            filters,
            sortable=sortable,
            default_size=self.default_size,
            max_size=self.max_size,
        )


def get_page_params(
    settings: AppSettings,
    page: Annotated[int | None, Query(description="0-based page index")] = None,
    size: Annotated[int | None, Query(description="Page size, capped at the maximum")] = None,
    sort: Annotated[
        str | None, Query(description="Sort as 'field,direction', e.g. 'lastName,desc'")
    ] = None,
) -> PageParams:
    return PageParams(
        page=page,
        size=size,
        sort=sort,
        default_size=settings.default_page_size,
        max_size=settings.max_page_size,
    )


Paging = Annotated[PageParams, Depends(get_page_params)]
