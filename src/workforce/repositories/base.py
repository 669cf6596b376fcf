"""Base repository with common CRUD and query operations."""

from enum import Enum
from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.workforce.schemas.pagination import PageRequest, SortDirection


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    def column(self, name: str) -> Any:
        return getattr(self.model, name)

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get a record by its primary key."""
        return await self.session.get(self.model, id)

    async def exists_by_id(self, id: int) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(self.column("id") == id)
        )
        return result.scalar_one() > 0

    async def get_by_ids(self, ids: list[int]) -> list[ModelType]:
        """Get all records whose id is in `ids`; unknown ids are skipped."""
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model).where(self.column("id").in_(ids)).order_by(self.column("id"))
        )
        return list(result.scalars().all())

    async def find_by_field_ci(
        self, field: str, value: str, exclude_id: int | None = None
    ) -> ModelType | None:
        """Find a record whose text field equals `value`, ignoring case.

        Args:
            field: Model attribute to compare.
            value: Value to look for.
            exclude_id: Record to ignore (the record being updated).
        """
        column = self.column(field)
        query = select(self.model).where(func.lower(column) == value.lower())
        if exclude_id is not None:
            query = query.where(self.column("id") != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no commit)."""
        await self.session.delete(entity)

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    def apply_filters(self, query: Any, filters: dict[str, Any]) -> Any:
        """Apply active filters: strings match case-insensitively by substring,
        anything else by equality. Subclasses handle non-column filter keys.
        """
        for name, value in filters.items():
            column = self.column(name)
            if isinstance(value, str) and not isinstance(value, Enum):
                query = query.where(func.lower(column).contains(value.lower(), autoescape=True))
            else:
                query = query.where(column == value)
        return query

    async def find_page(
        self,
        request: PageRequest,
        base_query: Any | None = None,
    ) -> tuple[list[ModelType], int]:
        """Execute a page request.

        Args:
            request: Page window, ordering and filters from the query composer.
            base_query: Optional pre-filtered query (e.g. a search).

        Returns:
            Tuple of (items for the page, total matching records)
        """
        query = base_query if base_query is not None else select(self.model)
        query = self.apply_filters(query, request.filters)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.session.execute(count_query)).scalar_one()

        for order in request.orders:
            column = self.column(order.field)
            query = query.order_by(
                column.desc() if order.direction is SortDirection.DESC else column.asc()
            )
        query = query.offset(request.offset).limit(request.size)

        result = await self.session.execute(query)
        return list(result.scalars().all()), total
