"""Uniqueness and cross-service reference checks run before a write."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

from src.workforce.clients.base import LookupStatus, RemoteReferenceClient
from src.workforce.core.exceptions import (
    DuplicateFieldError,
    ReferencedEntityMissingError,
    RemoteUnavailableError,
)
from src.workforce.core.logging import get_logger
from src.workforce.models.enums import OnRemoteFailure
from src.workforce.repositories.base import BaseRepository

logger = get_logger(__name__)


class UniquenessValidator[M: SQLModel]:
    """Case-insensitive uniqueness of text fields within one table.

    Args:
        repo: Repository of the table to search.
        resource: Display name used in conflict messages.
        fields: Model attributes that must be unique.
    """

    def __init__(self, repo: BaseRepository[M], resource: str, fields: Sequence[str]):
        self.repo = repo
        self.resource = resource
        self.fields = tuple(fields)

    async def validate_create(self, candidate: Mapping[str, Any]) -> None:
        await self._check(candidate, exclude_id=None)

    async def validate_update(self, candidate: Mapping[str, Any], exclude_id: int) -> None:
        """Like `validate_create`, but the record being updated never conflicts with itself."""
        await self._check(candidate, exclude_id=exclude_id)

    async def _check(self, candidate: Mapping[str, Any], exclude_id: int | None) -> None:
        for field in self.fields:
            value = candidate.get(field)
            if value is None:
                continue
            existing = await self.repo.find_by_field_ci(field, str(value), exclude_id)
            if existing is not None:
                raise DuplicateFieldError(self.resource, to_camel(field), getattr(existing, field))


class ReferenceValidator:
    """Checks that a soft reference resolves in the owning service.

    Args:
        client: Client for the owning service.
        resource: Display name of the referenced entity, e.g. "Department".
        policy: What to do when the owning service cannot be reached.
    """

    def __init__(
        self,
        client: RemoteReferenceClient[Any],
        resource: str,
        policy: OnRemoteFailure,
    ):
        self.client = client
        self.resource = resource
        self.policy = policy

    async def require(self, ref_id: int | None, field: str) -> None:
        """Raise unless `ref_id` is None or exists remotely.

        Raises:
            ReferencedEntityMissingError: The entity does not exist, or the
                remote is unavailable under TREAT_AS_ABSENT.
            RemoteUnavailableError: The remote is unavailable under BLOCK.
        """
        if ref_id is None:
            return

        lookup = await self.client.exists(ref_id)
        if lookup.status is LookupStatus.FOUND:
            if lookup.value:
                return
            raise ReferencedEntityMissingError(self.resource, field, ref_id)
        if lookup.status is LookupStatus.ABSENT:
            raise ReferencedEntityMissingError(self.resource, field, ref_id)

        match self.policy:
            case OnRemoteFailure.BLOCK:
                raise RemoteUnavailableError(self.client.target, f"verify {field}")
            case OnRemoteFailure.PROCEED:
                logger.warning(
                    "Reference unverified, write proceeds",
                    resource=self.resource,
                    field=field,
                    reference_id=ref_id,
                )
            case OnRemoteFailure.TREAT_AS_ABSENT:
                raise ReferencedEntityMissingError(self.resource, field, ref_id)
