"""Refuses deletion of a record while other records still depend on it."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from src.workforce.clients.base import RemoteReferenceClient
from src.workforce.core.exceptions import (
    DependentsExistError,
    NotFoundError,
    RemoteUnavailableError,
)
from src.workforce.core.logging import get_logger
from src.workforce.models.enums import OnRemoteFailure

logger = get_logger(__name__)


class DependentCounter(Protocol):
    """Counts the records that depend on an owner."""

    dependents: str

    async def count(self, owner_id: int) -> int: ...


class LocalDependentCounter:
    """Dependents stored by the same service, counted through a repository."""

    def __init__(self, count: Callable[[int], Awaitable[int]], dependents: str):
        self._count = count
        self.dependents = dependents

    async def count(self, owner_id: int) -> int:
        return await self._count(owner_id)


class RemoteDependentCounter:
    """Dependents owned by another service.

    When the count cannot be obtained, BLOCK refuses the deletion with
    RemoteUnavailable; PROCEED and TREAT_AS_ABSENT both count zero
    dependents and let the deletion go ahead.
    """

    def __init__(
        self,
        client: RemoteReferenceClient[Any],
        policy: OnRemoteFailure,
        dependents: str,
    ):
        self.client = client
        self.policy = policy
        self.dependents = dependents

    async def count(self, owner_id: int) -> int:
        lookup = await self.client.count_dependents(owner_id)
        if lookup.is_found and lookup.value is not None:
            return lookup.value

        if self.policy is OnRemoteFailure.BLOCK:
            raise RemoteUnavailableError(
                self.client.target, f"verify {self.dependents} before deletion"
            )

        logger.warning(
            "Dependent count unavailable, deletion proceeds",
            owner_id=owner_id,
            dependents=self.dependents,
            policy=self.policy.value,
        )
        return 0


class DeletionGuard[M]:
    """Loads an owner and checks that it has no dependents left.

    Args:
        resource: Display name of the owner, e.g. "Department".
        load: Loads the owner by id, None when it does not exist.
        counter: Source of the dependent count.
    """

    def __init__(
        self,
        resource: str,
        load: Callable[[int], Awaitable[M | None]],
        counter: DependentCounter,
    ):
        self.resource = resource
        self.load = load
        self.counter = counter

    async def assert_deletable(self, owner_id: int) -> M:
        """Return the owner when it may be deleted.

        Raises:
            NotFoundError: The owner does not exist.
            DependentsExistError: Dependents still reference the owner.
            RemoteUnavailableError: The count could not be obtained under a BLOCK policy.
        """
        owner = await self.load(owner_id)
        if owner is None:
            raise NotFoundError(self.resource, owner_id)

        count = await self.counter.count(owner_id)
        if count > 0:
            logger.info(
                "Deletion refused, dependents exist",
                resource=self.resource,
                owner_id=owner_id,
                dependents=self.counter.dependents,
                count=count,
            )
            raise DependentsExistError(self.resource, owner_id, self.counter.dependents, count)
        return owner
