"""Typed HTTP client for entities owned by another service.

Calls never raise on remote failure. Each operation returns a `Lookup`,
an explicit result that is FOUND (with a value), ABSENT (the remote says
the entity does not exist) or UNAVAILABLE (timeout, transport error,
unexpected status or body). Call sites decide what UNAVAILABLE means for
them through an `OnRemoteFailure` policy. No retries are attempted.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
from asgi_correlation_id import correlation_id
from pydantic import BaseModel, ValidationError

from src.workforce.core.config import Settings
from src.workforce.core.logging import get_logger

logger = get_logger(__name__)


class LookupStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Lookup[T]:
    """Outcome of one remote call."""

    status: LookupStatus
    value: T | None = None
    reason: str | None = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(LookupStatus.FOUND, value)

    @classmethod
    def absent(cls) -> "Lookup[T]":
        return cls(LookupStatus.ABSENT)

    @classmethod
    def unavailable(cls, reason: str) -> "Lookup[T]":
        return cls(LookupStatus.UNAVAILABLE, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def is_unavailable(self) -> bool:
        return self.status is LookupStatus.UNAVAILABLE


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared async HTTP client for all reference clients of a service."""
    return httpx.AsyncClient(
        timeout=settings.remote_timeout_seconds,
        headers={"Accept": "application/json"},
    )


class RemoteReferenceClient[D: BaseModel]:
    """Fetches or validates entities of one collection on a remote service.

    Subclasses set:
        target: Human-readable name of the remote service.
        collection: Path segment of the remote collection.
        owner: Owner name for dependent lookups (`count-by-{owner}`), if any.
        detail_model: Model the remote entity is parsed into.
    """

    target: str
    collection: str
    owner: str | None = None
    detail_model: type[D]

    def __init__(self, base_url: str, http: httpx.AsyncClient, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.http = http
        self.timeout = timeout

    def _url(self, *segments: object) -> str:
        path = "/".join(str(s) for s in (self.collection, *segments))
        return f"{self.base_url}/{path}"

    async def _call[T](
        self,
        operation: str,
        url: str,
        parse: Callable[[Any], T],
        params: dict[str, Any] | None = None,
        not_found_is_absent: bool = False,
    ) -> Lookup[T]:
        headers = {}
        request_id = correlation_id.get()
        if request_id:
            headers["X-Request-ID"] = request_id

        try:
            response = await self.http.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
        except httpx.HTTPError as e:
            return self._unavailable(operation, url, f"{type(e).__name__}: {e}")

        if response.status_code == 404 and not_found_is_absent:
            return Lookup.absent()
        if not response.is_success:
            return self._unavailable(operation, url, f"HTTP {response.status_code}")

        try:
            return Lookup.found(parse(response.json()))
        except (ValueError, TypeError, ValidationError) as e:
            return self._unavailable(operation, url, f"invalid response body: {e}")

    def _unavailable(self, operation: str, url: str, reason: str) -> Lookup[Any]:
        logger.warning(
            "Remote call failed",
            target=self.target,
            operation=operation,
            url=url,
            reason=reason,
        )
        return Lookup.unavailable(reason)

    def _parse_one(self, data: Any) -> D:
        return self.detail_model.model_validate(data)

    def _parse_list(self, data: Any) -> list[D]:
        if not isinstance(data, list):
            raise TypeError(f"expected a JSON array, got {type(data).__name__}")
        return [self.detail_model.model_validate(item) for item in data]

    @staticmethod
    def _parse_bool(data: Any) -> bool:
        if not isinstance(data, bool):
            raise TypeError(f"expected a JSON boolean, got {type(data).__name__}")
        return data

    @staticmethod
    def _parse_count(data: Any) -> int:
        if isinstance(data, bool) or not isinstance(data, int) or data < 0:
            raise TypeError(f"expected a non-negative integer, got {data!r}")
        return data

    async def fetch_one(self, id: int) -> Lookup[D]:
        """GET /{collection}/{id}; 404 is ABSENT."""
        return await self._call(
            "fetch_one", self._url(id), self._parse_one, not_found_is_absent=True
        )

    async def fetch_many(self, ids: Iterable[int | None]) -> Lookup[list[D]]:
        """GET /{collection}/by-ids, once for all distinct ids.

        Missing entities are simply not in the result. No call is made for
        an empty id set.
        """
        unique_ids = list(dict.fromkeys(i for i in ids if i is not None))
        if not unique_ids:
            return Lookup.found([])
        return await self._call(
            "fetch_many", self._url("by-ids"), self._parse_list, params={"ids": unique_ids}
        )

    async def exists(self, id: int) -> Lookup[bool]:
        """GET /{collection}/{id}/exists."""
        return await self._call("exists", self._url(id, "exists"), self._parse_bool)

    async def count_dependents(self, owner_id: int) -> Lookup[int]:
        """GET /{collection}/count-by-{owner}/{owner_id}."""
        return await self._call(
            "count_dependents",
            self._url(f"count-by-{self._owner()}", owner_id),
            self._parse_count,
        )

    async def list_dependents(self, owner_id: int) -> Lookup[list[D]]:
        """GET /{collection}/by-{owner}/{owner_id}."""
        return await self._call(
            "list_dependents",
            self._url(f"by-{self._owner()}", owner_id),
            self._parse_list,
        )

    def _owner(self) -> str:
        if self.owner is None:
            raise TypeError(f"{type(self).__name__} has no owner relationship")
        return self.owner
