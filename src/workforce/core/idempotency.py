"""Idempotency cache for safely retryable creation requests.

A caller-supplied key maps to the stored result of the first request that
used it. Repeating the key returns that result without running the
creation again. Storage is best-effort: the in-memory store is lost on
restart and Redis entries expire after the configured TTL.
"""

import asyncio
import json
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, Protocol

from pydantic import BaseModel
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.workforce.core.config import Settings
from src.workforce.core.logging import get_logger

logger = get_logger(__name__)

PREFIX_IDEMPOTENCY = "idempotency"


class IdempotencyStore(Protocol):
    """Key/value storage behind the idempotency cache."""

    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def put(self, key: str, value: dict[str, Any]) -> None: ...

    async def aclose(self) -> None: ...


class InMemoryIdempotencyStore:
    """Process-local store with an injectable expiry policy.

    Args:
        ttl_seconds: How long a stored result is replayed.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> dict[str, Any] | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def put(self, key: str, value: dict[str, Any]) -> None:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries[key] = (now + self.ttl_seconds, value)

    async def aclose(self) -> None:
        async with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)


class RedisIdempotencyStore:
    """Redis-backed store; entries are JSON strings written with SETEX.

    Redis failures after startup degrade to a cache miss on read and a
    skipped write, so a committed creation is still returned to the caller.
    """

    def __init__(self, redis: Redis, ttl_seconds: int):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _redis_key(key: str) -> str:
        return f"{PREFIX_IDEMPOTENCY}:{key}"

    async def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = await self.redis.get(self._redis_key(key))
            return None if raw is None else json.loads(raw)
        except (RedisError, ValueError) as e:
            logger.warning("Idempotency lookup failed, treating as miss", key=key, error=str(e))
            return None

    async def put(self, key: str, value: dict[str, Any]) -> None:
        try:
            await self.redis.setex(self._redis_key(key), self.ttl_seconds, json.dumps(value))
        except RedisError as e:
            logger.warning("Idempotency store write failed, result not kept", key=key, error=str(e))

    async def aclose(self) -> None:
        await self.redis.aclose()


class IdempotencyCache:
    """Runs a creation at most once per idempotency key.

    Concurrent requests carrying the same key are serialized on a per-key
    lock, so only the first one computes; the rest replay its stored result.
    A failing computation stores nothing and its exception propagates.
    """

    def __init__(self, store: IdempotencyStore):
        self.store = store
        self._locks: dict[str, tuple[asyncio.Lock, int]] = {}

    @asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        lock, users = self._locks.get(key, (asyncio.Lock(), 0))
        self._locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            lock, users = self._locks[key]
            if users <= 1:
                del self._locks[key]
            else:
                self._locks[key] = (lock, users - 1)

    async def get_or_compute[M: BaseModel](
        self,
        key: str | None,
        compute: Callable[[], Awaitable[M]],
        model: type[M],
        scope: str = "default",
    ) -> M:
        """Return the stored result for `key`, or compute and store it.

        Args:
            key: Caller-supplied opaque token. None or blank bypasses the cache.
            compute: The creation to run at most once per key.
            model: Result type, used to rebuild stored results.
            scope: Namespace so the same key on different endpoints does not collide.
        """
        if key is None or not key.strip():
            return await compute()

        scoped_key = f"{scope}:{key.strip()}"
        async with self._key_lock(scoped_key):
            stored = await self.store.get(scoped_key)
            if stored is not None:
                logger.info("Replaying stored result for idempotency key", idempotency_key=key)
                return model.model_validate(stored)

            result = await compute()
            await self.store.put(scoped_key, result.model_dump(mode="json"))
            return result


async def build_idempotency_store(settings: Settings) -> IdempotencyStore:
    """Use Redis when configured and reachable, otherwise process memory."""
    ttl = settings.idempotency_ttl_seconds
    if not settings.redis_url:
        logger.info("Redis not configured (REDIS_URL not set), idempotency kept in memory")
        return InMemoryIdempotencyStore(ttl)

    redis = Redis.from_url(
        settings.redis_url,
        max_connections=settings.redis_pool_size,
        decode_responses=True,
    )
    try:
        await redis.ping()  # type: ignore[misc]
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Falling back to in-memory idempotency.")
        await redis.aclose()
        return InMemoryIdempotencyStore(ttl)

    logger.info("Redis connected successfully")
    return RedisIdempotencyStore(redis, ttl)
