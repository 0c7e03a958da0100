"""Async key-value backends underneath the document store.

The store only relies on four primitives (``get``/``set``/``remove``/
``remove_many``) over string keys and string values. Two implementations ship
with the package: :class:`RedisBackend` for durable storage and
:class:`InMemoryBackend` for local development and tests. Both translate their
failures into :class:`~movie_explorer.errors.BackendFailure` so the layers
above never need to know which driver is in use.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from redis.asyncio import Redis
from redis.exceptions import RedisError

from movie_explorer.errors import BackendFailure
from movie_explorer.settings import AppSettings, get_settings

logger = logging.getLogger(__name__)

_backend: InMemoryBackend | RedisBackend | None = None
_backend_loop: asyncio.AbstractEventLoop | None = None
_backend_lock = asyncio.Lock()


@runtime_checkable
class KeyValueBackend(Protocol):
    """Minimal async contract the document store depends on."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def remove_many(self, keys: Sequence[str]) -> None: ...


class InMemoryBackend:
    """Process-local backend storing values in a dictionary.

    Each primitive runs under an :class:`asyncio.Lock`, so a single call is
    atomic with respect to other coroutines. Nothing coordinates *sequences*
    of calls; the store's read-modify-write operations may still interleave.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._store[key] = value

    async def remove(self, key: str) -> None:
        async with self._lock:
            self._store.pop(key, None)

    async def remove_many(self, keys: Sequence[str]) -> None:
        async with self._lock:
            for key in keys:
                self._store.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Return a shallow copy of the stored values."""

        return dict(self._store)

    async def aclose(self) -> None:
        return None


class RedisBackend:
    """Backend persisting values in Redis through ``redis.asyncio``."""

    def __init__(self, client: Redis) -> None:
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> RedisBackend:
        client = Redis.from_url(url, decode_responses=True, encoding="utf-8")
        return cls(client)

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except RedisError as exc:
            raise BackendFailure(f"Redis ping failed: {exc}") from exc

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as exc:
            raise BackendFailure(f"Redis get failed for key {key}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await self._redis.set(key, value)
        except RedisError as exc:
            raise BackendFailure(f"Redis set failed for key {key}: {exc}") from exc

    async def remove(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as exc:
            raise BackendFailure(f"Redis delete failed for key {key}: {exc}") from exc

    async def remove_many(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        try:
            # A single DEL keeps the bulk removal atomic on the server side.
            await self._redis.delete(*keys)
        except RedisError as exc:
            raise BackendFailure(f"Redis delete failed for {len(keys)} keys: {exc}") from exc

    async def aclose(self) -> None:
        await self._redis.aclose()


def build_backend(settings: AppSettings | None = None) -> InMemoryBackend | RedisBackend:
    """Instantiate the backend selected by ``settings`` without connecting."""

    resolved = settings or get_settings()
    if resolved.storage_backend == "redis":
        return RedisBackend.from_url(resolved.redis_url)
    return InMemoryBackend()


async def get_backend(settings: AppSettings | None = None) -> InMemoryBackend | RedisBackend:
    """Return the process-wide backend, creating and verifying it on first use.

    A Redis client is bound to the event loop that created it. When the cached
    Redis backend belongs to a loop other than the running one it is dropped
    and rebuilt. Call :func:`close_backend` before the owning loop finishes so
    the old connection pool is released.
    """

    global _backend, _backend_loop

    loop = asyncio.get_running_loop()
    async with _backend_lock:
        if _backend is not None:
            if not isinstance(_backend, RedisBackend) or _backend_loop is loop:
                return _backend
            logger.warning("Discarding Redis backend bound to a previous event loop")
            _backend = None

        backend = build_backend(settings)
        if isinstance(backend, RedisBackend):
            try:
                await backend.ping()
            except BackendFailure:
                await backend.aclose()
                raise
            logger.info("Redis backend connection established successfully")
        else:
            logger.info("Using in-memory backend; data will not persist")

        _backend = backend
        _backend_loop = loop
        return _backend


async def close_backend() -> None:
    """Close the process-wide backend gracefully."""

    global _backend, _backend_loop
    async with _backend_lock:
        if _backend is not None:
            await _backend.aclose()
            _backend = None
            _backend_loop = None


__all__ = [
    "InMemoryBackend",
    "KeyValueBackend",
    "RedisBackend",
    "build_backend",
    "close_backend",
    "get_backend",
]
