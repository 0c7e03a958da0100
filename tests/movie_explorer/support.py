"""Test doubles and raw-storage helpers shared by the store tests."""

from __future__ import annotations

import fnmatch
import json
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from typing import Any

from movie_explorer.storage.backend import InMemoryBackend


class TickingClock:
    """Clock returning strictly increasing timestamps, one step per call."""

    def __init__(
        self,
        start: datetime = datetime(2024, 1, 1, tzinfo=UTC),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


class InMemoryRedis:
    """Lightweight async Redis double used for backend tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.delete_calls: list[tuple[str, ...]] = []
        self.closed = False

    async def ping(self) -> bool:
        return True

    async def get(self, key: str) -> str | None:
        return self._store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._store[key] = value

    async def delete(self, *keys: str) -> int:
        self.delete_calls.append(keys)
        removed = 0
        for key in keys:
            if self._store.pop(key, None) is not None:
                removed += 1
        return removed

    async def scan_iter(self, match: str) -> AsyncIterator[str]:  # pragma: no cover - mirror redis API
        for key in list(self._store.keys()):
            if fnmatch.fnmatch(key, match):
                yield key

    async def aclose(self) -> None:
        self.closed = True


def seed(backend: InMemoryBackend, key: str, records: Any) -> None:
    """Write raw JSON straight into ``backend`` without going through the store."""

    backend._store[key] = json.dumps(records)


def stored(backend: InMemoryBackend, key: str) -> Any:
    """Decode the raw JSON currently held under ``key``."""

    raw = backend.snapshot().get(key)
    return None if raw is None else json.loads(raw)
