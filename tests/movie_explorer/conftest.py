"""Shared fixtures: an in-memory backend, a deterministic clock, and a wired store."""

from __future__ import annotations

import pytest

from movie_explorer.settings import AppSettings
from movie_explorer.storage.backend import InMemoryBackend
from movie_explorer.store.document_store import DocumentStore
from tests.movie_explorer.support import TickingClock


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        storage_backend="memory",
        trending_limit=5,
        min_search_term_length=2,
        password_hash_rounds=4,
    )


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def store(
    backend: InMemoryBackend, settings: AppSettings, clock: TickingClock
) -> DocumentStore:
    return DocumentStore(backend, settings=settings, clock=clock)
