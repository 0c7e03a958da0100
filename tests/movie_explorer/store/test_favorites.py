"""Favorites: toggle state machine, composite-key queries, and dedup-on-read repair."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from movie_explorer.errors import BackendFailure
from movie_explorer.schemas.payloads import MovieRef
from movie_explorer.storage.backend import InMemoryBackend
from movie_explorer.storage.keys import FAVORITES_KEY
from movie_explorer.store.document_store import DocumentStore
from tests.movie_explorer.support import seed, stored


def _raw(fav_id: str, user_id: str, movie_id: str, title: str, created_at: str) -> dict:
    return {
        "_id": fav_id,
        "userId": user_id,
        "movieId": movie_id,
        "title": title,
        "createdAt": created_at,
    }


@pytest.mark.asyncio
async def test_toggle_adds_with_poster_url_then_removes(store: DocumentStore) -> None:
    movie = MovieRef(id=10, title="Movie A", poster_path="/poster.jpg")

    added = await store.toggle_favorite("user-1", movie)
    assert added.removed is False
    assert added.doc is not None
    assert added.doc.poster_url == "https://image.tmdb.org/t/p/w500/poster.jpg"
    assert added.doc.movie_id == "10"
    assert added.doc.id == "fav_user-1_10_1704067200000"

    removed = await store.toggle_favorite("user-1", movie)
    assert removed.removed is True
    assert removed.doc is None


@pytest.mark.asyncio
async def test_toggle_without_poster_leaves_url_unset(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    result = await store.toggle_favorite("u1", {"id": "7", "title": "No Poster"})

    assert result.doc is not None
    assert result.doc.poster_url is None
    assert "poster_url" not in stored(backend, FAVORITES_KEY)[0]


@pytest.mark.asyncio
async def test_double_toggle_restores_collection_size(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    await store.toggle_favorite("u2", MovieRef(id=1, title="Other user"))
    size_before = len(stored(backend, FAVORITES_KEY))

    await store.toggle_favorite("u1", MovieRef(id=5, title="Five"))
    await store.toggle_favorite("u1", MovieRef(id=5, title="Five"))

    assert len(stored(backend, FAVORITES_KEY)) == size_before
    assert await store.is_favorite("u1", "5") is False


@pytest.mark.asyncio
async def test_is_favorite_tracks_toggle_result(store: DocumentStore) -> None:
    movie = MovieRef(id=42, title="Answer")

    assert await store.is_favorite("u1", "42") is False

    first = await store.toggle_favorite("u1", movie)
    assert first.removed is False
    assert await store.is_favorite("u1", "42") is True
    assert await store.is_favorite("u2", "42") is False

    second = await store.toggle_favorite("u1", movie)
    assert second.removed is True
    assert await store.is_favorite("u1", "42") is False


@pytest.mark.asyncio
async def test_get_favorite_doc_matches_composite_key(store: DocumentStore) -> None:
    await store.toggle_favorite("u1", MovieRef(id=1, title="One"))
    await store.toggle_favorite("u2", MovieRef(id=1, title="One for u2"))

    doc = await store.get_favorite_doc("u2", "1")
    assert doc is not None
    assert doc.title == "One for u2"
    assert await store.get_favorite_doc("u3", "1") is None


@pytest.mark.asyncio
async def test_get_favorites_dedupes_oldest_first_and_sorts_newest_first(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("fav_u1_1_old", "u1", "1", "Duplicate Old", "2024-01-01T00:00:00.000Z"),
            _raw("fav_u1_1_new", "u1", "1", "Duplicate Newer", "2024-02-01T00:00:00.000Z"),
            _raw("fav_u1_2", "u1", "2", "Second Movie", "2024-03-01T00:00:00.000Z"),
        ],
    )

    favorites = await store.get_favorites("u1")

    assert [fav.movie_id for fav in favorites] == ["2", "1"]
    assert favorites[1].title == "Duplicate Old"


@pytest.mark.asyncio
async def test_dedup_write_back_keeps_other_users_records(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("a", "u1", "1", "First", "2024-01-01T00:00:00Z"),
            _raw("b", "u2", "1", "Theirs", "2024-01-02T00:00:00Z"),
            _raw("c", "u1", "1", "Dupe", "2024-01-03T00:00:00Z"),
            _raw("d", "u2", "9", "Theirs too", "2024-01-04T00:00:00Z"),
        ],
    )

    await store.get_favorites("u1")

    assert [item["_id"] for item in stored(backend, FAVORITES_KEY)] == ["b", "d", "a"]


@pytest.mark.asyncio
async def test_get_favorites_without_duplicates_does_not_write(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("a", "u1", "1", "First", "2024-01-01T00:00:00Z"),
            _raw("b", "u1", "2", "Second", "2024-01-02T00:00:00Z"),
        ],
    )
    before = backend.snapshot()[FAVORITES_KEY]
    backend.set = AsyncMock(wraps=backend.set)  # type: ignore[method-assign]

    favorites = await store.get_favorites("u1")

    assert [fav.id for fav in favorites] == ["b", "a"]
    backend.set.assert_not_awaited()
    assert backend.snapshot()[FAVORITES_KEY] == before


@pytest.mark.asyncio
async def test_failed_write_back_does_not_fail_the_read(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("a", "u1", "1", "First", "2024-01-01T00:00:00Z"),
            _raw("b", "u1", "1", "Dupe", "2024-01-02T00:00:00Z"),
        ],
    )
    backend.set = AsyncMock(side_effect=BackendFailure("read-only"))  # type: ignore[method-assign]

    favorites = await store.get_favorites("u1")

    assert [fav.id for fav in favorites] == ["a"]


@pytest.mark.asyncio
async def test_compact_favorites_propagates_write_failures(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("a", "u1", "1", "First", "2024-01-01T00:00:00Z"),
            _raw("b", "u1", "1", "Dupe", "2024-01-02T00:00:00Z"),
        ],
    )

    kept = await store.compact_favorites("u1")
    assert [fav.id for fav in kept] == ["a"]
    assert [item["_id"] for item in stored(backend, FAVORITES_KEY)] == ["a"]

    seed(
        backend,
        FAVORITES_KEY,
        [
            _raw("a", "u1", "1", "First", "2024-01-01T00:00:00Z"),
            _raw("b", "u1", "1", "Dupe", "2024-01-02T00:00:00Z"),
        ],
    )
    backend.set = AsyncMock(side_effect=BackendFailure("read-only"))  # type: ignore[method-assign]
    with pytest.raises(BackendFailure):
        await store.compact_favorites("u1")


@pytest.mark.asyncio
async def test_legacy_records_are_sanitized(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    seed(
        backend,
        FAVORITES_KEY,
        [{"userId": 7, "movieId": 99, "poster_url": 123}],
    )

    favorites = await store.get_favorites_all()

    assert len(favorites) == 1
    legacy = favorites[0]
    assert legacy.id == "fav_7_99"
    assert legacy.user_id == "7"
    assert legacy.movie_id == "99"
    assert legacy.title == "Unknown Title"
    assert legacy.poster_url is None
    assert await store.is_favorite("7", "99") is True


@pytest.mark.asyncio
async def test_write_failure_on_toggle_propagates(
    store: DocumentStore, backend: InMemoryBackend
) -> None:
    backend.set = AsyncMock(side_effect=BackendFailure("read-only"))  # type: ignore[method-assign]

    with pytest.raises(BackendFailure):
        await store.toggle_favorite("u1", MovieRef(id=1, title="One"))
