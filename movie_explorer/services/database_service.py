"""Stable pass-through API over :class:`DocumentStore` for upstream callers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from movie_explorer.schemas.payloads import MovieRef, ToggleResult
from movie_explorer.schemas.records import Favorite, Review, SearchRecord, TrendingMovie
from movie_explorer.store.document_store import DocumentStore


class DatabaseService:
    """Re-exposes favorites, reviews, and search operations. Adds no logic."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    # Favorites
    async def is_favorite(self, user_id: str, movie_id: str) -> bool:
        return await self._store.is_favorite(user_id, movie_id)

    async def get_favorite_doc(self, user_id: str, movie_id: str) -> Favorite | None:
        return await self._store.get_favorite_doc(user_id, movie_id)

    async def toggle_favorite(
        self, user_id: str, movie: MovieRef | Mapping[str, Any]
    ) -> ToggleResult:
        return await self._store.toggle_favorite(user_id, movie)

    async def get_favorites(self, user_id: str) -> list[Favorite]:
        return await self._store.get_favorites(user_id)

    # Reviews
    async def add_review(
        self, user_id: str, movie_id: str, rating: int, text: str
    ) -> Review:
        return await self._store.add_review(user_id, movie_id, rating, text)

    async def get_reviews(self, movie_id: str) -> list[Review]:
        return await self._store.get_reviews(movie_id)

    # Search/Trending
    async def update_search_count(
        self, query: str, movie: MovieRef | Mapping[str, Any]
    ) -> SearchRecord | None:
        return await self._store.update_search_count(query, movie)

    async def get_trending_movies(self) -> list[TrendingMovie]:
        return await self._store.get_trending_movies()


__all__ = ["DatabaseService"]
