"""Composition root exposing every collection operation behind one object.

Persistence-oriented operations are delegated to one repository per key:
* :class:`UserRepository` - ``create_user``, lookups, ``update_user``.
* :class:`FavoriteRepository` - ``toggle_favorite``, ``is_favorite``,
  ``get_favorites`` and the explicit ``compact_favorites`` repair.
* :class:`ReviewRepository` - ``add_review`` and ``get_reviews``.
* :class:`SearchRepository` - ``update_search_count`` and the
  ``get_trending_movies`` aggregation.

The session slot and the bulk reset live here because they span keys rather
than belonging to one collection.

Every mutation loads a whole collection, edits it in memory, and writes the
whole collection back. Nothing locks across operations: two concurrent
mutations of the same collection resolve as last-completed-write-wins, so
callers that need stronger guarantees must serialize their calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from movie_explorer.schemas.payloads import MovieRef, ToggleResult, UserCreate, UserUpdate
from movie_explorer.schemas.records import (
    Favorite,
    Review,
    SearchRecord,
    SessionUser,
    TrendingMovie,
    User,
)
from movie_explorer.settings import AppSettings, get_settings
from movie_explorer.storage.backend import KeyValueBackend
from movie_explorer.storage.codec import CollectionCodec
from movie_explorer.storage.keys import ALL_KEYS
from movie_explorer.storage.session import SessionSlot
from movie_explorer.store.base import Clock, utc_now
from movie_explorer.store.favorites import FavoriteRepository
from movie_explorer.store.reviews import ReviewRepository
from movie_explorer.store.searches import SearchRepository
from movie_explorer.store.users import UserRepository

logger = logging.getLogger(__name__)


class DocumentStore:
    """Typed operations over the users, favorites, reviews, and searches collections."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        settings: AppSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        resolved = settings or get_settings()
        resolved_clock = clock or utc_now

        self.clock = resolved_clock
        self._backend = backend
        self._codec = CollectionCodec(backend)
        self.users = UserRepository(self._codec, clock=resolved_clock)
        self.favorites = FavoriteRepository(
            self._codec,
            clock=resolved_clock,
            poster_base_url=resolved.poster_base_url,
        )
        self.reviews = ReviewRepository(self._codec, self.users, clock=resolved_clock)
        self.searches = SearchRepository(
            self._codec,
            clock=resolved_clock,
            poster_base_url=resolved.poster_base_url,
            min_term_length=resolved.min_search_term_length,
            trending_limit=resolved.trending_limit,
        )
        self.session = SessionSlot(backend)

    # ------------------------- Users -------------------------
    async def create_user(self, candidate: UserCreate) -> User:
        return await self.users.create_user(candidate)

    async def get_users(self) -> list[User]:
        return await self.users.get_users()

    async def get_user_by_email(self, email: str) -> User | None:
        return await self.users.get_user_by_email(email)

    async def get_user_by_id(self, user_id: str) -> User | None:
        return await self.users.get_user_by_id(user_id)

    async def update_user(
        self, user_id: str, updates: UserUpdate | Mapping[str, Any]
    ) -> User:
        return await self.users.update_user(user_id, updates)

    # ----------------------- Favorites -----------------------
    async def get_favorites_all(self) -> list[Favorite]:
        return await self.favorites.get_all()

    async def get_favorites(self, user_id: str) -> list[Favorite]:
        return await self.favorites.get_favorites(user_id)

    async def compact_favorites(self, user_id: str) -> list[Favorite]:
        return await self.favorites.compact(user_id)

    async def is_favorite(self, user_id: str, movie_id: str) -> bool:
        return await self.favorites.is_favorite(user_id, movie_id)

    async def get_favorite_doc(self, user_id: str, movie_id: str) -> Favorite | None:
        return await self.favorites.get_favorite_doc(user_id, movie_id)

    async def toggle_favorite(
        self, user_id: str, movie: MovieRef | Mapping[str, Any]
    ) -> ToggleResult:
        return await self.favorites.toggle_favorite(user_id, _as_movie_ref(movie))

    # ------------------------ Reviews ------------------------
    async def add_review(
        self, user_id: str, movie_id: str, rating: int, text: str
    ) -> Review:
        return await self.reviews.add_review(user_id, movie_id, rating, text)

    async def get_reviews(self, movie_id: str) -> list[Review]:
        return await self.reviews.get_reviews(movie_id)

    async def get_reviews_all(self) -> list[Review]:
        return await self.reviews.get_all()

    # -------------------- Searches/Trending ------------------
    async def update_search_count(
        self, term: str, movie: MovieRef | Mapping[str, Any]
    ) -> SearchRecord | None:
        return await self.searches.update_search_count(term, _as_movie_ref(movie))

    async def get_searches(self) -> list[SearchRecord]:
        return await self.searches.get_searches()

    async def get_trending_movies(self) -> list[TrendingMovie]:
        return await self.searches.get_trending_movies()

    # ------------------------ Session ------------------------
    async def store_session(self, session: SessionUser | Mapping[str, Any]) -> None:
        await self.session.store(session)

    async def get_stored_session(self) -> SessionUser | None:
        return await self.session.get()

    async def clear_session(self) -> None:
        await self.session.clear()

    # ------------------------- Reset -------------------------
    async def clear_all_data(self) -> None:
        """Remove every collection key and the session key in one call."""

        await self._backend.remove_many(list(ALL_KEYS))
        logger.info("Cleared all stored collections and the session")


def _as_movie_ref(movie: MovieRef | Mapping[str, Any]) -> MovieRef:
    if isinstance(movie, MovieRef):
        return movie
    return MovieRef.model_validate(dict(movie))


__all__ = ["DocumentStore"]
