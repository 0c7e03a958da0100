"""Fixed backend keys for every persisted collection and the session slot."""

from __future__ import annotations

from typing import Final

USERS_KEY: Final = "movie_explorer_users"
FAVORITES_KEY: Final = "movie_explorer_favorites"
REVIEWS_KEY: Final = "movie_explorer_reviews"
SEARCHES_KEY: Final = "movie_explorer_searches"
SESSION_KEY: Final = "movie_explorer_session"

COLLECTION_KEYS: Final = (USERS_KEY, FAVORITES_KEY, REVIEWS_KEY, SEARCHES_KEY)
ALL_KEYS: Final = (*COLLECTION_KEYS, SESSION_KEY)

__all__ = [
    "ALL_KEYS",
    "COLLECTION_KEYS",
    "FAVORITES_KEY",
    "REVIEWS_KEY",
    "SEARCHES_KEY",
    "SESSION_KEY",
    "USERS_KEY",
]
