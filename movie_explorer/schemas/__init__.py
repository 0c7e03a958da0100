"""Pydantic schemas for persisted records and operation payloads."""

from .payloads import MovieRef, ToggleResult, UserCreate, UserUpdate
from .records import (
    Favorite,
    Review,
    SearchRecord,
    SessionUser,
    StoredRecord,
    TrendingMovie,
    User,
    ensure_utc,
)

__all__ = [
    "Favorite",
    "MovieRef",
    "Review",
    "SearchRecord",
    "SessionUser",
    "StoredRecord",
    "ToggleResult",
    "TrendingMovie",
    "User",
    "UserCreate",
    "UserUpdate",
    "ensure_utc",
]
