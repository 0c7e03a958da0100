"""Pydantic models for every record persisted by the document store.

Python attributes use snake_case while the serialized JSON keeps the storage
layout's field names (``_id``, ``userId``, ``createdAt`` ...) through aliases.
Always dump with ``by_alias=True`` when writing to the backend.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC timestamp, treating naive values as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class StoredRecord(BaseModel):
    """Shared configuration for persisted documents."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id", description="Opaque document identifier")
    created_at: datetime = Field(
        ..., alias="createdAt", description="Creation timestamp (UTC)"
    )

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def to_storage(self) -> dict:
        """Return the JSON-ready mapping written to the backend."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class User(StoredRecord):
    """Registered account. ``email`` is unique across the collection."""

    email: str
    name: str
    password_hash: str = Field(..., alias="password", repr=False)
    avatar: str | None = None


class Favorite(StoredRecord):
    """A movie bookmarked by a user, keyed by ``(user_id, movie_id)``."""

    user_id: str = Field(..., alias="userId")
    movie_id: str = Field(..., alias="movieId")
    title: str
    poster_url: str | None = None


class Review(StoredRecord):
    """A rating plus free text left by a user on a movie."""

    user_id: str = Field(..., alias="userId")
    movie_id: str = Field(..., alias="movieId")
    rating: int
    text: str
    user_name: str | None = Field(None, alias="userName")


class SearchRecord(StoredRecord):
    """Raw per-term search counter pointing at the movie last chosen for it."""

    search_term: str = Field(..., alias="searchTerm")
    movie_id: str
    count: int = Field(1, ge=0)
    title: str
    poster_url: str | None = None


class TrendingMovie(SearchRecord):
    """Search counts aggregated across every term pointing at one movie."""


class SessionUser(BaseModel):
    """Identity snapshot kept in the session slot between launches."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    email: str
    name: str
    avatar: str | None = None

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "Favorite",
    "Review",
    "SearchRecord",
    "SessionUser",
    "StoredRecord",
    "TrendingMovie",
    "User",
    "ensure_utc",
]
