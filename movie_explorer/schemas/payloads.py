"""Input and result payloads accepted or returned by store operations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from movie_explorer.schemas.records import Favorite


class MovieRef(BaseModel):
    """Catalog triple used to build favorite and search records."""

    id: str = Field(..., description="Catalog movie id; integers are coerced to strings")
    title: str = ""
    poster_path: str | None = Field(
        None, description="Path relative to the poster image host, e.g. ``/abc.jpg``"
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class UserCreate(BaseModel):
    """Already-normalized user candidate supplied by the credential service."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    email: str
    name: str
    password_hash: str = Field(..., alias="password", repr=False)
    avatar: str | None = None


class UserUpdate(BaseModel):
    """Partial user update; only fields explicitly set are merged."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    email: str | None = None
    name: str | None = None
    password_hash: str | None = Field(None, alias="password", repr=False)
    avatar: str | None = None

    @field_validator("email", "name", "password_hash")
    @classmethod
    def _reject_explicit_none(cls, value: str | None) -> str:
        if value is None:
            raise ValueError("field cannot be cleared")
        return value


class ToggleResult(BaseModel):
    """Outcome of :meth:`FavoriteRepository.toggle_favorite`."""

    removed: bool
    doc: Favorite | None = None


__all__ = ["MovieRef", "ToggleResult", "UserCreate", "UserUpdate"]
