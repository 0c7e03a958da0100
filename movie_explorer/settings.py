"""Centralized configuration management for the movie explorer store."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load a local .env before the settings singleton is instantiated so that any
# module importing :mod:`movie_explorer.settings` sees the same environment.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
DEFAULT_TRENDING_LIMIT = 5
DEFAULT_MIN_SEARCH_TERM_LENGTH = 2
DEFAULT_PASSWORD_HASH_ROUNDS = 12
DEFAULT_LOG_LEVEL = "INFO"

StorageBackendName = Literal["memory", "redis"]


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Every field can be supplied through the environment (or ``.env``) using the
    alias shown, or passed by field name when constructing the settings in
    tests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    storage_backend: StorageBackendName = Field(
        default="memory",
        alias="STORAGE_BACKEND",
        description=(
            "Key-value backend used for persistence. ``memory`` keeps data in"
            " process and is lost on exit; ``redis`` persists to REDIS_URL."
        ),
    )
    redis_url: str = Field(
        default=DEFAULT_REDIS_URL,
        alias="REDIS_URL",
        description="Redis connection string used when STORAGE_BACKEND=redis.",
    )
    poster_base_url: str = Field(
        default=DEFAULT_POSTER_BASE_URL,
        alias="POSTER_BASE_URL",
        description="Image host prefix prepended to catalog poster paths.",
    )
    trending_limit: int = Field(
        default=DEFAULT_TRENDING_LIMIT,
        alias="TRENDING_LIMIT",
        ge=1,
        description="Maximum number of aggregated entries returned as trending.",
    )
    min_search_term_length: int = Field(
        default=DEFAULT_MIN_SEARCH_TERM_LENGTH,
        alias="MIN_SEARCH_TERM_LENGTH",
        ge=1,
        description="Normalized search terms shorter than this are ignored.",
    )
    password_hash_rounds: int = Field(
        default=DEFAULT_PASSWORD_HASH_ROUNDS,
        alias="PASSWORD_HASH_ROUNDS",
        ge=4,
        le=31,
        description="bcrypt cost factor used by the credential service.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for configuration worth a second look."""

        warnings: list[str] = []

        if self.storage_backend == "memory":
            warnings.append(
                "STORAGE_BACKEND is 'memory' - data will not survive process exit"
            )
        elif self.redis_url == DEFAULT_REDIS_URL:
            warnings.append(
                "REDIS_URL is not set - using the default localhost Redis instance"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MIN_SEARCH_TERM_LENGTH",
    "DEFAULT_PASSWORD_HASH_ROUNDS",
    "DEFAULT_POSTER_BASE_URL",
    "DEFAULT_REDIS_URL",
    "DEFAULT_TRENDING_LIMIT",
    "StorageBackendName",
    "get_settings",
]
