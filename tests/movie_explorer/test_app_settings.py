"""Unit tests covering the typed application settings implementation."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from movie_explorer.settings import (
    DEFAULT_POSTER_BASE_URL,
    DEFAULT_REDIS_URL,
    AppSettings,
)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("STORAGE_BACKEND", "REDIS_URL", "TRENDING_LIMIT", "POSTER_BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    configured = AppSettings(_env_file=None)

    assert configured.storage_backend == "memory"
    assert configured.redis_url == DEFAULT_REDIS_URL
    assert configured.poster_base_url == DEFAULT_POSTER_BASE_URL
    assert configured.trending_limit == 5
    assert configured.min_search_term_length == 2


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STORAGE_BACKEND", "redis")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/2")
    monkeypatch.setenv("TRENDING_LIMIT", "10")

    configured = AppSettings(_env_file=None)

    assert configured.storage_backend == "redis"
    assert configured.redis_url == "redis://cache:6379/2"
    assert configured.trending_limit == 10


def test_invalid_backend_rejected() -> None:
    with pytest.raises(ValidationError):
        AppSettings(storage_backend="sqlite")


def test_optional_config_warnings() -> None:
    memory = AppSettings(storage_backend="memory")
    assert any("STORAGE_BACKEND" in warning for warning in memory.optional_config_warnings())

    default_redis = AppSettings(storage_backend="redis", redis_url=DEFAULT_REDIS_URL)
    assert any("REDIS_URL" in warning for warning in default_redis.optional_config_warnings())

    explicit = AppSettings(storage_backend="redis", redis_url="redis://cache:6379/0")
    assert explicit.optional_config_warnings() == []


def test_log_level_numeric_falls_back_to_info() -> None:
    assert AppSettings(log_level="debug").log_level_numeric == logging.DEBUG
    assert AppSettings(log_level="chatty").log_level_numeric == logging.INFO
