"""Utilities shared by the collection repositories."""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable
from datetime import UTC, datetime

from movie_explorer.storage.codec import CollectionCodec

Clock = Callable[[], datetime]

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def utc_now() -> datetime:
    """Default clock used when no explicit one is injected."""

    return datetime.now(UTC)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def random_suffix(length: int) -> str:
    """Return ``length`` random base-36 characters for id generation."""

    return "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(length))


def poster_url_for(base_url: str, poster_path: str | None) -> str | None:
    """Concatenate the image host prefix with ``poster_path`` when one is given."""

    if not poster_path:
        return None
    return f"{base_url}{poster_path}"


class CollectionRepository:
    """Base class wiring a repository to its codec, backend key, and clock."""

    key: str

    def __init__(self, codec: CollectionCodec, *, clock: Clock = utc_now) -> None:
        self._codec = codec
        self._clock = clock

    def _now(self) -> datetime:
        return self._clock()


__all__ = [
    "Clock",
    "CollectionRepository",
    "epoch_millis",
    "poster_url_for",
    "random_suffix",
    "utc_now",
]
