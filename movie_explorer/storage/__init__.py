"""Key-value backends, collection codec, and session slot."""

from .backend import (
    InMemoryBackend,
    KeyValueBackend,
    RedisBackend,
    build_backend,
    close_backend,
    get_backend,
)
from .codec import CollectionCodec
from .session import SessionSlot

__all__ = [
    "CollectionCodec",
    "InMemoryBackend",
    "KeyValueBackend",
    "RedisBackend",
    "SessionSlot",
    "build_backend",
    "close_backend",
    "get_backend",
]
