"""Document store built from whole-collection reads and rewrites.

Each module owns one backend key and exposes a repository class; the
:class:`DocumentStore` composes them for callers.
"""

from .document_store import DocumentStore
from .favorites import FavoriteRepository
from .reviews import ReviewRepository
from .searches import SearchRepository, aggregate_trending, normalize_search_term
from .users import UserRepository

__all__ = [
    "DocumentStore",
    "FavoriteRepository",
    "ReviewRepository",
    "SearchRepository",
    "UserRepository",
    "aggregate_trending",
    "normalize_search_term",
]
