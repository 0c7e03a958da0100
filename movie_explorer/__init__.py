"""Document-style persistence for the movie explorer client on an async key-value store."""

from movie_explorer.errors import (
    AuthenticationError,
    BackendFailure,
    DuplicateEmailError,
    NotFoundError,
    StoreError,
)
from movie_explorer.store.document_store import DocumentStore

__version__ = "1.0.0"

__all__ = [
    "AuthenticationError",
    "BackendFailure",
    "DocumentStore",
    "DuplicateEmailError",
    "NotFoundError",
    "StoreError",
    "__version__",
]
