"""Exception taxonomy raised by the document store and credential service."""

from __future__ import annotations

__all__ = [
    "AuthenticationError",
    "BackendFailure",
    "DuplicateEmailError",
    "NotFoundError",
    "StoreError",
]


class StoreError(Exception):
    """Base class for every error raised by :mod:`movie_explorer`."""


class DuplicateEmailError(StoreError, ValueError):
    """Raised when creating a user whose email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__("User already exists with this email")
        self.email = email


class NotFoundError(StoreError, LookupError):
    """Raised when an update targets a record that does not exist."""


class BackendFailure(StoreError):
    """Raised when the key-value backend itself fails.

    Backend implementations chain the original exception via ``raise ... from``
    so callers can still inspect the driver-level cause.
    """


class AuthenticationError(StoreError):
    """Raised when login credentials do not match a stored user."""
