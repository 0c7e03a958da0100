"""Upstream-facing services built on the document store."""

from .auth_service import AuthContext, AuthService, PasswordHasher
from .database_service import DatabaseService

__all__ = ["AuthContext", "AuthService", "DatabaseService", "PasswordHasher"]
