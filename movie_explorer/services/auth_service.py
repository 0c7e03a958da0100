"""Credential handling on top of the user collection and the session slot.

:class:`AuthService` hashes and verifies passwords and tracks who is signed in
through an explicit :class:`AuthContext`. The context is set on login, cleared
on logout, and lazily repopulated from the stored session the first time the
current user is requested.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from passlib.context import CryptContext

from movie_explorer.errors import AuthenticationError
from movie_explorer.schemas.payloads import UserCreate, UserUpdate
from movie_explorer.schemas.records import SessionUser, User
from movie_explorer.settings import AppSettings, get_settings
from movie_explorer.store.base import Clock, epoch_millis, random_suffix
from movie_explorer.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

_SESSION_FIELDS = ("email", "name", "avatar")


class PasswordHasher:
    """bcrypt hashing through a ``passlib`` crypt context."""

    def __init__(self, rounds: int) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        return self._context.verify(password, hashed)


class AuthContext:
    """Holds the signed-in user for the lifetime of one client."""

    def __init__(self, user: SessionUser | None = None) -> None:
        self._user = user

    @property
    def current_user(self) -> SessionUser | None:
        return self._user

    def set(self, user: SessionUser) -> None:
        self._user = user

    def clear(self) -> None:
        self._user = None


def session_user_from(user: User) -> SessionUser:
    return SessionUser(id=user.id, email=user.email, name=user.name, avatar=user.avatar)


class AuthService:
    """Sign up, log in, log out, and keep the session slot in step."""

    def __init__(
        self,
        store: DocumentStore,
        *,
        context: AuthContext | None = None,
        hasher: PasswordHasher | None = None,
        settings: AppSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        resolved = settings or get_settings()
        self._store = store
        self._clock = clock or store.clock
        self.context = context or AuthContext()
        self._hasher = hasher or PasswordHasher(resolved.password_hash_rounds)

    async def signup(self, email: str, password: str, name: str) -> User:
        """Create an account. Raises ``ValueError`` on blank input.

        :class:`~movie_explorer.errors.DuplicateEmailError` propagates from the
        store when the normalized email is already registered.
        """

        if not (name or "").strip():
            raise ValueError("Name is required")
        if not (email or "").strip():
            raise ValueError("Email is required")
        if not isinstance(password, str) or not password.strip():
            raise ValueError("Password must be a non-empty string")

        user_id = f"user_{epoch_millis(self._clock())}_{random_suffix(9)}"
        candidate = UserCreate(
            id=user_id,
            email=email.strip().lower(),
            name=name.strip(),
            password_hash=self._hasher.hash(password),
        )
        user = await self._store.create_user(candidate)
        logger.info(f"Registered user {user.id}")
        return user

    async def login(self, email: str, password: str) -> SessionUser:
        user = await self._store.get_user_by_email(email)
        if user is None or not self._hasher.verify(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        session_user = session_user_from(user)
        self.context.set(session_user)
        await self._store.store_session(session_user)
        return session_user

    async def logout(self) -> None:
        self.context.clear()
        await self._store.clear_session()

    async def get_current_user(self) -> SessionUser | None:
        if self.context.current_user is not None:
            return self.context.current_user

        stored = await self._store.get_stored_session()
        if stored is not None:
            self.context.set(stored)
        return stored

    async def get_user_profile(self, user_id: str) -> User | None:
        return await self._store.get_user_by_id(user_id)

    async def update_user_profile(
        self, user_id: str, updates: UserUpdate | Mapping[str, Any]
    ) -> User:
        """Update the stored user and refresh the session when it is the current one."""

        if not isinstance(updates, UserUpdate):
            updates = UserUpdate.model_validate(dict(updates))

        updated = await self._store.update_user(user_id, updates)

        current = self.context.current_user
        if current is not None and current.id == user_id:
            changes = {
                field: value
                for field, value in updates.model_dump(exclude_unset=True).items()
                if field in _SESSION_FIELDS
            }
            refreshed = SessionUser.model_validate({**current.model_dump(), **changes})
            self.context.set(refreshed)
            await self._store.store_session(refreshed)

        return updated


__all__ = ["AuthContext", "AuthService", "PasswordHasher", "session_user_from"]
