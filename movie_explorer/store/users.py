"""User collection: creation with unique emails, lookups, and partial updates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from movie_explorer.errors import DuplicateEmailError, NotFoundError
from movie_explorer.schemas.payloads import UserCreate, UserUpdate
from movie_explorer.schemas.records import User
from movie_explorer.storage.keys import USERS_KEY
from movie_explorer.store.base import CollectionRepository

logger = logging.getLogger(__name__)


class UserRepository(CollectionRepository):
    """Read-modify-write operations over the users collection.

    Emails are compared exactly as stored. Callers normalize them (trim and
    lowercase) before handing them over.
    """

    key = USERS_KEY

    async def get_users(self) -> list[User]:
        return await self._codec.load(self.key, User)

    async def create_user(self, candidate: UserCreate) -> User:
        users = await self.get_users()
        if any(user.email == candidate.email for user in users):
            raise DuplicateEmailError(candidate.email)

        user = User(
            id=candidate.id,
            email=candidate.email,
            name=candidate.name,
            password_hash=candidate.password_hash,
            avatar=candidate.avatar,
            created_at=self._now(),
        )
        users.append(user)
        await self._codec.save(self.key, users)
        logger.debug(f"Created user {user.id}")
        return user

    async def get_user_by_email(self, email: str) -> User | None:
        users = await self.get_users()
        return next((user for user in users if user.email == email), None)

    async def get_user_by_id(self, user_id: str) -> User | None:
        users = await self.get_users()
        return next((user for user in users if user.id == user_id), None)

    async def update_user(
        self, user_id: str, updates: UserUpdate | Mapping[str, Any]
    ) -> User:
        """Shallow-merge the explicitly set fields of ``updates`` into the user."""

        if not isinstance(updates, UserUpdate):
            updates = UserUpdate.model_validate(dict(updates))

        users = await self.get_users()
        index = next(
            (position for position, user in enumerate(users) if user.id == user_id),
            None,
        )
        if index is None:
            raise NotFoundError("User not found")

        changes = updates.model_dump(exclude_unset=True)
        merged = User.model_validate({**users[index].model_dump(), **changes})
        users[index] = merged
        await self._codec.save(self.key, users)
        return merged


__all__ = ["UserRepository"]
