"""Singleton slot holding the signed-in user's session snapshot."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from movie_explorer.errors import BackendFailure
from movie_explorer.schemas.records import SessionUser
from movie_explorer.storage.backend import KeyValueBackend
from movie_explorer.storage.keys import SESSION_KEY

logger = logging.getLogger(__name__)


class SessionSlot:
    """Store, fetch, and clear the one session record.

    The session bypasses :class:`~movie_explorer.storage.codec.CollectionCodec`
    because it is a single JSON object rather than an array.
    """

    def __init__(self, backend: KeyValueBackend, key: str = SESSION_KEY) -> None:
        self._backend = backend
        self._key = key

    async def store(self, session: SessionUser | Mapping[str, Any]) -> None:
        if isinstance(session, SessionUser):
            payload: Any = session.to_storage()
        else:
            payload = dict(session)
        await self._backend.set(self._key, json.dumps(payload))

    async def get(self) -> SessionUser | None:
        try:
            raw = await self._backend.get(self._key)
        except BackendFailure as exc:
            logger.warning(f"Error getting stored session: {exc}")
            return None

        if raw is None:
            return None

        try:
            return SessionUser.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.warning(f"Ignoring unreadable stored session: {exc}")
            return None

    async def clear(self) -> None:
        await self._backend.remove(self._key)


__all__ = ["SessionSlot"]
