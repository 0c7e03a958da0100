"""Encode and decode whole collections stored as JSON arrays under one key."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import ValidationError

from movie_explorer.errors import BackendFailure
from movie_explorer.schemas.records import StoredRecord
from movie_explorer.storage.backend import KeyValueBackend

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)


class CollectionCodec:
    """Read-all / write-all access to the collections kept in the backend.

    There are no partial writes: every mutation loads the full sequence,
    modifies it in memory, and saves the full sequence back. Reads never raise.
    A missing key, a backend failure, or a malformed payload all read as an
    empty collection and are logged instead.
    """

    def __init__(self, backend: KeyValueBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    async def load_raw(self, key: str) -> list[dict[str, Any]]:
        """Return the stored items as plain dictionaries."""

        try:
            payload = await self._backend.get(key)
        except BackendFailure as exc:
            logger.warning(f"Error getting {key}: {exc}")
            return []

        if payload is None:
            return []

        try:
            decoded = json.loads(payload)
        except json.JSONDecodeError as exc:
            logger.warning(f"Stored value for {key} is not valid JSON: {exc}")
            return []

        if not isinstance(decoded, list):
            logger.warning(
                f"Stored value for {key} is a {type(decoded).__name__}, expected a list"
            )
            return []

        items = [item for item in decoded if isinstance(item, dict)]
        if len(items) != len(decoded):
            logger.warning(f"Skipped {len(decoded) - len(items)} non-object items in {key}")
        return items

    async def load(self, key: str, model: type[RecordT]) -> list[RecordT]:
        """Return the stored items validated as ``model`` instances.

        Items that fail validation are dropped individually so one corrupt
        record does not hide the rest of the collection.
        """

        return self.parse(key, await self.load_raw(key), model)

    @staticmethod
    def parse(
        key: str, items: Iterable[dict[str, Any]], model: type[RecordT]
    ) -> list[RecordT]:
        records: list[RecordT] = []
        for item in items:
            try:
                records.append(model.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    f"Skipping malformed {model.__name__} in {key}: "
                    f"{exc.error_count()} validation error(s)"
                )
        return records

    async def save(self, key: str, records: Iterable[StoredRecord]) -> None:
        """Serialize ``records`` and overwrite ``key``. Backend failures propagate."""

        encoded = json.dumps([record.to_storage() for record in records])
        await self._backend.set(key, encoded)
        logger.debug(f"Saved {key} ({len(encoded)} bytes)")


__all__ = ["CollectionCodec"]
