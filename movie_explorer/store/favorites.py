"""Favorites collection keyed by the ``(user_id, movie_id)`` composite.

Each pair is either absent or present. :meth:`FavoriteRepository.toggle_favorite`
is the only transition and reports which branch it took. Reads sanitize legacy
records and :meth:`FavoriteRepository.compact` repairs duplicated pairs left
behind by older builds, keeping the first record stored for each movie.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from movie_explorer.errors import BackendFailure
from movie_explorer.schemas.payloads import MovieRef, ToggleResult
from movie_explorer.schemas.records import Favorite
from movie_explorer.settings import DEFAULT_POSTER_BASE_URL
from movie_explorer.storage.codec import CollectionCodec
from movie_explorer.storage.keys import FAVORITES_KEY
from movie_explorer.store.base import (
    Clock,
    CollectionRepository,
    epoch_millis,
    poster_url_for,
    utc_now,
)

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Title"


def sanitize_favorite(
    raw: dict[str, Any], *, now: Clock
) -> dict[str, Any]:
    """Fill defaults for favorites written before every field was required."""

    user_id = str(raw.get("userId") if raw.get("userId") is not None else "")
    movie_id = str(raw.get("movieId") if raw.get("movieId") is not None else "")
    poster_url = raw.get("poster_url")
    return {
        "_id": str(raw["_id"]) if raw.get("_id") is not None else f"fav_{user_id}_{movie_id}",
        "userId": user_id,
        "movieId": movie_id,
        "title": str(raw["title"]) if raw.get("title") is not None else UNKNOWN_TITLE,
        "poster_url": poster_url if isinstance(poster_url, str) else None,
        "createdAt": raw.get("createdAt") or now(),
    }


class FavoriteRepository(CollectionRepository):
    """Toggle, query, and compact favorites."""

    key = FAVORITES_KEY

    def __init__(
        self,
        codec: CollectionCodec,
        *,
        clock: Clock = utc_now,
        poster_base_url: str = DEFAULT_POSTER_BASE_URL,
    ) -> None:
        super().__init__(codec, clock=clock)
        self._poster_base_url = poster_base_url

    async def get_all(self) -> list[Favorite]:
        favorites: list[Favorite] = []
        for raw in await self._codec.load_raw(self.key):
            try:
                favorites.append(Favorite.model_validate(sanitize_favorite(raw, now=self._now)))
            except ValidationError as exc:
                logger.warning(f"Skipping unreadable favorite: {exc.error_count()} error(s)")
        return favorites

    async def is_favorite(self, user_id: str, movie_id: str) -> bool:
        return await self.get_favorite_doc(user_id, movie_id) is not None

    async def get_favorite_doc(self, user_id: str, movie_id: str) -> Favorite | None:
        uid, mid = str(user_id), str(movie_id)
        favorites = await self.get_all()
        return next(
            (fav for fav in favorites if fav.user_id == uid and fav.movie_id == mid),
            None,
        )

    async def toggle_favorite(self, user_id: str, movie: MovieRef) -> ToggleResult:
        uid, mid = str(user_id), movie.id
        favorites = await self.get_all()

        existing_index = next(
            (
                index
                for index, fav in enumerate(favorites)
                if fav.user_id == uid and fav.movie_id == mid
            ),
            None,
        )

        if existing_index is not None:
            del favorites[existing_index]
            await self._codec.save(self.key, favorites)
            return ToggleResult(removed=True)

        now = self._now()
        favorite = Favorite(
            id=f"fav_{uid}_{mid}_{epoch_millis(now)}",
            user_id=uid,
            movie_id=mid,
            title=movie.title,
            poster_url=poster_url_for(self._poster_base_url, movie.poster_path),
            created_at=now,
        )
        favorites.append(favorite)
        await self._codec.save(self.key, favorites)
        return ToggleResult(removed=False, doc=favorite)

    async def compact(self, user_id: str) -> list[Favorite]:
        """Drop duplicated movies from ``user_id``'s favorites and persist the result.

        The first record stored for each movie is kept, regardless of its
        timestamp. Storage is only rewritten when something was dropped; other
        users' records keep their relative order ahead of the kept ones.
        Returns the kept records in storage order.
        """

        kept, others, dropped = await self._partition(str(user_id))
        if dropped:
            await self._codec.save(self.key, [*others, *kept])
            logger.info(f"Compacted {dropped} duplicate favorite(s) for user {user_id}")
        return kept

    async def get_favorites(self, user_id: str) -> list[Favorite]:
        """Return the user's favorites, newest first, without duplicated movies.

        Duplicates are repaired in storage as a side effect. A failed repair
        write is logged and does not fail the read.
        """

        uid = str(user_id)
        kept, others, dropped = await self._partition(uid)
        if dropped:
            try:
                await self._codec.save(self.key, [*others, *kept])
                logger.info(f"Compacted {dropped} duplicate favorite(s) for user {uid}")
            except BackendFailure as exc:
                logger.warning(f"Favorites compaction for user {uid} not persisted: {exc}")

        return sorted(kept, key=lambda fav: fav.created_at, reverse=True)

    async def _partition(self, uid: str) -> tuple[list[Favorite], list[Favorite], int]:
        favorites = await self.get_all()
        mine = [fav for fav in favorites if fav.user_id == uid]
        others = [fav for fav in favorites if fav.user_id != uid]

        seen: set[str] = set()
        kept: list[Favorite] = []
        for fav in mine:
            if fav.movie_id in seen:
                continue
            seen.add(fav.movie_id)
            kept.append(fav)

        return kept, others, len(mine) - len(kept)


__all__ = ["FavoriteRepository", "UNKNOWN_TITLE", "sanitize_favorite"]
