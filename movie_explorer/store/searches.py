"""Raw per-term search counters and the trending-by-movie aggregation view."""

from __future__ import annotations

import logging
import re

from movie_explorer.schemas.payloads import MovieRef
from movie_explorer.schemas.records import SearchRecord, TrendingMovie
from movie_explorer.settings import (
    DEFAULT_MIN_SEARCH_TERM_LENGTH,
    DEFAULT_POSTER_BASE_URL,
    DEFAULT_TRENDING_LIMIT,
)
from movie_explorer.storage.codec import CollectionCodec
from movie_explorer.storage.keys import SEARCHES_KEY
from movie_explorer.store.base import (
    Clock,
    CollectionRepository,
    epoch_millis,
    poster_url_for,
    random_suffix,
    utc_now,
)

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_search_term(term: str | None) -> str:
    """Trim, collapse internal whitespace to single spaces, and lowercase."""

    return _WHITESPACE_RUN.sub(" ", str(term or "").strip()).lower()


def aggregate_trending(
    searches: list[SearchRecord], *, limit: int = DEFAULT_TRENDING_LIMIT
) -> list[TrendingMovie]:
    """Group raw term records by movie and rank them.

    Counts are summed across every term pointing at a movie. The display
    fields (term, title, poster, timestamp) come from the record with the
    strictly latest ``created_at``; on an exact tie the earlier stored record
    wins. Results are ordered by summed count, then by that timestamp, both
    descending.
    """

    by_movie: dict[str, TrendingMovie] = {}
    for search in searches:
        current = by_movie.get(search.movie_id)
        if current is None:
            by_movie[search.movie_id] = TrendingMovie(
                id=f"agg_{search.movie_id}",
                search_term=search.search_term,
                movie_id=search.movie_id,
                count=search.count,
                title=search.title,
                poster_url=search.poster_url,
                created_at=search.created_at,
            )
            continue

        current.count += search.count
        if search.created_at > current.created_at:
            current.search_term = search.search_term
            current.title = search.title
            current.poster_url = search.poster_url
            current.created_at = search.created_at

    ranked = sorted(
        by_movie.values(),
        key=lambda entry: (entry.count, entry.created_at),
        reverse=True,
    )
    return ranked[:limit]


class SearchRepository(CollectionRepository):
    """Count searches per normalized term and derive trending movies."""

    key = SEARCHES_KEY

    def __init__(
        self,
        codec: CollectionCodec,
        *,
        clock: Clock = utc_now,
        poster_base_url: str = DEFAULT_POSTER_BASE_URL,
        min_term_length: int = DEFAULT_MIN_SEARCH_TERM_LENGTH,
        trending_limit: int = DEFAULT_TRENDING_LIMIT,
    ) -> None:
        super().__init__(codec, clock=clock)
        self._poster_base_url = poster_base_url
        self._min_term_length = min_term_length
        self._trending_limit = trending_limit

    async def get_searches(self) -> list[SearchRecord]:
        return await self._codec.load(self.key, SearchRecord)

    async def update_search_count(
        self, term: str, movie: MovieRef
    ) -> SearchRecord | None:
        """Record one search for ``term`` resolving to ``movie``.

        Terms shorter than the configured minimum after normalization are
        ignored without touching storage and ``None`` is returned. An existing
        term keeps its original ``created_at``.
        """

        normalized = normalize_search_term(term)
        if len(normalized) < self._min_term_length:
            logger.debug(f"Ignoring short search term {term!r}")
            return None

        searches = await self.get_searches()
        existing = next(
            (search for search in searches if search.search_term == normalized), None
        )

        if existing is not None:
            existing.count += 1
            existing.movie_id = movie.id
            existing.title = movie.title or existing.title
            existing.poster_url = (
                poster_url_for(self._poster_base_url, movie.poster_path)
                or existing.poster_url
            )
            record = existing
        else:
            now = self._now()
            record = SearchRecord(
                id=f"search_{epoch_millis(now)}_{random_suffix(7)}",
                search_term=normalized,
                movie_id=movie.id,
                count=1,
                title=movie.title,
                poster_url=poster_url_for(self._poster_base_url, movie.poster_path),
                created_at=now,
            )
            searches.append(record)

        await self._codec.save(self.key, searches)
        return record

    async def get_trending_movies(self) -> list[TrendingMovie]:
        return aggregate_trending(await self.get_searches(), limit=self._trending_limit)


__all__ = [
    "SearchRepository",
    "aggregate_trending",
    "normalize_search_term",
]
