"""Review collection with the author's display name denormalized at write time."""

from __future__ import annotations

from movie_explorer.schemas.records import Review
from movie_explorer.storage.codec import CollectionCodec
from movie_explorer.storage.keys import REVIEWS_KEY
from movie_explorer.store.base import Clock, CollectionRepository, epoch_millis, utc_now
from movie_explorer.store.users import UserRepository

ANONYMOUS_AUTHOR = "Anonymous"


class ReviewRepository(CollectionRepository):
    """Append and query reviews. Rating bounds are validated by callers."""

    key = REVIEWS_KEY

    def __init__(
        self, codec: CollectionCodec, users: UserRepository, *, clock: Clock = utc_now
    ) -> None:
        super().__init__(codec, clock=clock)
        self._users = users

    async def get_all(self) -> list[Review]:
        return await self._codec.load(self.key, Review)

    async def add_review(
        self, user_id: str, movie_id: str, rating: int, text: str
    ) -> Review:
        reviews = await self.get_all()
        author = await self._users.get_user_by_id(str(user_id))

        now = self._now()
        review = Review(
            id=f"review_{user_id}_{movie_id}_{epoch_millis(now)}",
            user_id=str(user_id),
            movie_id=str(movie_id),
            rating=rating,
            text=text,
            user_name=(author.name if author is not None else None) or ANONYMOUS_AUTHOR,
            created_at=now,
        )
        reviews.append(review)
        await self._codec.save(self.key, reviews)
        return review

    async def get_reviews(self, movie_id: str) -> list[Review]:
        """Reviews for ``movie_id``, newest first."""

        mid = str(movie_id)
        reviews = [review for review in await self.get_all() if review.movie_id == mid]
        return sorted(reviews, key=lambda review: review.created_at, reverse=True)


__all__ = ["ANONYMOUS_AUTHOR", "ReviewRepository"]
