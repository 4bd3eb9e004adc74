"""Rating submission service with one-rating-per-book enforcement."""

import logging
from uuid import UUID

from bookmatch.domain.entities import RatedBook
from bookmatch.domain.errors import InvalidInput, NotFound
from bookmatch.ports.catalog import CatalogPort
from bookmatch.ports.ratings import RatingStorePort

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def parse_book_id(value: object) -> UUID | None:
    """A UUID for ``value``, or None when it is missing or not a UUID."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UUID(value)
    except ValueError:
        return None


def is_valid_rating(value: object) -> bool:
    """True for an int in [MIN_RATING, MAX_RATING]. Booleans are not ratings."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_RATING <= value <= MAX_RATING
    )


class RatingService:
    """Records and lists a user's book ratings."""

    def __init__(self, catalog: CatalogPort, ratings: RatingStorePort) -> None:
        self._catalog = catalog
        self._ratings = ratings

    async def submit_rating(
        self, user_id: UUID, book_id: object, value: object
    ) -> None:
        """
        Rate a book on behalf of an already-authenticated user.

        A repeat submission for the same book overwrites the previous value.
        Creation and update are reported identically.

        ``book_id`` and ``value`` are taken as sent by the client. Raises
        InvalidInput for a missing or malformed book id or a value that is not
        an integer in 1-5, NotFound when the book does not exist. Neither case
        writes anything.
        """
        book_id = parse_book_id(book_id)
        if book_id is None or not is_valid_rating(value):
            raise InvalidInput(
                f"Invalid book ID or rating (must be {MIN_RATING}-{MAX_RATING})"
            )

        book = await self._catalog.get_book_by_id(book_id)
        if book is None:
            raise NotFound("Book not found")

        await self._ratings.upsert_rating(user_id, book_id, value)
        logger.info("Rating recorded: user=%s book=%s value=%d", user_id, book_id, value)

    async def get_user_ratings(self, user_id: UUID) -> list[RatedBook]:
        """The user's rated books, most recently rated first."""
        return await self._ratings.get_user_ratings(user_id)
