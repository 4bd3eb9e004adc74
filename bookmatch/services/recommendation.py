"""Genre-affinity recommendation engine."""

import logging
from uuid import UUID

from bookmatch.domain.entities import GenreAffinity, Recommendations
from bookmatch.ports.catalog import CatalogPort
from bookmatch.ports.ratings import RatingStorePort
from bookmatch.ports.recommender import RecommenderPort

logger = logging.getLogger(__name__)

NO_HISTORY_MESSAGE = "No recommendations available yet"
DEFAULT_GENRE_LIMIT = 3
DEFAULT_MAX_RESULTS = 10


def rank_genres(affinities: list[GenreAffinity], limit: int) -> list[str]:
    """
    Order genres by the user's average rating, best first, and keep ``limit``.

    Equal averages are ordered alphabetically so the result does not depend
    on the order the store happened to return rows in.
    """
    ranked = sorted(affinities, key=lambda a: (-a.average_rating, a.genre))
    return [a.genre for a in ranked[:limit]]


class RecommendationEngine(RecommenderPort):
    """
    Recommend unrated books from the genres a user rates highest.

    Pipeline, recomputed on every call:
      1. average rating per genre over the user's ratings
      2. keep the ``genre_limit`` best genres
      3. catalog books in those genres the user has not rated
      4. best catalog rating first, at most ``max_results``

    A user with no ratings gets an empty result carrying NO_HISTORY_MESSAGE.
    Store failures propagate; there are no partial results.
    """

    def __init__(
        self,
        catalog: CatalogPort,
        ratings: RatingStorePort,
        genre_limit: int = DEFAULT_GENRE_LIMIT,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self._catalog = catalog
        self._ratings = ratings
        self._genre_limit = genre_limit
        self._max_results = max_results

    async def recommend(self, user_id: UUID) -> Recommendations:
        affinities = await self._ratings.get_genre_affinities(user_id)
        if not affinities:
            logger.info("No rating history for user=%s", user_id)
            return Recommendations(message=NO_HISTORY_MESSAGE)

        top_genres = rank_genres(affinities, self._genre_limit)
        rated_ids = await self._ratings.get_rated_book_ids(user_id)

        candidates = await self._catalog.get_books_by_genre_set(
            top_genres, exclude_ids=rated_ids, limit=self._max_results
        )
        wanted = set(top_genres)
        candidates = [
            book for book in candidates if book.id not in rated_ids and book.genre in wanted
        ]
        candidates.sort(key=lambda b: (-b.rating, b.title, str(b.id)))

        books = candidates[: self._max_results]
        logger.info(
            "Recommendations for user=%s: genres=%s, %d books",
            user_id,
            top_genres,
            len(books),
        )
        return Recommendations(books=books, top_genres=top_genres)
