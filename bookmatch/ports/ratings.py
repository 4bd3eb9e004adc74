"""Persisted (user, book) rating rows."""

from abc import ABC, abstractmethod
from uuid import UUID

from bookmatch.domain.entities import GenreAffinity, RatedBook, RatingRecord


class RatingStorePort(ABC):
    """Abstraction over rating persistence.

    Implementations must keep at most one row per (user_id, book_id).
    """

    @abstractmethod
    async def get_rating(self, user_id: UUID, book_id: UUID) -> RatingRecord | None:
        ...

    @abstractmethod
    async def insert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        ...

    @abstractmethod
    async def update_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        ...

    @abstractmethod
    async def upsert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        """Insert the rating, or overwrite the existing value, in one atomic write."""
        ...

    @abstractmethod
    async def get_genre_affinities(self, user_id: UUID) -> list[GenreAffinity]:
        """Average rating per genre across the user's rated books."""
        ...

    @abstractmethod
    async def get_rated_book_ids(self, user_id: UUID) -> set[UUID]:
        ...

    @abstractmethod
    async def get_user_ratings(self, user_id: UUID) -> list[RatedBook]:
        """The user's ratings joined with their books, most recently rated first."""
        ...
