"""Read-only access to book records."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from uuid import UUID

from bookmatch.domain.entities import BookRecord


class CatalogPort(ABC):
    """Abstraction over the book catalog store."""

    @abstractmethod
    async def get_book_by_id(self, book_id: UUID) -> BookRecord | None:
        """Return the book with this id, or None."""
        ...

    @abstractmethod
    async def get_books_by_genre_set(
        self,
        genres: Collection[str],
        exclude_ids: Collection[UUID] = (),
        limit: int | None = None,
    ) -> list[BookRecord]:
        """Return books in any of ``genres`` not listed in ``exclude_ids``, best rated first."""
        ...

    @abstractmethod
    async def list_books(self) -> list[BookRecord]:
        ...

    @abstractmethod
    async def search_books(self, query: str) -> list[BookRecord]:
        """Case-insensitive substring match on title, author or genre."""
        ...

    @abstractmethod
    async def get_books_by_genre(self, genre: str) -> list[BookRecord]:
        ...

    @abstractmethod
    async def get_top_rated(self, limit: int = 10) -> list[BookRecord]:
        ...
