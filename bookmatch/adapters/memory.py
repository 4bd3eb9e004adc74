"""In-memory catalog and rating store adapters."""

from collections.abc import Collection, Iterable
from uuid import UUID

from bookmatch.domain.entities import BookRecord, GenreAffinity, RatedBook, RatingRecord
from bookmatch.domain.errors import InternalFailure, NotFound
from bookmatch.domain.models import utcnow
from bookmatch.ports.catalog import CatalogPort
from bookmatch.ports.ratings import RatingStorePort


class InMemoryCatalogAdapter(CatalogPort):
    """
    Catalog held in a dict, for tests and local experiments.

    Set ``available = False`` to make every call fail like an unreachable store.
    """

    def __init__(self, books: Iterable[BookRecord] = ()) -> None:
        self._books: dict[UUID, BookRecord] = {book.id: book for book in books}
        self.available = True

    def add(self, book: BookRecord) -> BookRecord:
        self._books[book.id] = book
        return book

    def _check(self) -> None:
        if not self.available:
            raise InternalFailure("Catalog store unavailable")

    @staticmethod
    def _by_title(books: Iterable[BookRecord]) -> list[BookRecord]:
        return sorted(books, key=lambda b: b.title)

    async def get_book_by_id(self, book_id: UUID) -> BookRecord | None:
        self._check()
        return self._books.get(book_id)

    async def get_books_by_genre_set(
        self,
        genres: Collection[str],
        exclude_ids: Collection[UUID] = (),
        limit: int | None = None,
    ) -> list[BookRecord]:
        self._check()
        wanted, excluded = set(genres), set(exclude_ids)
        matches = [
            b for b in self._books.values() if b.genre in wanted and b.id not in excluded
        ]
        matches.sort(key=lambda b: (-b.rating, b.title, str(b.id)))
        return matches if limit is None else matches[:limit]

    async def list_books(self) -> list[BookRecord]:
        self._check()
        return self._by_title(self._books.values())

    async def search_books(self, query: str) -> list[BookRecord]:
        self._check()
        needle = query.lower()
        return self._by_title(
            b
            for b in self._books.values()
            if needle in b.title.lower()
            or needle in b.author.lower()
            or needle in b.genre.lower()
        )

    async def get_books_by_genre(self, genre: str) -> list[BookRecord]:
        self._check()
        return self._by_title(b for b in self._books.values() if b.genre == genre)

    async def get_top_rated(self, limit: int = 10) -> list[BookRecord]:
        self._check()
        return sorted(self._books.values(), key=lambda b: (-b.rating, b.title))[:limit]


class InMemoryRatingStoreAdapter(RatingStorePort):
    """Ratings keyed by (user_id, book_id); joins go through the given catalog."""

    def __init__(self, catalog: InMemoryCatalogAdapter) -> None:
        self._catalog = catalog
        self._rows: dict[tuple[UUID, UUID], RatingRecord] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise InternalFailure("Rating store unavailable")

    def _put(self, record: RatingRecord) -> None:
        # Re-inserting keeps dict order equal to write order.
        key = (record.user_id, record.book_id)
        self._rows.pop(key, None)
        self._rows[key] = record

    def _user_rows(self, user_id: UUID) -> list[RatingRecord]:
        return [row for (uid, _), row in self._rows.items() if uid == user_id]

    async def get_rating(self, user_id: UUID, book_id: UUID) -> RatingRecord | None:
        self._check()
        return self._rows.get((user_id, book_id))

    async def insert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        self._check()
        if (user_id, book_id) in self._rows:
            raise InternalFailure("Duplicate rating for user and book")
        now = utcnow()
        self._put(RatingRecord(user_id, book_id, value, now, now))

    async def update_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        self._check()
        existing = self._rows.get((user_id, book_id))
        if existing is None:
            raise NotFound("Rating not found")
        self._put(RatingRecord(user_id, book_id, value, existing.created_at, utcnow()))

    async def upsert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        self._check()
        existing = self._rows.get((user_id, book_id))
        now = utcnow()
        created_at = existing.created_at if existing else now
        self._put(RatingRecord(user_id, book_id, value, created_at, now))

    async def get_genre_affinities(self, user_id: UUID) -> list[GenreAffinity]:
        self._check()
        grouped: dict[str, list[int]] = {}
        for row in self._user_rows(user_id):
            book = await self._catalog.get_book_by_id(row.book_id)
            if book is None:
                continue
            grouped.setdefault(book.genre, []).append(row.rating)
        return [
            GenreAffinity(genre=genre, average_rating=sum(values) / len(values), rating_count=len(values))
            for genre, values in grouped.items()
        ]

    async def get_rated_book_ids(self, user_id: UUID) -> set[UUID]:
        self._check()
        return {row.book_id for row in self._user_rows(user_id)}

    async def get_user_ratings(self, user_id: UUID) -> list[RatedBook]:
        self._check()
        rated: list[RatedBook] = []
        for row in reversed(self._user_rows(user_id)):
            book = await self._catalog.get_book_by_id(row.book_id)
            if book is not None:
                rated.append(RatedBook(book=book, rating=row.rating, rated_at=row.updated_at))
        return rated

    def count(self) -> int:
        return len(self._rows)
