"""SQLAlchemy catalog adapter."""

from collections.abc import Collection
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.adapters.sql.errors import storage_errors
from bookmatch.domain.entities import BookRecord
from bookmatch.domain.models import Book
from bookmatch.ports.catalog import CatalogPort


def to_book_record(book: Book) -> BookRecord:
    return BookRecord(
        id=book.id,
        title=book.title,
        author=book.author,
        genre=book.genre,
        rating=float(book.rating or 0.0),
        description=book.description,
        pages=book.pages,
        published_year=book.published_year,
        isbn=book.isbn,
    )


class SqlCatalogAdapter(CatalogPort):
    """Read book records through a request-scoped session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _fetch(self, stmt) -> list[BookRecord]:
        result = await self._session.execute(stmt)
        return [to_book_record(book) for book in result.scalars().all()]

    @storage_errors("fetch book")
    async def get_book_by_id(self, book_id: UUID) -> BookRecord | None:
        book = await self._session.get(Book, book_id)
        return to_book_record(book) if book else None

    @storage_errors("fetch candidate books")
    async def get_books_by_genre_set(
        self,
        genres: Collection[str],
        exclude_ids: Collection[UUID] = (),
        limit: int | None = None,
    ) -> list[BookRecord]:
        genres = list(genres)
        if not genres:
            return []
        stmt = select(Book).where(Book.genre.in_(genres))
        if exclude_ids:
            stmt = stmt.where(Book.id.not_in(list(exclude_ids)))
        stmt = stmt.order_by(Book.rating.desc(), Book.title, Book.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._fetch(stmt)

    @storage_errors("fetch books")
    async def list_books(self) -> list[BookRecord]:
        return await self._fetch(select(Book).order_by(Book.title))

    @storage_errors("search books")
    async def search_books(self, query: str) -> list[BookRecord]:
        stmt = (
            select(Book)
            .where(
                or_(
                    Book.title.icontains(query, autoescape=True),
                    Book.author.icontains(query, autoescape=True),
                    Book.genre.icontains(query, autoescape=True),
                )
            )
            .order_by(Book.title)
        )
        return await self._fetch(stmt)

    @storage_errors("fetch books by genre")
    async def get_books_by_genre(self, genre: str) -> list[BookRecord]:
        return await self._fetch(
            select(Book).where(Book.genre == genre).order_by(Book.title)
        )

    @storage_errors("fetch top-rated books")
    async def get_top_rated(self, limit: int = 10) -> list[BookRecord]:
        return await self._fetch(
            select(Book).order_by(Book.rating.desc(), Book.title).limit(limit)
        )
