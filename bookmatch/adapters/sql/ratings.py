"""SQLAlchemy rating store adapter."""

import logging
import uuid
from uuid import UUID

from sqlalchemy import desc, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.adapters.sql.catalog import to_book_record
from bookmatch.adapters.sql.errors import storage_errors
from bookmatch.domain.entities import GenreAffinity, RatedBook, RatingRecord
from bookmatch.domain.errors import NotFound
from bookmatch.domain.models import Book, Rating, utcnow
from bookmatch.ports.ratings import RatingStorePort

logger = logging.getLogger(__name__)

# Dialects with INSERT ... ON CONFLICT DO UPDATE.
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlRatingStoreAdapter(RatingStorePort):
    """Rating persistence backed by the ``ratings`` table.

    Writes commit immediately: each write is one statement and forms its own
    unit of work.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @storage_errors("fetch rating")
    async def get_rating(self, user_id: UUID, book_id: UUID) -> RatingRecord | None:
        result = await self._session.execute(
            select(Rating).where(Rating.user_id == user_id, Rating.book_id == book_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return RatingRecord(
            user_id=row.user_id,
            book_id=row.book_id,
            rating=row.rating,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @storage_errors("insert rating")
    async def insert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        self._session.add(Rating(user_id=user_id, book_id=book_id, rating=value))
        await self._session.commit()

    @storage_errors("update rating")
    async def update_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        result = await self._session.execute(
            update(Rating)
            .where(Rating.user_id == user_id, Rating.book_id == book_id)
            .values(rating=value, updated_at=utcnow())
        )
        if result.rowcount == 0:
            await self._session.rollback()
            raise NotFound("Rating not found")
        await self._session.commit()

    @storage_errors("save rating")
    async def upsert_rating(self, user_id: UUID, book_id: UUID, value: int) -> None:
        dialect = self._session.bind.dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            # No native upsert: the unique constraint still rejects a duplicate row.
            logger.debug("No native upsert for dialect %s", dialect)
            if await self.get_rating(user_id, book_id) is None:
                await self.insert_rating(user_id, book_id, value)
            else:
                await self.update_rating(user_id, book_id, value)
            return

        now = utcnow()
        stmt = insert(Rating).values(
            id=uuid.uuid4(),
            user_id=user_id,
            book_id=book_id,
            rating=value,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "book_id"],
            set_={"rating": stmt.excluded.rating, "updated_at": stmt.excluded.updated_at},
        )
        await self._session.execute(stmt)
        await self._session.commit()

    @storage_errors("compute genre affinities")
    async def get_genre_affinities(self, user_id: UUID) -> list[GenreAffinity]:
        stmt = (
            select(
                Book.genre,
                func.avg(Rating.rating).label("avg_rating"),
                func.count(Rating.id).label("rating_count"),
            )
            .select_from(Rating)
            .join(Book, Rating.book_id == Book.id)
            .where(Rating.user_id == user_id)
            .group_by(Book.genre)
            .order_by(desc("avg_rating"), Book.genre)
        )
        rows = (await self._session.execute(stmt)).all()
        return [
            GenreAffinity(
                genre=row.genre,
                average_rating=float(row.avg_rating),
                rating_count=int(row.rating_count),
            )
            for row in rows
        ]

    @storage_errors("fetch rated books")
    async def get_rated_book_ids(self, user_id: UUID) -> set[UUID]:
        result = await self._session.execute(
            select(Rating.book_id).where(Rating.user_id == user_id)
        )
        return set(result.scalars().all())

    @storage_errors("fetch user ratings")
    async def get_user_ratings(self, user_id: UUID) -> list[RatedBook]:
        stmt = (
            select(Book, Rating.rating, Rating.updated_at)
            .join(Rating, Rating.book_id == Book.id)
            .where(Rating.user_id == user_id)
            .order_by(Rating.updated_at.desc(), Rating.created_at.desc())
        )
        rows = (await self._session.execute(stmt)).all()
        return [
            RatedBook(book=to_book_record(book), rating=rating, rated_at=rated_at)
            for book, rating, rated_at in rows
        ]
