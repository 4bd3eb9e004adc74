"""SQL adapters and services against a SQLite database."""

import asyncio
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from bookmatch.adapters.sql.catalog import SqlCatalogAdapter
from bookmatch.adapters.sql.ratings import SqlRatingStoreAdapter
from bookmatch.database import Database, normalize_async_database_url
from bookmatch.domain.errors import InternalFailure, NotFound
from bookmatch.domain.models import Rating, User
from bookmatch.seed import SAMPLE_BOOKS, seed_books
from bookmatch.services.rating import RatingService
from bookmatch.services.recommendation import RecommendationEngine


@pytest.fixture
async def books(session) -> dict[str, uuid.UUID]:
    """Seed the sample catalog and map titles to ids."""
    await seed_books(session)
    catalog = SqlCatalogAdapter(session)
    return {b.title: b.id for b in await catalog.list_books()}


@pytest.fixture
async def user_id(session) -> uuid.UUID:
    user = User(name="Reader", email=f"{uuid.uuid4().hex[:8]}@example.com", hashed_password="x")
    session.add(user)
    await session.commit()
    return user.id


@pytest.fixture
def catalog(session) -> SqlCatalogAdapter:
    return SqlCatalogAdapter(session)


@pytest.fixture
def ratings(session) -> SqlRatingStoreAdapter:
    return SqlRatingStoreAdapter(session)


async def _count_ratings(session, user_id, book_id) -> int:
    return await session.scalar(
        select(func.count())
        .select_from(Rating)
        .where(Rating.user_id == user_id, Rating.book_id == book_id)
    )


# ── Database helpers ───────────────────────────────


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("sqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
    ],
)
def test_normalize_database_url(raw, expected):
    assert normalize_async_database_url(raw) == expected


async def test_seed_is_skipped_when_catalog_has_books(session, books):
    assert len(books) == len(SAMPLE_BOOKS)
    assert await seed_books(session) == 0


# ── Catalog ────────────────────────────────────────


async def test_get_book_by_id(catalog, books):
    book = await catalog.get_book_by_id(books["Dune"])
    assert book.author == "Frank Herbert"
    assert book.genre == "Science Fiction"
    assert await catalog.get_book_by_id(uuid.uuid4()) is None


async def test_books_by_genre_set_excludes_and_orders(catalog, books):
    excluded = {books["To Kill a Mockingbird"], books["And Then There Were None"]}

    result = await catalog.get_books_by_genre_set(["Fiction", "Mystery"], excluded, limit=4)

    assert [b.title for b in result] == [
        "Pride and Prejudice",
        "Beloved",
        "The Great Gatsby",
        "The Hound of the Baskervilles",
    ]


async def test_books_by_empty_genre_set(catalog, books):
    assert await catalog.get_books_by_genre_set([]) == []


async def test_search_is_case_insensitive(catalog, books):
    by_author = await catalog.search_books("tolkien")
    by_genre = await catalog.search_books("MYSTERY")

    assert [b.title for b in by_author] == ["The Hobbit"]
    assert len(by_genre) == 3


async def test_search_treats_wildcards_literally(catalog, books):
    assert await catalog.search_books("%") == []


async def test_top_rated(catalog, books):
    top = await catalog.get_top_rated(3)
    assert [b.title for b in top] == [
        "To Kill a Mockingbird",
        "Pride and Prejudice",
        "The Hobbit",
    ]


async def test_books_by_genre(catalog, books):
    fantasy = await catalog.get_books_by_genre("Fantasy")
    assert [b.title for b in fantasy] == ["A Wizard of Earthsea", "The Hobbit"]


# ── Ratings ────────────────────────────────────────


async def test_upsert_keeps_one_row_per_pair(session, ratings, books, user_id):
    book_id = books["Dune"]

    await ratings.upsert_rating(user_id, book_id, 3)
    await ratings.upsert_rating(user_id, book_id, 5)

    assert await _count_ratings(session, user_id, book_id) == 1
    stored = await ratings.get_rating(user_id, book_id)
    assert stored.rating == 5


async def test_insert_then_update(ratings, books, user_id):
    book_id = books["Foundation"]

    await ratings.insert_rating(user_id, book_id, 2)
    await ratings.update_rating(user_id, book_id, 4)

    assert (await ratings.get_rating(user_id, book_id)).rating == 4


async def test_update_missing_rating_is_not_found(ratings, books, user_id):
    with pytest.raises(NotFound):
        await ratings.update_rating(user_id, books["Dune"], 4)


async def test_duplicate_insert_is_rejected_by_storage(ratings, books, user_id):
    await ratings.insert_rating(user_id, books["Dune"], 4)
    with pytest.raises(InternalFailure):
        await ratings.insert_rating(user_id, books["Dune"], 2)


async def test_genre_affinities(ratings, books, user_id):
    for title, value in (
        ("To Kill a Mockingbird", 5),
        ("The Great Gatsby", 5),
        ("Pride and Prejudice", 4),
        ("The Hound of the Baskervilles", 3),
        ("Dune", 3),
    ):
        await ratings.upsert_rating(user_id, books[title], value)

    affinities = await ratings.get_genre_affinities(user_id)

    assert [a.genre for a in affinities] == ["Fiction", "Mystery", "Science Fiction"]
    assert affinities[0].average_rating == pytest.approx(14 / 3)
    assert affinities[0].rating_count == 3


async def test_rated_book_ids(ratings, books, user_id):
    await ratings.upsert_rating(user_id, books["Dune"], 4)
    await ratings.upsert_rating(user_id, books["Sapiens"], 2)

    assert await ratings.get_rated_book_ids(user_id) == {books["Dune"], books["Sapiens"]}
    assert await ratings.get_rated_book_ids(uuid.uuid4()) == set()


async def test_user_ratings_most_recent_first(ratings, books, user_id):
    await ratings.upsert_rating(user_id, books["Dune"], 4)
    await asyncio.sleep(0.01)
    await ratings.upsert_rating(user_id, books["Sapiens"], 2)
    await asyncio.sleep(0.01)
    await ratings.upsert_rating(user_id, books["Dune"], 5)

    rated = await ratings.get_user_ratings(user_id)

    assert [(r.book.title, r.rating) for r in rated] == [("Dune", 5), ("Sapiens", 2)]


async def test_missing_tables_raise_internal_failure(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        async with database.session_factory() as session:
            with pytest.raises(InternalFailure) as exc_info:
                await SqlCatalogAdapter(session).list_books()
    finally:
        await database.dispose()

    assert exc_info.value.message == "Failed to fetch books"
    assert isinstance(exc_info.value.__cause__, SQLAlchemyError)


async def test_failure_message_hides_driver_detail(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        async with database.session_factory() as session:
            with pytest.raises(InternalFailure) as exc_info:
                await SqlRatingStoreAdapter(session).get_rated_book_ids(uuid.uuid4())
            assert "no such table" not in exc_info.value.message
    finally:
        await database.dispose()


# ── Services over SQL ──────────────────────────────


async def test_rating_and_recommendation_scenario(catalog, ratings, session, books, user_id):
    service = RatingService(catalog, ratings)
    engine = RecommendationEngine(catalog, ratings)

    for title, value in (
        ("To Kill a Mockingbird", 5),
        ("The Great Gatsby", 5),
        ("Pride and Prejudice", 4),
        ("The Hound of the Baskervilles", 3),
    ):
        await service.submit_rating(user_id, books[title], value)

    result = await engine.recommend(user_id)

    assert result.top_genres == ["Fiction", "Mystery"]
    assert [b.title for b in result.books] == [
        "And Then There Were None",
        "Beloved",
        "The Big Sleep",
        "The Catcher in the Rye",
    ]


async def test_rating_twice_leaves_one_row(catalog, ratings, session, books, user_id):
    service = RatingService(catalog, ratings)

    await service.submit_rating(user_id, books["The Hobbit"], 3)
    await service.submit_rating(user_id, books["The Hobbit"], 5)

    assert await _count_ratings(session, user_id, books["The Hobbit"]) == 1
    assert (await ratings.get_rating(user_id, books["The Hobbit"])).rating == 5
