"""Sample catalog used for local development and tests.

Run ``python -m bookmatch.seed`` to create the schema and load the sample
books into the configured database.
"""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.config import get_settings
from bookmatch.database import Database
from bookmatch.domain.models import Book

logger = logging.getLogger(__name__)

SAMPLE_BOOKS: list[dict] = [
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "genre": "Fiction",
        "rating": 4.8,
        "pages": 281,
        "published_year": 1960,
        "isbn": "9780061120084",
        "description": "A lawyer in Depression-era Alabama defends a Black man accused of a crime.",
    },
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "genre": "Fiction",
        "rating": 4.4,
        "pages": 180,
        "published_year": 1925,
        "isbn": "9780743273565",
        "description": "Jay Gatsby's pursuit of Daisy Buchanan on Long Island in the Jazz Age.",
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "genre": "Fiction",
        "rating": 4.7,
        "pages": 279,
        "published_year": 1813,
        "isbn": "9780141439518",
        "description": "Elizabeth Bennet and Mr. Darcy overcome their first impressions.",
    },
    {
        "title": "The Catcher in the Rye",
        "author": "J.D. Salinger",
        "genre": "Fiction",
        "rating": 4.0,
        "pages": 234,
        "published_year": 1951,
        "isbn": "9780316769488",
        "description": "Holden Caulfield wanders New York after leaving prep school.",
    },
    {
        "title": "Beloved",
        "author": "Toni Morrison",
        "genre": "Fiction",
        "rating": 4.5,
        "pages": 324,
        "published_year": 1987,
        "isbn": "9781400033416",
        "description": "A formerly enslaved woman is haunted by her past in post-war Ohio.",
    },
    {
        "title": "The Hound of the Baskervilles",
        "author": "Arthur Conan Doyle",
        "genre": "Mystery",
        "rating": 4.3,
        "pages": 256,
        "published_year": 1902,
        "isbn": "9780141034324",
        "description": "Sherlock Holmes investigates a legendary hound on Dartmoor.",
    },
    {
        "title": "And Then There Were None",
        "author": "Agatha Christie",
        "genre": "Mystery",
        "rating": 4.6,
        "pages": 272,
        "published_year": 1939,
        "isbn": "9780062073488",
        "description": "Ten strangers on an island are killed one by one.",
    },
    {
        "title": "The Big Sleep",
        "author": "Raymond Chandler",
        "genre": "Mystery",
        "rating": 4.1,
        "pages": 231,
        "published_year": 1939,
        "isbn": "9780394758282",
        "description": "Philip Marlowe is drawn into a wealthy family's blackmail case.",
    },
    {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Science Fiction",
        "rating": 4.6,
        "pages": 412,
        "published_year": 1965,
        "isbn": "9780441172719",
        "description": "Paul Atreides and the struggle for the desert planet Arrakis.",
    },
    {
        "title": "Foundation",
        "author": "Isaac Asimov",
        "genre": "Science Fiction",
        "rating": 4.3,
        "pages": 255,
        "published_year": 1951,
        "isbn": "9780553293357",
        "description": "A mathematician plans to shorten a galactic dark age.",
    },
    {
        "title": "Neuromancer",
        "author": "William Gibson",
        "genre": "Science Fiction",
        "rating": 3.9,
        "pages": 271,
        "published_year": 1984,
        "isbn": "9780441569595",
        "description": "A washed-up hacker is hired for one last job in cyberspace.",
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "rating": 4.7,
        "pages": 310,
        "published_year": 1937,
        "isbn": "9780547928227",
        "description": "Bilbo Baggins joins a company of dwarves to reclaim their mountain home.",
    },
    {
        "title": "A Wizard of Earthsea",
        "author": "Ursula K. Le Guin",
        "genre": "Fantasy",
        "rating": 4.2,
        "pages": 183,
        "published_year": 1968,
        "isbn": "9780547773742",
        "description": "A young mage unleashes a shadow and must hunt it down.",
    },
    {
        "title": "Sapiens",
        "author": "Yuval Noah Harari",
        "genre": "Non-Fiction",
        "rating": 4.4,
        "pages": 443,
        "published_year": 2011,
        "isbn": "9780062316097",
        "description": "A brief history of humankind from the Stone Age to the present.",
    },
]


async def seed_books(session: AsyncSession, books: list[dict] | None = None) -> int:
    """Insert ``books`` (default SAMPLE_BOOKS) when the catalog is empty.

    Returns the number of books inserted.
    """
    existing = await session.scalar(select(func.count()).select_from(Book))
    if existing:
        logger.info("Catalog already has %d books; skipping seed", existing)
        return 0

    rows = [Book(**data) for data in (SAMPLE_BOOKS if books is None else books)]
    session.add_all(rows)
    await session.commit()
    logger.info("Seeded %d books", len(rows))
    return len(rows)


async def main() -> None:
    settings = get_settings()
    database = Database(settings.database_url)
    try:
        await database.create_all()
        async with database.session_factory() as session:
            await seed_books(session)
    finally:
        await database.dispose()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )
    asyncio.run(main())
