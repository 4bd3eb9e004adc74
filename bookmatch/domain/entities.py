"""Plain records passed between ports, services and the API layer."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class BookRecord:
    id: UUID
    title: str
    author: str
    genre: str
    rating: float = 0.0
    description: str | None = None
    pages: int | None = None
    published_year: int | None = None
    isbn: str | None = None


@dataclass(frozen=True)
class RatingRecord:
    user_id: UUID
    book_id: UUID
    rating: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class RatedBook:
    """A book joined with one user's rating of it."""

    book: BookRecord
    rating: int
    rated_at: datetime | None = None


@dataclass(frozen=True)
class GenreAffinity:
    """A user's average rating across the books they rated in one genre."""

    genre: str
    average_rating: float
    rating_count: int


@dataclass
class Recommendations:
    """Outcome of a recommendation request.

    ``message`` is only set when the user has no rating history yet.
    """

    books: list[BookRecord] = field(default_factory=list)
    top_genres: list[str] = field(default_factory=list)
    message: str | None = None

    @property
    def has_history(self) -> bool:
        return self.message is None
