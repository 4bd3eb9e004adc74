"""Pydantic request/response schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# ── Auth ───────────────────────────────────────────


class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileResponse(BaseModel):
    user: UserResponse


# ── Books ──────────────────────────────────────────


class BookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    author: str
    genre: str
    description: str | None = None
    rating: float
    pages: int | None = None
    published_year: int | None = None
    isbn: str | None = None


class BookListResponse(BaseModel):
    books: list[BookResponse]


class BookDetailResponse(BaseModel):
    book: BookResponse


# ── Ratings & Recommendations ─────────────────────


class RateBookRequest(BaseModel):
    """Fields are passed through untyped; RatingService validates them."""

    model_config = ConfigDict(populate_by_name=True)

    book_id: Any = Field(default=None, alias="bookId")
    rating: Any = None


class RatedBookResponse(BookResponse):
    """A book with the requesting user's rating in ``user_rating``."""

    user_rating: int
    rated_at: datetime | None = None


class UserRatingsResponse(BaseModel):
    ratings: list[RatedBookResponse]


class RecommendationsResponse(BaseModel):
    recommendations: list[BookResponse]
    top_genres: list[str] = []
    message: str | None = None
