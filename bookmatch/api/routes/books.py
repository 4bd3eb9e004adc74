"""Read-only catalog routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from bookmatch.api.deps import get_catalog
from bookmatch.api.schemas import BookDetailResponse, BookListResponse, BookResponse
from bookmatch.domain.entities import BookRecord
from bookmatch.domain.errors import InvalidInput, NotFound
from bookmatch.ports.catalog import CatalogPort

router = APIRouter(prefix="/books", tags=["Books"])

TOP_RATED_LIMIT = 10


def _book_list(books: list[BookRecord]) -> BookListResponse:
    return BookListResponse(books=[BookResponse.model_validate(b) for b in books])


@router.get("", response_model=BookListResponse)
async def list_books(catalog: CatalogPort = Depends(get_catalog)) -> BookListResponse:
    return _book_list(await catalog.list_books())


@router.get("/top-rated", response_model=BookListResponse)
async def top_rated_books(catalog: CatalogPort = Depends(get_catalog)) -> BookListResponse:
    return _book_list(await catalog.get_top_rated(TOP_RATED_LIMIT))


@router.get("/search", response_model=BookListResponse)
async def search_books(
    query: str = Query(default=""),
    catalog: CatalogPort = Depends(get_catalog),
) -> BookListResponse:
    """Match ``query`` against title, author and genre."""
    if not query.strip():
        raise InvalidInput("Search query is required")
    return _book_list(await catalog.search_books(query.strip()))


@router.get("/genre/{genre}", response_model=BookListResponse)
async def books_by_genre(
    genre: str, catalog: CatalogPort = Depends(get_catalog)
) -> BookListResponse:
    return _book_list(await catalog.get_books_by_genre(genre))


@router.get("/{book_id}", response_model=BookDetailResponse)
async def get_book(
    book_id: UUID, catalog: CatalogPort = Depends(get_catalog)
) -> BookDetailResponse:
    book = await catalog.get_book_by_id(book_id)
    if book is None:
        raise NotFound("Book not found")
    return BookDetailResponse(book=BookResponse.model_validate(book))
