"""FastAPI application factory — entry point for Bookmatch."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookmatch.api.routes.auth import router as auth_router
from bookmatch.api.routes.books import router as books_router
from bookmatch.api.routes.recommendations import router as recommendations_router
from bookmatch.config import Settings, get_settings
from bookmatch.database import Database
from bookmatch.domain.errors import BookmatchError, InternalFailure
from bookmatch.seed import seed_books

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: open the database on startup, release it on shutdown."""
    settings: Settings = app.state.settings
    logger.info("%s starting up...", settings.app_name)
    logger.info("Database backend: %s", settings.database_backend)
    logger.info(
        "Recommendations: top %d genres, max %d books",
        settings.recommendation_genre_limit,
        settings.recommendation_max_results,
    )

    database = Database(settings.database_url)
    app.state.database = database
    try:
        if settings.auto_create_schema:
            await database.create_all()
        if settings.seed_catalog:
            async with database.session_factory() as session:
                await seed_books(session)
        yield
    finally:
        await database.dispose()
        logger.info("%s shutting down...", settings.app_name)


async def bookmatch_error_handler(request: Request, exc: BookmatchError) -> JSONResponse:
    if isinstance(exc, InternalFailure):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database errors raised outside the adapters, e.g. user lookups during auth."""
    logger.exception("%s %s failed with a storage error", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and configure the FastAPI application."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )

    application = FastAPI(
        title=settings.app_name,
        description="Book catalog with rating-driven personalized recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )
    application.state.settings = settings

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ─────────────────────────────
    application.add_exception_handler(BookmatchError, bookmatch_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # ── Routes ─────────────────────────────────────
    application.include_router(auth_router, prefix=settings.api_prefix)
    application.include_router(books_router, prefix=settings.api_prefix)
    application.include_router(recommendations_router, prefix=settings.api_prefix)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    @application.get(f"{settings.api_prefix}/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "bookmatch"}

    return application


app = create_app()
