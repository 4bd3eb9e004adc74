"""Per-request wiring of adapters and services."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.adapters.sql.catalog import SqlCatalogAdapter
from bookmatch.adapters.sql.ratings import SqlRatingStoreAdapter
from bookmatch.config import Settings
from bookmatch.database import get_session
from bookmatch.ports.catalog import CatalogPort
from bookmatch.ports.ratings import RatingStorePort
from bookmatch.ports.recommender import RecommenderPort
from bookmatch.services.auth import AuthService
from bookmatch.services.rating import RatingService
from bookmatch.services.recommendation import RecommendationEngine


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_catalog(session: AsyncSession = Depends(get_session)) -> CatalogPort:
    return SqlCatalogAdapter(session)


def get_rating_store(session: AsyncSession = Depends(get_session)) -> RatingStorePort:
    return SqlRatingStoreAdapter(session)


def get_rating_service(
    catalog: CatalogPort = Depends(get_catalog),
    ratings: RatingStorePort = Depends(get_rating_store),
) -> RatingService:
    return RatingService(catalog, ratings)


def get_recommender(
    catalog: CatalogPort = Depends(get_catalog),
    ratings: RatingStorePort = Depends(get_rating_store),
    settings: Settings = Depends(get_settings_from_app),
) -> RecommenderPort:
    return RecommendationEngine(
        catalog,
        ratings,
        genre_limit=settings.recommendation_genre_limit,
        max_results=settings.recommendation_max_results,
    )


def get_auth_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings_from_app),
) -> AuthService:
    return AuthService(session, settings)
