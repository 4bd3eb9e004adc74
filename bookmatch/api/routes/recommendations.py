"""Rating submission and recommendation routes."""

from fastapi import APIRouter, Depends, status

from bookmatch.api.deps import get_rating_service, get_recommender
from bookmatch.api.middleware.auth import get_current_user
from bookmatch.api.schemas import (
    BookResponse,
    MessageResponse,
    RateBookRequest,
    RatedBookResponse,
    RecommendationsResponse,
    UserRatingsResponse,
)
from bookmatch.domain.models import User
from bookmatch.ports.recommender import RecommenderPort
from bookmatch.services.rating import RatingService

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


@router.get("", response_model=RecommendationsResponse)
async def get_recommendations(
    user: User = Depends(get_current_user),
    recommender: RecommenderPort = Depends(get_recommender),
) -> RecommendationsResponse:
    """Personalized suggestions from the current user's best-rated genres."""
    result = await recommender.recommend(user.id)
    return RecommendationsResponse(
        recommendations=[BookResponse.model_validate(b) for b in result.books],
        top_genres=result.top_genres,
        message=result.message,
    )


@router.post("/rate", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def rate_book(
    data: RateBookRequest,
    user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> MessageResponse:
    """Create or overwrite the current user's rating of a book."""
    await service.submit_rating(user.id, data.book_id, data.rating)
    return MessageResponse(message="Book rated successfully")


@router.get("/user-ratings", response_model=UserRatingsResponse)
async def get_user_ratings(
    user: User = Depends(get_current_user),
    service: RatingService = Depends(get_rating_service),
) -> UserRatingsResponse:
    rated = await service.get_user_ratings(user.id)
    return UserRatingsResponse(
        ratings=[
            RatedBookResponse(
                **BookResponse.model_validate(item.book).model_dump(),
                user_rating=item.rating,
                rated_at=item.rated_at,
            )
            for item in rated
        ]
    )
