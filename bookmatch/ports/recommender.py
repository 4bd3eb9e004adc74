"""Recommender port — abstract interface for the recommendation engine."""

from abc import ABC, abstractmethod
from uuid import UUID

from bookmatch.domain.entities import Recommendations


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend(self, user_id: UUID) -> Recommendations:
        """Return ranked book recommendations for a user."""
        ...
