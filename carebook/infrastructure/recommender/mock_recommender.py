from __future__ import annotations

import logging

from carebook.application.ports.recommender import RecommenderPort
from carebook.domain.entities.recommendation import Recommendation


class MockRecommender(RecommenderPort):
    """Always recommends the configured consultant. For local runs without the triage service."""

    def __init__(self, consultant_id: str) -> None:
        self._consultant_id = consultant_id
        self._logger = logging.getLogger(__name__)

    def recommend(self, symptoms: str) -> Recommendation:
        self._logger.info("Mock recommendation", extra={"consultant_id": self._consultant_id})
        return Recommendation(
            consultant_id=self._consultant_id,
            explanation=f'Based on "{symptoms.strip()}", I recommend a consultation with our specialist.',
        )
