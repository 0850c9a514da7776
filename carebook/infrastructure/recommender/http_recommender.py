from __future__ import annotations

import logging

import httpx

from carebook.application.exceptions import UpstreamServiceError
from carebook.application.ports.recommender import RecommenderPort
from carebook.core.config import settings
from carebook.domain.entities.recommendation import Recommendation


class HttpRecommender(RecommenderPort):
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url or settings.RECOMMENDER_URL
        self._client = client or httpx.Client(timeout=timeout or settings.RECOMMENDER_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._url:
            raise ValueError("RECOMMENDER_URL is required for the HTTP recommender")

    def recommend(self, symptoms: str) -> Recommendation:
        try:
            resp = self._client.post(self._url, json={"symptoms": symptoms})
        except httpx.HTTPError as e:
            self._logger.error("Recommender request failed", extra={"error": str(e)})
            raise UpstreamServiceError("Service error.") from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400 or data.get("error"):
            error_message = data.get("error") or "Service error."
            self._logger.error(
                "Recommender returned an error",
                extra={"status": resp.status_code, "error": error_message},
            )
            raise UpstreamServiceError(str(error_message))

        doctor_id = data.get("doctorId")
        if not doctor_id:
            self._logger.error("Recommender response missing doctorId", extra={"status": resp.status_code})
            raise UpstreamServiceError("No matching doctor found.")

        return Recommendation(consultant_id=str(doctor_id), explanation=str(data.get("explanation") or ""))
