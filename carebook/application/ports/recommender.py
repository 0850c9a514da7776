from abc import ABC, abstractmethod

from carebook.domain.entities.recommendation import Recommendation


class RecommenderPort(ABC):
    @abstractmethod
    def recommend(self, symptoms: str) -> Recommendation:
        """
        Resolve free-text symptoms to a consultant.
        Raises UpstreamServiceError when the service is unreachable or answers with an error.
        """
        raise NotImplementedError
