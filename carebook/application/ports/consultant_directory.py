from __future__ import annotations

from abc import ABC, abstractmethod

from carebook.domain.entities.consultant import ConsultantSchedule


class ConsultantDirectoryPort(ABC):
    @abstractmethod
    def get_consultant(self, consultant_id: str) -> ConsultantSchedule | None:
        """Get consultant schedule by id. Returns None if not found."""
        raise NotImplementedError
