from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from carebook.domain.entities.consultant import ConsultantSchedule


class Stage(str, Enum):
    idle = "idle"
    awaiting_booking_confirmation = "awaiting_booking_confirmation"
    selecting_date = "selecting_date"
    selecting_time = "selecting_time"
    selecting_platform = "selecting_platform"
    awaiting_final_confirmation = "awaiting_final_confirmation"
    committed = "committed"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (Stage.committed, Stage.cancelled)


@dataclass(frozen=True)
class ConversationSession:
    session_id: str
    user_id: str
    stage: Stage = Stage.idle
    consultant: ConsultantSchedule | None = None
    selected_date: date | None = None
    selected_slot: str | None = None
    selected_platform: str | None = None
    upcoming_dates: tuple[date, ...] = ()
    explanation: str | None = None  # recommender's reason for the consultant
    created_at: float | None = None
    updated_at: float | None = None
