from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any


class BookingStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    cancelled = "cancelled"


PLATFORM_ONLINE = "Online"
PLATFORM_IN_PERSON = "In Person"
PLATFORMS = (PLATFORM_ONLINE, PLATFORM_IN_PERSON)


@dataclass(frozen=True)
class BookingRequest:
    booking_id: str
    consultant_id: str
    requester_id: str
    date: date
    slot: str
    platform: str
    status: BookingStatus = BookingStatus.pending
    created_at: datetime | None = None
    available_day: str | None = None  # civil weekday name of `date`

    @property
    def is_live(self) -> bool:
        return self.status != BookingStatus.cancelled

    def to_document(self) -> dict[str, Any]:
        return {
            "bookingId": self.booking_id,
            "consultantId": self.consultant_id,
            "requesterId": self.requester_id,
            "date": self.date.isoformat(),
            "availableDay": self.available_day,
            "consultationHour": self.slot,
            "platform": self.platform,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def from_document(data: dict[str, Any]) -> "BookingRequest":
        created_at = None
        if data.get("createdAt"):
            try:
                created_at = datetime.fromisoformat(data["createdAt"])
            except (ValueError, TypeError):
                pass
        return BookingRequest(
            booking_id=str(data["bookingId"]),
            consultant_id=str(data["consultantId"]),
            requester_id=str(data["requesterId"]),
            date=date.fromisoformat(data["date"]),
            slot=data["consultationHour"],
            platform=data.get("platform") or PLATFORM_IN_PERSON,
            status=BookingStatus(data.get("status", BookingStatus.pending.value)),
            created_at=created_at,
            available_day=data.get("availableDay"),
        )
