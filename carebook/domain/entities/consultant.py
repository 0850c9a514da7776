from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ConsultantSchedule:
    consultant_id: str
    name: str
    available_weekdays: tuple[str, ...] = ()  # "Monday", "Wednesday", ...
    slots: tuple[str, ...] = ()  # "8:00 AM" or "8:00 AM to 9:00 AM"
    hourly_rate: float = 0.0
    platforms: tuple[str, ...] = ()  # empty means both "Online" and "In Person"
    specialty: str | None = None

    def works_on(self, weekday_name: str) -> bool:
        wanted = weekday_name.strip().lower()
        return any(day.strip().lower() == wanted for day in self.available_weekdays)

    def offers_platform(self, platform: str) -> bool:
        if not self.platforms:
            return True
        wanted = platform.lower().replace("-", " ").strip()
        return any(p.lower().replace("-", " ").strip() == wanted for p in self.platforms)

    @staticmethod
    def from_document(consultant_id: str, data: dict[str, Any]) -> "ConsultantSchedule":
        """Build a schedule from a stored consultant document (camelCase keys as the app writes them)."""
        platforms = data.get("platform") or data.get("platforms") or ()
        if isinstance(platforms, str):
            platforms = (platforms,)
        return ConsultantSchedule(
            consultant_id=consultant_id,
            name=(data.get("name") or consultant_id).strip(),
            available_weekdays=tuple(d.strip() for d in data.get("availableDays") or () if d and d.strip()),
            slots=tuple(s.strip() for s in data.get("consultationHours") or () if s and s.strip()),
            hourly_rate=float(data.get("hourlyRate") or data.get("rate") or 0.0),
            platforms=tuple(p.strip() for p in platforms if p and p.strip()),
            specialty=data.get("specialty"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "availableDays": list(self.available_weekdays),
            "consultationHours": list(self.slots),
            "hourlyRate": self.hourly_rate,
            "platform": list(self.platforms),
            "specialty": self.specialty,
        }
