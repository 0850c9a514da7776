from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from carebook.application.ports.reservation_store import ReservationStorePort
from carebook.application.utils.date_parser import civil_now, slot_start_canonical, slot_start_time, weekday_name
from carebook.domain.entities.consultant import ConsultantSchedule


class AvailabilityResolver:
    """
    Enumerates bookable dates and slots for a consultant inside a fixed lookahead window.

    Every call to `available_slots` re-queries the reservation store; nothing is cached
    between calls, so two sessions looking at the same consultant always see the latest
    reservation snapshot.
    """

    def __init__(
        self,
        reservations: ReservationStorePort,
        timezone: ZoneInfo,
        lookahead_days: int = 14,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._reservations = reservations
        self._timezone = timezone
        self._lookahead_days = lookahead_days
        self._clock = clock or (lambda: civil_now(timezone))
        self._logger = logging.getLogger(__name__)

    @property
    def lookahead_days(self) -> int:
        return self._lookahead_days

    def now(self) -> datetime:
        current = self._clock()
        if current.tzinfo is None:
            return current.replace(tzinfo=self._timezone)
        return current.astimezone(self._timezone)

    def today(self) -> date:
        return self.now().date()

    def upcoming_dates(self, weekdays: Iterable[str], lookahead_days: int | None = None) -> list[date]:
        """Dates in [today, today + lookahead_days) whose civil weekday name is in `weekdays`."""
        span = self._lookahead_days if lookahead_days is None else lookahead_days
        wanted = {day.strip().lower() for day in weekdays if day}
        start = self.today()
        out: list[date] = []
        for offset in range(max(span, 0)):
            candidate = start + timedelta(days=offset)
            if weekday_name(candidate).lower() in wanted:
                out.append(candidate)
        return out

    def available_slots(self, consultant: ConsultantSchedule, on: date) -> list[str]:
        """Consultant's slots on `on` minus live bookings, in the consultant's own order."""
        now = self.now()
        if on < now.date() or not consultant.works_on(weekday_name(on)):
            return []

        booked = self._reservations.booked_slots(consultant.consultant_id, on)
        booked_starts = {slot_start_canonical(label) for label in booked}
        booked_starts.discard(None)

        slots: list[str] = []
        for slot in consultant.slots:
            if slot in booked or slot_start_canonical(slot) in booked_starts:
                continue
            if on == now.date():
                start = slot_start_time(slot)
                if start is not None and start <= now.time():
                    continue
            slots.append(slot)

        self._logger.debug(
            "Resolved available slots",
            extra={"consultant_id": consultant.consultant_id, "date": on.isoformat(), "count": len(slots)},
        )
        return slots

    def bookable_dates(self, consultant: ConsultantSchedule, lookahead_days: int | None = None) -> list[date]:
        """Upcoming dates that still have at least one open slot."""
        return [
            candidate
            for candidate in self.upcoming_dates(consultant.available_weekdays, lookahead_days)
            if self.available_slots(consultant, candidate)
        ]
