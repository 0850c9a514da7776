from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from carebook.domain.entities.booking_request import BookingRequest


class ReservationStorePort(ABC):
    @abstractmethod
    def booked_slots(self, consultant_id: str, on: date) -> set[str]:
        """Slot labels held by non-cancelled bookings for this consultant on this date."""
        raise NotImplementedError

    @abstractmethod
    def create_booking(self, booking: BookingRequest) -> BookingRequest:
        """
        Persist a booking request.
        Must be atomic with respect to (consultant, date, slot) uniqueness among live bookings:
        raises SlotAlreadyBookedError instead of writing a duplicate.
        """
        raise NotImplementedError

    @abstractmethod
    def list_bookings(self, requester_id: str | None = None, consultant_id: str | None = None) -> list[BookingRequest]:
        raise NotImplementedError
