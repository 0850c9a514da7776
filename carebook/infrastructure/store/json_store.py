from __future__ import annotations

import json
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any

from carebook.application.exceptions import SlotAlreadyBookedError, UpstreamServiceError
from carebook.application.ports.consultant_directory import ConsultantDirectoryPort
from carebook.application.ports.reservation_store import ReservationStorePort
from carebook.domain.entities.booking_request import BookingRequest
from carebook.domain.entities.consultant import ConsultantSchedule


class JsonBookingStore(ConsultantDirectoryPort, ReservationStorePort):
    """
    File-backed document store with two collections:

    - consultants.json: {consultant_id: consultant document}
    - appointment_requests.json: [booking document, ...]

    Every read goes to disk, so separate store instances over the same directory see each
    other's writes. The uniqueness check and the insert run under one lock.
    """

    def __init__(self, data_dir: str = "./data", seed_consultants: list[ConsultantSchedule] | None = None) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._consultants_path = self._data_dir / "consultants.json"
        self._bookings_path = self._data_dir / "appointment_requests.json"
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

        if seed_consultants and not self._consultants_path.exists():
            self._save(self._consultants_path, {c.consultant_id: c.to_document() for c in seed_consultants})

    def get_consultant(self, consultant_id: str) -> ConsultantSchedule | None:
        documents = self._load(self._consultants_path, default={})
        data = documents.get(consultant_id)
        if data is None:
            return None
        return ConsultantSchedule.from_document(consultant_id, data)

    def booked_slots(self, consultant_id: str, on: date) -> set[str]:
        return {
            b.slot
            for b in self._load_bookings()
            if b.is_live and b.consultant_id == consultant_id and b.date == on
        }

    def create_booking(self, booking: BookingRequest) -> BookingRequest:
        with self._lock:
            bookings = self._load_bookings()
            for existing in bookings:
                if (
                    existing.is_live
                    and existing.consultant_id == booking.consultant_id
                    and existing.date == booking.date
                    and existing.slot == booking.slot
                ):
                    raise SlotAlreadyBookedError(
                        f"{booking.slot} on {booking.date.isoformat()} is already booked for {booking.consultant_id}"
                    )
            documents = [b.to_document() for b in bookings]
            documents.append(booking.to_document())
            self._save(self._bookings_path, documents)

        self._logger.info(
            "Booking document written",
            extra={"booking_id": booking.booking_id, "consultant_id": booking.consultant_id},
        )
        return booking

    def list_bookings(self, requester_id: str | None = None, consultant_id: str | None = None) -> list[BookingRequest]:
        return [
            b
            for b in self._load_bookings()
            if (requester_id is None or b.requester_id == requester_id)
            and (consultant_id is None or b.consultant_id == consultant_id)
        ]

    def _load_bookings(self) -> list[BookingRequest]:
        bookings: list[BookingRequest] = []
        for data in self._load(self._bookings_path, default=[]):
            try:
                bookings.append(BookingRequest.from_document(data))
            except (KeyError, ValueError, TypeError) as e:
                self._logger.warning("Skipping malformed booking document", extra={"error": str(e)})
        return bookings

    def _load(self, path: Path, default: Any) -> Any:
        """Load a collection file, return default if missing."""
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self._logger.error("Error reading store file", extra={"path": str(path), "error": str(e)})
            raise UpstreamServiceError("Booking store is unavailable.") from e

    def _save(self, path: Path, data: Any) -> None:
        """Save a collection file atomically."""
        temp_path = path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            self._logger.error("Error writing store file", extra={"path": str(path), "error": str(e)})
            raise UpstreamServiceError("Booking store is unavailable.") from e
