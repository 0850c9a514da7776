from __future__ import annotations

import threading
from datetime import date

from carebook.application.exceptions import SlotAlreadyBookedError
from carebook.application.ports.consultant_directory import ConsultantDirectoryPort
from carebook.application.ports.reservation_store import ReservationStorePort
from carebook.application.ports.session_store import SessionStorePort
from carebook.domain.entities.booking_request import BookingRequest
from carebook.domain.entities.consultant import ConsultantSchedule
from carebook.domain.entities.conversation_session import ConversationSession
from carebook.domain.entities.message import TranscriptEntry


class MemorySessionStore(SessionStorePort):
    def __init__(self, history_limit: int = 50) -> None:
        self._sessions: dict[str, ConversationSession] = {}
        self._transcripts: dict[str, list[TranscriptEntry]] = {}
        self._history_limit = history_limit

    def get_session(self, user_id: str) -> ConversationSession | None:
        return self._sessions.get(user_id)

    def put_session(self, user_id: str, session: ConversationSession) -> None:
        self._sessions[user_id] = session

    def delete_session(self, user_id: str) -> bool:
        return self._sessions.pop(user_id, None) is not None

    def append_message(self, user_id: str, speaker: str, text: str, timestamp: float) -> None:
        self._transcripts.setdefault(user_id, [])
        self._transcripts[user_id].append(TranscriptEntry(speaker=speaker, text=text, timestamp=timestamp))
        if len(self._transcripts[user_id]) > self._history_limit:
            self._transcripts[user_id] = self._transcripts[user_id][-self._history_limit :]

    def clear_transcript(self, user_id: str) -> None:
        self._transcripts.pop(user_id, None)

    def get_transcript(self, user_id: str, limit: int | None = None) -> list[TranscriptEntry]:
        entries = list(self._transcripts.get(user_id, []))
        if limit is not None:
            return entries[-limit:] if limit > 0 else []
        return entries


class MemoryBookingStore(ConsultantDirectoryPort, ReservationStorePort):
    def __init__(self, consultants: list[ConsultantSchedule] | None = None) -> None:
        self._consultants: dict[str, ConsultantSchedule] = {c.consultant_id: c for c in consultants or []}
        self._bookings: list[BookingRequest] = []
        self._lock = threading.Lock()

    def add_consultant(self, consultant: ConsultantSchedule) -> None:
        self._consultants[consultant.consultant_id] = consultant

    def get_consultant(self, consultant_id: str) -> ConsultantSchedule | None:
        return self._consultants.get(consultant_id)

    def booked_slots(self, consultant_id: str, on: date) -> set[str]:
        with self._lock:
            return {
                b.slot
                for b in self._bookings
                if b.is_live and b.consultant_id == consultant_id and b.date == on
            }

    def create_booking(self, booking: BookingRequest) -> BookingRequest:
        with self._lock:
            for existing in self._bookings:
                if (
                    existing.is_live
                    and existing.consultant_id == booking.consultant_id
                    and existing.date == booking.date
                    and existing.slot == booking.slot
                ):
                    raise SlotAlreadyBookedError(
                        f"{booking.slot} on {booking.date.isoformat()} is already booked for {booking.consultant_id}"
                    )
            self._bookings.append(booking)
            return booking

    def list_bookings(self, requester_id: str | None = None, consultant_id: str | None = None) -> list[BookingRequest]:
        with self._lock:
            return [
                b
                for b in self._bookings
                if (requester_id is None or b.requester_id == requester_id)
                and (consultant_id is None or b.consultant_id == consultant_id)
            ]
