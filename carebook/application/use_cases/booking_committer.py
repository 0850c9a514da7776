from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from carebook.application.exceptions import SlotAlreadyBookedError
from carebook.application.ports.reservation_store import ReservationStorePort
from carebook.application.use_cases.availability import AvailabilityResolver
from carebook.application.utils.date_parser import weekday_name
from carebook.domain.entities.booking_request import BookingRequest, BookingStatus
from carebook.domain.entities.conversation_session import ConversationSession


@dataclass(frozen=True)
class CommitConflict:
    consultant_id: str
    date: date
    slot: str
    available_slots: tuple[str, ...]  # fresh snapshot taken after the conflict


class BookingCommitter:
    def __init__(self, resolver: AvailabilityResolver, reservations: ReservationStorePort) -> None:
        self._resolver = resolver
        self._reservations = reservations
        self._logger = logging.getLogger(__name__)

    def commit(self, session: ConversationSession) -> BookingRequest | CommitConflict:
        """
        Turn a fully specified session into a pending booking request.

        The slot is re-validated against a fresh reservation snapshot before writing, and the
        store write itself rejects duplicates. Losing either check returns a CommitConflict.
        UpstreamServiceError from the store propagates to the caller.
        """
        consultant = session.consultant
        if consultant is None or not (session.selected_date and session.selected_slot and session.selected_platform):
            raise ValueError("Session is missing consultant, date, slot or platform")

        open_slots = self._resolver.available_slots(consultant, session.selected_date)
        if session.selected_slot not in open_slots:
            self._logger.info(
                "Slot taken before commit",
                extra={"user_id": session.user_id, "consultant_id": consultant.consultant_id, "reason": "revalidation"},
            )
            return CommitConflict(
                consultant_id=consultant.consultant_id,
                date=session.selected_date,
                slot=session.selected_slot,
                available_slots=tuple(open_slots),
            )

        booking = BookingRequest(
            booking_id=uuid.uuid4().hex,
            consultant_id=consultant.consultant_id,
            requester_id=session.user_id,
            date=session.selected_date,
            slot=session.selected_slot,
            platform=session.selected_platform,
            status=BookingStatus.pending,
            created_at=self._resolver.now(),
            available_day=weekday_name(session.selected_date),
        )
        try:
            saved = self._reservations.create_booking(booking)
        except SlotAlreadyBookedError:
            self._logger.info(
                "Slot taken during write",
                extra={"user_id": session.user_id, "consultant_id": consultant.consultant_id, "reason": "duplicate"},
            )
            return CommitConflict(
                consultant_id=consultant.consultant_id,
                date=session.selected_date,
                slot=session.selected_slot,
                available_slots=tuple(self._resolver.available_slots(consultant, session.selected_date)),
            )

        self._logger.info(
            "Booking request created",
            extra={"user_id": session.user_id, "consultant_id": consultant.consultant_id, "booking_id": saved.booking_id},
        )
        return saved
