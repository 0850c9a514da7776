"""
Tests for the file-backed consultant and booking store.
"""

from __future__ import annotations

import json
import tempfile
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from carebook.application.exceptions import SlotAlreadyBookedError, UpstreamServiceError
from carebook.domain.entities.booking_request import BookingRequest, BookingStatus
from carebook.infrastructure.store.json_store import JsonBookingStore
from carebook.infrastructure.store.seed_data import SEED_CONSULTANTS


def _booking(booking_id: str = "b1", status: BookingStatus = BookingStatus.pending) -> BookingRequest:
    return BookingRequest(
        booking_id=booking_id,
        consultant_id="dr_reyes",
        requester_id="patient_1",
        date=date(2025, 5, 12),
        slot="8:00 AM to 9:00 AM",
        platform="Online",
        status=status,
        created_at=datetime(2025, 5, 5, 7, 0, tzinfo=ZoneInfo("Asia/Manila")),
        available_day="Monday",
    )


def test_seeds_consultants_on_first_use():
    """Seed consultants are written once and read back intact."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir, seed_consultants=SEED_CONSULTANTS)

        consultant = store.get_consultant("dr_reyes")
        assert consultant == SEED_CONSULTANTS[0]
        assert store.get_consultant("dr_nobody") is None

        documents = json.loads((Path(tmpdir) / "consultants.json").read_text(encoding="utf-8"))
        assert documents["dr_reyes"]["availableDays"] == ["Monday", "Wednesday", "Friday"]


def test_existing_consultants_are_not_overwritten():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "consultants.json"
        path.write_text(
            json.dumps({"dr_local": {"name": "Dr. Local", "availableDays": ["Tuesday"], "consultationHours": ["9:00 AM"]}}),
            encoding="utf-8",
        )
        store = JsonBookingStore(data_dir=tmpdir, seed_consultants=SEED_CONSULTANTS)

        assert store.get_consultant("dr_reyes") is None
        assert store.get_consultant("dr_local").available_weekdays == ("Tuesday",)


def test_booking_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        booking = _booking()
        store.create_booking(booking)

        assert store.list_bookings(requester_id="patient_1") == [booking]
        assert store.booked_slots("dr_reyes", date(2025, 5, 12)) == {"8:00 AM to 9:00 AM"}
        assert store.booked_slots("dr_reyes", date(2025, 5, 14)) == set()

        documents = json.loads((Path(tmpdir) / "appointment_requests.json").read_text(encoding="utf-8"))
        assert documents[0]["consultationHour"] == "8:00 AM to 9:00 AM"
        assert documents[0]["status"] == "pending"


def test_writes_are_visible_to_other_instances():
    with tempfile.TemporaryDirectory() as tmpdir:
        JsonBookingStore(data_dir=tmpdir).create_booking(_booking())

        other = JsonBookingStore(data_dir=tmpdir)
        assert other.booked_slots("dr_reyes", date(2025, 5, 12)) == {"8:00 AM to 9:00 AM"}
        with pytest.raises(SlotAlreadyBookedError):
            other.create_booking(_booking("b2"))


def test_cancelled_booking_frees_the_slot():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        store.create_booking(_booking("b1", status=BookingStatus.cancelled))
        store.create_booking(_booking("b2"))

        assert len(store.list_bookings()) == 2


def test_malformed_documents_are_skipped():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "appointment_requests.json"
        path.write_text(json.dumps([{"bookingId": "broken"}, _booking().to_document()]), encoding="utf-8")
        store = JsonBookingStore(data_dir=tmpdir)

        assert [b.booking_id for b in store.list_bookings()] == ["b1"]


def test_corrupt_file_is_an_upstream_failure():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "appointment_requests.json").write_text("{not json", encoding="utf-8")
        store = JsonBookingStore(data_dir=tmpdir)

        with pytest.raises(UpstreamServiceError):
            store.booked_slots("dr_reyes", date(2025, 5, 12))
