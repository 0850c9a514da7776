"""
Tests for date enumeration and slot availability.
"""

from __future__ import annotations

from datetime import date

import pytest

from carebook.application.exceptions import UpstreamServiceError
from carebook.domain.entities.booking_request import BookingRequest, BookingStatus


def _booking(slot: str, on: date, status: BookingStatus = BookingStatus.pending, booking_id: str = "b1") -> BookingRequest:
    return BookingRequest(
        booking_id=booking_id,
        consultant_id="dr_reyes",
        requester_id="someone_else",
        date=on,
        slot=slot,
        platform="Online",
        status=status,
    )


def test_upcoming_dates_filters_by_weekday(resolver):
    """Monday 2025-05-05 with a 14 day window yields two Mondays and two Wednesdays."""
    assert resolver.upcoming_dates(["Monday", "Wednesday"]) == [
        date(2025, 5, 5),
        date(2025, 5, 7),
        date(2025, 5, 12),
        date(2025, 5, 14),
    ]


def test_upcoming_dates_is_case_insensitive(resolver):
    assert resolver.upcoming_dates(["monday", " WEDNESDAY "]) == resolver.upcoming_dates(["Monday", "Wednesday"])


def test_upcoming_dates_with_empty_window(resolver):
    assert resolver.upcoming_dates(["Monday"], lookahead_days=0) == []
    assert resolver.upcoming_dates([]) == []


def test_available_slots_removes_live_bookings(resolver, store, consultant):
    wednesday = date(2025, 5, 7)
    assert resolver.available_slots(consultant, wednesday) == list(consultant.slots)

    store.create_booking(_booking("8:00 AM to 9:00 AM", wednesday))
    assert resolver.available_slots(consultant, wednesday) == ["9:00 AM to 10:00 AM"]


def test_cancelled_bookings_do_not_block(resolver, store, consultant):
    wednesday = date(2025, 5, 7)
    store.create_booking(_booking("8:00 AM to 9:00 AM", wednesday, status=BookingStatus.cancelled))
    assert resolver.available_slots(consultant, wednesday) == list(consultant.slots)


def test_booking_stored_by_start_time_blocks_the_range_slot(resolver, store, consultant):
    wednesday = date(2025, 5, 7)
    store.create_booking(_booking("8:00 AM", wednesday))
    assert resolver.available_slots(consultant, wednesday) == ["9:00 AM to 10:00 AM"]


def test_available_slots_is_repeatable(resolver, consultant):
    friday = date(2025, 5, 9)
    assert resolver.available_slots(consultant, friday) == resolver.available_slots(consultant, friday)


def test_past_and_non_working_dates_have_no_slots(resolver, consultant):
    assert resolver.available_slots(consultant, date(2025, 5, 2)) == []  # last Friday
    assert resolver.available_slots(consultant, date(2025, 5, 6)) == []  # Tuesday


def test_today_drops_slots_that_already_started(resolver, clock, consultant):
    today = date(2025, 5, 5)
    assert resolver.available_slots(consultant, today) == list(consultant.slots)

    clock.advance(hours=1, minutes=30)  # 8:30 AM
    assert resolver.available_slots(consultant, today) == ["9:00 AM to 10:00 AM"]


def test_bookable_dates_skips_full_days(resolver, store, consultant):
    wednesday = date(2025, 5, 7)
    for i, slot in enumerate(consultant.slots):
        store.create_booking(_booking(slot, wednesday, booking_id=f"b{i}"))

    assert resolver.bookable_dates(consultant) == [
        date(2025, 5, 5),
        date(2025, 5, 9),
        date(2025, 5, 12),
        date(2025, 5, 14),
        date(2025, 5, 16),
    ]


def test_store_outage_propagates(resolver, store, consultant):
    store.down = True
    with pytest.raises(UpstreamServiceError):
        resolver.available_slots(consultant, date(2025, 5, 7))
