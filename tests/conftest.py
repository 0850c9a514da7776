from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from carebook.application.exceptions import UpstreamServiceError
from carebook.application.ports.recommender import RecommenderPort
from carebook.application.use_cases.availability import AvailabilityResolver
from carebook.application.use_cases.booking_committer import BookingCommitter
from carebook.application.use_cases.dialogue import DialogueController
from carebook.application.use_cases.handle_utterance import HandleUtteranceUseCase
from carebook.domain.entities.booking_request import BookingRequest
from carebook.domain.entities.consultant import ConsultantSchedule
from carebook.domain.entities.recommendation import Recommendation
from carebook.infrastructure.store.memory_store import MemoryBookingStore, MemorySessionStore

TZ = ZoneInfo("Asia/Manila")

# 2025-05-05 is a Monday
MONDAY_7AM = datetime(2025, 5, 5, 7, 0, tzinfo=TZ)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class StubRecommender(RecommenderPort):
    def __init__(self, consultant_id: str = "dr_reyes", error: str | None = None) -> None:
        self.consultant_id = consultant_id
        self.error = error
        self.calls: list[str] = []

    def recommend(self, symptoms: str) -> Recommendation:
        self.calls.append(symptoms)
        if self.error:
            raise UpstreamServiceError(self.error)
        return Recommendation(consultant_id=self.consultant_id, explanation="An obstetrician can help with that.")


class FlakyBookingStore(MemoryBookingStore):
    """Memory store that can be switched into an outage."""

    def __init__(self, consultants: list[ConsultantSchedule] | None = None) -> None:
        super().__init__(consultants)
        self.down = False

    def booked_slots(self, consultant_id: str, on: date) -> set[str]:
        if self.down:
            raise UpstreamServiceError("Booking store is unavailable.")
        return super().booked_slots(consultant_id, on)

    def create_booking(self, booking: BookingRequest) -> BookingRequest:
        if self.down:
            raise UpstreamServiceError("Booking store is unavailable.")
        return super().create_booking(booking)

    def list_bookings(self, requester_id: str | None = None, consultant_id: str | None = None) -> list[BookingRequest]:
        if self.down:
            raise UpstreamServiceError("Booking store is unavailable.")
        return super().list_bookings(requester_id, consultant_id)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(MONDAY_7AM)


@pytest.fixture
def consultant() -> ConsultantSchedule:
    return ConsultantSchedule(
        consultant_id="dr_reyes",
        name="Dr. Maria Reyes",
        available_weekdays=("Monday", "Wednesday", "Friday"),
        slots=("8:00 AM to 9:00 AM", "9:00 AM to 10:00 AM"),
        hourly_rate=800.0,
    )


@pytest.fixture
def store(consultant: ConsultantSchedule) -> FlakyBookingStore:
    return FlakyBookingStore([consultant])


@pytest.fixture
def resolver(store: FlakyBookingStore, clock: FixedClock) -> AvailabilityResolver:
    return AvailabilityResolver(reservations=store, timezone=TZ, lookahead_days=14, clock=clock)


@pytest.fixture
def committer(resolver: AvailabilityResolver, store: FlakyBookingStore) -> BookingCommitter:
    return BookingCommitter(resolver=resolver, reservations=store)


@pytest.fixture
def recommender() -> StubRecommender:
    return StubRecommender()


@pytest.fixture
def controller(
    recommender: StubRecommender,
    store: FlakyBookingStore,
    resolver: AvailabilityResolver,
    committer: BookingCommitter,
) -> DialogueController:
    return DialogueController(
        recommender=recommender,
        directory=store,
        resolver=resolver,
        committer=committer,
        preview_count=5,
    )


@pytest.fixture
def sessions() -> MemorySessionStore:
    return MemorySessionStore(history_limit=50)


@pytest.fixture
def use_case(sessions: MemorySessionStore, controller: DialogueController) -> HandleUtteranceUseCase:
    return HandleUtteranceUseCase(store=sessions, controller=controller, idle_timeout_seconds=30 * 60)
