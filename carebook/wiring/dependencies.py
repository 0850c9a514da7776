from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from carebook.core.config import settings
from carebook.application.ports.recommender import RecommenderPort
from carebook.application.use_cases.availability import AvailabilityResolver
from carebook.application.use_cases.booking_committer import BookingCommitter
from carebook.application.use_cases.dialogue import DialogueController
from carebook.application.use_cases.handle_utterance import HandleUtteranceUseCase
from carebook.infrastructure.recommender.http_recommender import HttpRecommender
from carebook.infrastructure.recommender.mock_recommender import MockRecommender
from carebook.infrastructure.store.json_store import JsonBookingStore
from carebook.infrastructure.store.memory_store import MemoryBookingStore, MemorySessionStore
from carebook.infrastructure.store.seed_data import SEED_CONSULTANTS


_booking_store: MemoryBookingStore | JsonBookingStore | None = None
_session_store: MemorySessionStore | None = None


def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.CLINIC_TIMEZONE)


@lru_cache
def get_recommender() -> RecommenderPort:
    logger = logging.getLogger(__name__)
    if settings.RECOMMENDER_URL and settings.RECOMMENDER_URL.strip():
        logger.info("Using HttpRecommender")
        return HttpRecommender()
    logger.info("Using MockRecommender (RECOMMENDER_URL not set)")
    return MockRecommender(settings.RECOMMENDER_DEFAULT_CONSULTANT_ID)


def get_booking_store() -> MemoryBookingStore | JsonBookingStore:
    global _booking_store
    if _booking_store is None:
        if settings.ENV.lower() in {"dev", "local"}:
            _booking_store = JsonBookingStore(data_dir=settings.DATA_DIR, seed_consultants=SEED_CONSULTANTS)
        else:
            _booking_store = MemoryBookingStore(consultants=SEED_CONSULTANTS)
    return _booking_store


def get_session_store() -> MemorySessionStore:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore(history_limit=settings.TRANSCRIPT_LIMIT)
    return _session_store


def get_availability_resolver() -> AvailabilityResolver:
    return AvailabilityResolver(
        reservations=get_booking_store(),
        timezone=get_timezone(),
        lookahead_days=settings.LOOKAHEAD_DAYS,
    )


def get_dialogue_controller() -> DialogueController:
    resolver = get_availability_resolver()
    store = get_booking_store()
    return DialogueController(
        recommender=get_recommender(),
        directory=store,
        resolver=resolver,
        committer=BookingCommitter(resolver=resolver, reservations=store),
        preview_count=settings.PREVIEW_DATE_COUNT,
    )


@lru_cache
def get_handle_utterance_use_case() -> HandleUtteranceUseCase:
    # cached so the per-user turn locks are shared by every request
    return HandleUtteranceUseCase(
        store=get_session_store(),
        controller=get_dialogue_controller(),
        idle_timeout_seconds=settings.SESSION_IDLE_TIMEOUT_MINUTES * 60,
    )


def get_container() -> dict[str, object]:
    return {
        "use_case": get_handle_utterance_use_case(),
        "sessions": get_session_store(),
        "bookings": get_booking_store(),
    }
