import datetime as dt

from pydantic import BaseModel

from carebook.application.use_cases.dialogue import FailureKind
from carebook.domain.entities.booking_request import BookingStatus
from carebook.domain.entities.conversation_session import Stage


class UtteranceRequestSchema(BaseModel):
    text: str


class BookingRequestSchema(BaseModel):
    booking_id: str
    consultant_id: str
    requester_id: str
    date: dt.date
    slot: str
    platform: str
    status: BookingStatus
    created_at: dt.datetime | None = None
    available_day: str | None = None


class TurnResponseSchema(BaseModel):
    reply: str
    stage: Stage
    action: str
    failure: FailureKind | None = None
    booking: BookingRequestSchema | None = None


class TranscriptEntrySchema(BaseModel):
    speaker: str
    text: str
    timestamp: float


class SessionResetResponseSchema(BaseModel):
    discarded: bool
