from fastapi import APIRouter, Depends, HTTPException

from carebook.api.v1.schemas import (
    BookingRequestSchema,
    SessionResetResponseSchema,
    TranscriptEntrySchema,
    TurnResponseSchema,
    UtteranceRequestSchema,
)
from carebook.application.exceptions import UpstreamServiceError
from carebook.application.ports.reservation_store import ReservationStorePort
from carebook.application.use_cases.handle_utterance import HandleUtteranceUseCase
from carebook.domain.entities.booking_request import BookingRequest
from carebook.wiring.dependencies import get_booking_store, get_handle_utterance_use_case

router = APIRouter()


def _booking_schema(booking: BookingRequest) -> BookingRequestSchema:
    return BookingRequestSchema(
        booking_id=booking.booking_id,
        consultant_id=booking.consultant_id,
        requester_id=booking.requester_id,
        date=booking.date,
        slot=booking.slot,
        platform=booking.platform,
        status=booking.status,
        created_at=booking.created_at,
        available_day=booking.available_day,
    )


@router.post("/chat/{user_id}/messages", response_model=TurnResponseSchema)
def post_message(
    user_id: str,
    req: UtteranceRequestSchema,
    uc: HandleUtteranceUseCase = Depends(get_handle_utterance_use_case),
):
    try:
        result = uc.handle(user_id, req.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TurnResponseSchema(
        reply=result.message,
        stage=result.stage,
        action=result.action,
        failure=result.failure,
        booking=_booking_schema(result.booking) if result.booking else None,
    )


@router.get("/chat/{user_id}/transcript", response_model=list[TranscriptEntrySchema])
def get_transcript(
    user_id: str,
    limit: int | None = None,
    uc: HandleUtteranceUseCase = Depends(get_handle_utterance_use_case),
):
    return [
        TranscriptEntrySchema(speaker=e.speaker, text=e.text, timestamp=e.timestamp)
        for e in uc.transcript(user_id, limit=limit)
    ]


@router.delete("/chat/{user_id}/session", response_model=SessionResetResponseSchema)
def reset_session(
    user_id: str,
    uc: HandleUtteranceUseCase = Depends(get_handle_utterance_use_case),
):
    return SessionResetResponseSchema(discarded=uc.reset(user_id))


@router.get("/users/{user_id}/bookings", response_model=list[BookingRequestSchema])
def list_bookings(
    user_id: str,
    store: ReservationStorePort = Depends(get_booking_store),
):
    try:
        bookings = store.list_bookings(requester_id=user_id)
    except UpstreamServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return [_booking_schema(b) for b in bookings]
