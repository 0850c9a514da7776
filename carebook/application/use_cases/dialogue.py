from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from enum import Enum

from carebook.application.exceptions import UpstreamServiceError
from carebook.application.ports.consultant_directory import ConsultantDirectoryPort
from carebook.application.ports.recommender import RecommenderPort
from carebook.application.use_cases import reply_composer
from carebook.application.use_cases.availability import AvailabilityResolver
from carebook.application.use_cases.booking_committer import BookingCommitter, CommitConflict
from carebook.application.utils.date_parser import match_slot, parse_date, parse_time_of_day
from carebook.application.utils.message_rules import (
    is_affirmative,
    is_cancel_command,
    is_negative,
    resolve_platform,
)
from carebook.domain.entities.booking_request import BookingRequest
from carebook.domain.entities.conversation_session import ConversationSession, Stage


class FailureKind(str, Enum):
    parse_failure = "parse_failure"
    out_of_range = "out_of_range"
    upstream_failure = "upstream_failure"
    commit_conflict = "commit_conflict"


@dataclass(frozen=True)
class TurnResult:
    action: str
    message: str
    session: ConversationSession | None  # None when no conversation is retained
    failure: FailureKind | None = None
    booking: BookingRequest | None = None

    @property
    def stage(self) -> Stage:
        return self.session.stage if self.session else Stage.idle


class DialogueController:
    """
    One step of the booking conversation per call.

    The session goes in and a new session comes out; nothing about the conversation is
    kept on the controller. Reprompts return the incoming session unchanged apart from
    its timestamp, so a bad answer never loses earlier selections.
    """

    def __init__(
        self,
        recommender: RecommenderPort,
        directory: ConsultantDirectoryPort,
        resolver: AvailabilityResolver,
        committer: BookingCommitter,
        preview_count: int = 5,
    ) -> None:
        self._recommender = recommender
        self._directory = directory
        self._resolver = resolver
        self._committer = committer
        self._preview_count = preview_count
        self._logger = logging.getLogger(__name__)

    def handle(self, session: ConversationSession | None, user_id: str, text: str) -> TurnResult:
        if session is None or session.stage.is_terminal:
            session = None

        if is_cancel_command(text):
            return self._cancel(session)

        if session is None or session.stage == Stage.idle:
            return self._start(user_id, text)

        if session.stage == Stage.awaiting_booking_confirmation:
            return self._process_booking_confirmation(session, text)

        if session.stage == Stage.selecting_date:
            return self._process_date_input(session, text)

        if session.stage == Stage.selecting_time:
            return self._process_time_input(session, text)

        if session.stage == Stage.selecting_platform:
            return self._process_platform_input(session, text)

        if session.stage == Stage.awaiting_final_confirmation:
            return self._process_final_confirmation(session, text)

        return self._start(user_id, text)

    def _start(self, user_id: str, text: str) -> TurnResult:
        try:
            recommendation = self._recommender.recommend(text)
            consultant = self._directory.get_consultant(recommendation.consultant_id)
            if consultant is None:
                raise UpstreamServiceError("No matching doctor found.")
            dates = self._resolver.bookable_dates(consultant)
        except UpstreamServiceError as e:
            self._logger.warning("Recommendation failed", extra={"user_id": user_id, "error": str(e)})
            return TurnResult(
                action="error",
                message=reply_composer.upstream_error(str(e)),
                session=None,
                failure=FailureKind.upstream_failure,
            )

        if not dates:
            self._logger.info(
                "Consultant has no open dates",
                extra={"user_id": user_id, "consultant_id": consultant.consultant_id},
            )
            return TurnResult(
                action="no_availability",
                message=reply_composer.no_availability(
                    recommendation.explanation, consultant, self._resolver.lookahead_days
                ),
                session=None,
            )

        now_ts = self.now_ts()
        session = ConversationSession(
            session_id=uuid.uuid4().hex,
            user_id=user_id,
            stage=Stage.awaiting_booking_confirmation,
            consultant=consultant,
            upcoming_dates=tuple(dates),
            explanation=recommendation.explanation,
            created_at=now_ts,
            updated_at=now_ts,
        )
        self._logger.info(
            "Consultant recommended",
            extra={"user_id": user_id, "session_id": session.session_id, "consultant_id": consultant.consultant_id},
        )
        return TurnResult(
            action="offer_booking",
            message=reply_composer.offer_booking(
                recommendation.explanation, consultant, dates[: self._preview_count]
            ),
            session=session,
        )

    def _process_booking_confirmation(self, session: ConversationSession, text: str) -> TurnResult:
        if is_negative(text):
            return TurnResult(action="declined", message=reply_composer.declined(), session=None)
        if not is_affirmative(text):
            return self._reprompt(session, reply_composer.ASK_YES_NO, FailureKind.parse_failure)

        try:
            dates = self._resolver.bookable_dates(session.consultant)
        except UpstreamServiceError as e:
            return self._upstream_failure(session, e)

        if not dates:
            return TurnResult(
                action="no_availability",
                message=reply_composer.no_availability(None, session.consultant, self._resolver.lookahead_days),
                session=None,
            )
        return self._advance(
            session,
            "ask_date",
            reply_composer.choose_date(dates),
            stage=Stage.selecting_date,
            upcoming_dates=tuple(dates),
        )

    def _process_date_input(self, session: ConversationSession, text: str) -> TurnResult:
        parsed_date = parse_date(text, self._resolver.now())
        if parsed_date is None:
            return self._reprompt(
                session, reply_composer.date_not_understood(session.upcoming_dates), FailureKind.parse_failure
            )

        if parsed_date not in session.upcoming_dates or parsed_date < self._resolver.today():
            return self._reprompt(
                session,
                reply_composer.date_unavailable(parsed_date, session.upcoming_dates),
                FailureKind.out_of_range,
            )

        try:
            slots = self._resolver.available_slots(session.consultant, parsed_date)
        except UpstreamServiceError as e:
            return self._upstream_failure(session, e)

        if not slots:
            remaining = tuple(d for d in session.upcoming_dates if d != parsed_date)
            if not remaining:
                return TurnResult(
                    action="no_availability",
                    message=reply_composer.date_unavailable(parsed_date, remaining),
                    session=None,
                    failure=FailureKind.out_of_range,
                )
            return self._reprompt(
                replace(session, upcoming_dates=remaining),
                reply_composer.date_unavailable(parsed_date, remaining),
                FailureKind.out_of_range,
            )

        return self._advance(
            session,
            "ask_time",
            reply_composer.choose_time(parsed_date, slots),
            stage=Stage.selecting_time,
            selected_date=parsed_date,
            selected_slot=None,
        )

    def _process_time_input(self, session: ConversationSession, text: str) -> TurnResult:
        try:
            slots = self._resolver.available_slots(session.consultant, session.selected_date)
        except UpstreamServiceError as e:
            return self._upstream_failure(session, e)

        if not slots:
            return self._date_filled_up(session)

        requested = parse_time_of_day(text)
        if requested is None:
            return self._reprompt(session, reply_composer.time_not_understood(slots), FailureKind.parse_failure)

        slot = match_slot(requested, slots)
        if slot is None:
            return self._reprompt(
                session, reply_composer.time_unavailable(requested, slots), FailureKind.out_of_range
            )

        return self._advance(
            session,
            "ask_platform",
            reply_composer.ask_platform(session.consultant),
            stage=Stage.selecting_platform,
            selected_slot=slot,
        )

    def _process_platform_input(self, session: ConversationSession, text: str) -> TurnResult:
        platform = resolve_platform(text)
        if platform is None:
            return self._reprompt(
                session, reply_composer.platform_not_understood(session.consultant), FailureKind.parse_failure
            )
        if platform not in reply_composer.offered_platforms(session.consultant):
            return self._reprompt(
                session,
                reply_composer.platform_unavailable(platform, session.consultant),
                FailureKind.out_of_range,
            )

        return self._advance(
            session,
            "confirm",
            reply_composer.summary(session.consultant, session.selected_date, session.selected_slot, platform),
            stage=Stage.awaiting_final_confirmation,
            selected_platform=platform,
        )

    def _process_final_confirmation(self, session: ConversationSession, text: str) -> TurnResult:
        if is_negative(text):
            return self._cancel(session)
        if not is_affirmative(text):
            return self._reprompt(
                session,
                reply_composer.summary(
                    session.consultant, session.selected_date, session.selected_slot, session.selected_platform
                ),
                FailureKind.parse_failure,
            )

        try:
            outcome = self._committer.commit(session)
        except UpstreamServiceError as e:
            return self._upstream_failure(session, e)

        if isinstance(outcome, CommitConflict):
            return self._commit_conflict(session, outcome)

        return TurnResult(
            action="booked",
            message=reply_composer.booked(outcome, session.consultant),
            session=replace(session, stage=Stage.committed, updated_at=self.now_ts()),
            booking=outcome,
        )

    def _commit_conflict(self, session: ConversationSession, conflict: CommitConflict) -> TurnResult:
        if not conflict.available_slots:
            return self._date_filled_up(session, failure=FailureKind.commit_conflict)
        return self._advance(
            session,
            "ask_time",
            reply_composer.slot_conflict(conflict.slot, conflict.date, conflict.available_slots),
            failure=FailureKind.commit_conflict,
            stage=Stage.selecting_time,
            selected_slot=None,
        )

    def _date_filled_up(
        self, session: ConversationSession, failure: FailureKind = FailureKind.out_of_range
    ) -> TurnResult:
        filled = session.selected_date
        try:
            dates = self._resolver.bookable_dates(session.consultant)
        except UpstreamServiceError as e:
            return self._upstream_failure(session, e)
        if not dates:
            return TurnResult(
                action="no_availability",
                message=reply_composer.date_filled_up(filled, dates),
                session=None,
                failure=failure,
            )
        return self._advance(
            session,
            "ask_date",
            reply_composer.date_filled_up(filled, dates),
            failure=failure,
            stage=Stage.selecting_date,
            upcoming_dates=tuple(dates),
            selected_date=None,
            selected_slot=None,
        )

    def _cancel(self, session: ConversationSession | None) -> TurnResult:
        if session is not None:
            self._logger.info(
                "Booking conversation cancelled",
                extra={"user_id": session.user_id, "session_id": session.session_id, "stage": session.stage.value},
            )
            session = replace(session, stage=Stage.cancelled, updated_at=self.now_ts())
        return TurnResult(action="cancelled", message=reply_composer.cancelled(), session=session)

    def _advance(
        self,
        session: ConversationSession,
        action: str,
        message: str,
        failure: FailureKind | None = None,
        **changes,
    ) -> TurnResult:
        updated = replace(session, updated_at=self.now_ts(), **changes)
        self._logger.info(
            "Stage transition",
            extra={
                "user_id": session.user_id,
                "session_id": session.session_id,
                "stage": updated.stage.value,
                "action": action,
            },
        )
        return TurnResult(action=action, message=message, session=updated, failure=failure)

    def _reprompt(self, session: ConversationSession, message: str, failure: FailureKind) -> TurnResult:
        self._logger.info(
            "Reprompt",
            extra={"user_id": session.user_id, "stage": session.stage.value, "reason": failure.value},
        )
        return TurnResult(
            action="reprompt",
            message=message,
            session=replace(session, updated_at=self.now_ts()),
            failure=failure,
        )

    def _upstream_failure(self, session: ConversationSession, error: UpstreamServiceError) -> TurnResult:
        self._logger.error(
            "Upstream failure, keeping session",
            extra={"user_id": session.user_id, "stage": session.stage.value, "error": str(error)},
        )
        return TurnResult(
            action="error",
            message=reply_composer.upstream_error(str(error)),
            session=session,
            failure=FailureKind.upstream_failure,
        )

    def now_ts(self) -> float:
        return self._resolver.now().timestamp()
