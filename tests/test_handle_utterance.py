"""
Tests for the per-user entry point: session persistence, transcript and idle expiry.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from carebook.application.use_cases.reply_composer import GREETING
from carebook.domain.entities.conversation_session import Stage
from carebook.domain.entities.message import SPEAKER_ENGINE, SPEAKER_USER


def test_first_turn_records_greeting_and_exchange(use_case):
    result = use_case.handle("patient_1", "I have back pain")

    transcript = use_case.transcript("patient_1")
    assert [(e.speaker, e.text) for e in transcript] == [
        (SPEAKER_ENGINE, GREETING),
        (SPEAKER_USER, "I have back pain"),
        (SPEAKER_ENGINE, result.message),
    ]


def test_session_survives_between_turns(use_case, sessions):
    use_case.handle("patient_1", "I have back pain")
    assert sessions.get_session("patient_1").stage == Stage.awaiting_booking_confirmation

    result = use_case.handle("patient_1", "yes")
    assert result.action == "ask_date"
    assert sessions.get_session("patient_1").stage == Stage.selecting_date


def test_terminal_sessions_are_discarded(use_case, sessions):
    for text in ["I have back pain", "yes", "next monday", "8 AM", "online"]:
        use_case.handle("patient_1", text)
    result = use_case.handle("patient_1", "yes")

    assert result.stage == Stage.committed
    assert sessions.get_session("patient_1") is None


def test_cancel_discards_the_session(use_case, sessions):
    use_case.handle("patient_1", "I have back pain")
    result = use_case.handle("patient_1", "cancel")

    assert result.action == "cancelled"
    assert sessions.get_session("patient_1") is None


def test_idle_session_expires(use_case, clock, recommender):
    use_case.handle("patient_1", "I have back pain")
    clock.advance(minutes=31)

    result = use_case.handle("patient_1", "yes")
    assert result.action == "offer_booking"
    assert recommender.calls == ["I have back pain", "yes"]


def test_session_within_timeout_is_kept(use_case, clock):
    use_case.handle("patient_1", "I have back pain")
    clock.advance(minutes=29)

    assert use_case.handle("patient_1", "yes").action == "ask_date"


@pytest.mark.parametrize("text", ["", "   ", None])
def test_blank_utterance_is_rejected(use_case, text):
    with pytest.raises(ValueError):
        use_case.handle("patient_1", text)
    assert use_case.transcript("patient_1") == []


def test_reset_drops_the_session(use_case, sessions):
    use_case.handle("patient_1", "I have back pain")

    assert use_case.reset("patient_1") is True
    assert sessions.get_session("patient_1") is None
    assert use_case.transcript("patient_1") == []
    assert use_case.reset("patient_1") is False


def test_users_do_not_share_sessions(use_case, sessions):
    use_case.handle("patient_1", "I have back pain")
    use_case.handle("patient_2", "I have a headache")
    use_case.handle("patient_1", "yes")

    assert sessions.get_session("patient_1").stage == Stage.selecting_date
    assert sessions.get_session("patient_2").stage == Stage.awaiting_booking_confirmation


def test_transcript_limit(use_case):
    use_case.handle("patient_1", "I have back pain")
    use_case.handle("patient_1", "yes")

    last_two = use_case.transcript("patient_1", limit=2)
    assert [e.speaker for e in last_two] == [SPEAKER_USER, SPEAKER_ENGINE]
    assert last_two[0].text == "yes"


def test_turns_for_one_user_are_serialised(use_case):
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(lambda _: use_case.handle("patient_1", "I have back pain"), range(4)))

    transcript = use_case.transcript("patient_1")
    assert len(transcript) == 1 + 4 * 2
    assert [e.speaker for e in transcript[1:]] == [SPEAKER_USER, SPEAKER_ENGINE] * 4


def test_idle_expiry_starts_a_fresh_transcript(use_case, clock):
    use_case.handle("patient_1", "I have back pain")
    clock.advance(minutes=31)
    use_case.handle("patient_1", "I have a headache")

    transcript = use_case.transcript("patient_1")
    assert [(e.speaker, e.text) for e in transcript[:2]] == [
        (SPEAKER_ENGINE, GREETING),
        (SPEAKER_USER, "I have a headache"),
    ]
    assert len(transcript) == 3


def test_turn_locks_are_released_with_the_session(use_case):
    use_case.handle("patient_1", "I have back pain")
    assert "patient_1" in use_case._locks

    use_case.handle("patient_1", "no")  # declined, nothing retained
    assert "patient_1" not in use_case._locks

    use_case.handle("patient_2", "I have a headache")
    use_case.reset("patient_2")
    assert use_case._locks == {}
