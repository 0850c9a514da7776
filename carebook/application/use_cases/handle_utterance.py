from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from carebook.application.ports.session_store import SessionStorePort
from carebook.application.use_cases import reply_composer
from carebook.application.use_cases.dialogue import DialogueController, TurnResult
from carebook.domain.entities.conversation_session import ConversationSession
from carebook.domain.entities.message import SPEAKER_ENGINE, SPEAKER_USER, TranscriptEntry


class HandleUtteranceUseCase:
    """
    Per-user entry point: one utterance in, one reply out.

    Turns for the same user are serialised with a per-user lock. Sessions idle for longer
    than `idle_timeout_seconds` are dropped before the utterance is handled, so the
    utterance starts a fresh conversation.
    """

    def __init__(
        self,
        store: SessionStorePort,
        controller: DialogueController,
        idle_timeout_seconds: float = 30 * 60,
    ) -> None:
        self._store = store
        self._controller = controller
        self._idle_timeout_seconds = idle_timeout_seconds
        self._locks: dict[str, tuple[threading.Lock, int]] = {}  # user_id -> (lock, turns holding or waiting)
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    @contextmanager
    def _user_turn(self, user_id: str) -> Iterator[None]:
        """Hold the user's lock. The lock is dropped once no turn holds it and no session remains."""
        with self._lock_lock:
            lock, users = self._locks.get(user_id, (threading.Lock(), 0))
            self._locks[user_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._lock_lock:
                lock, users = self._locks[user_id]
                if users > 1:
                    self._locks[user_id] = (lock, users - 1)
                elif self._store.get_session(user_id) is None:
                    del self._locks[user_id]
                else:
                    self._locks[user_id] = (lock, 0)

    def handle(self, user_id: str, text: str) -> TurnResult:
        text = (text or "").strip()
        if not text:
            raise ValueError("Utterance text must not be empty")

        with self._user_turn(user_id):
            now_ts = self._controller.now_ts()
            session = self._active_session(user_id, now_ts)

            if not self._store.get_transcript(user_id, limit=1):
                self._store.append_message(user_id, SPEAKER_ENGINE, reply_composer.GREETING, now_ts)
            self._store.append_message(user_id, SPEAKER_USER, text, now_ts)

            result = self._controller.handle(session, user_id, text)

            if result.session is None or result.session.stage.is_terminal:
                self._store.delete_session(user_id)
            else:
                self._store.put_session(user_id, result.session)

            self._store.append_message(user_id, SPEAKER_ENGINE, result.message, self._controller.now_ts())
            self._logger.info(
                "Turn handled",
                extra={
                    "user_id": user_id,
                    "stage": result.stage.value,
                    "action": result.action,
                    "reason": result.failure.value if result.failure else None,
                },
            )
            return result

    def reset(self, user_id: str) -> bool:
        """Discard the user's active session and transcript. Returns True if a session existed."""
        with self._user_turn(user_id):
            self._store.clear_transcript(user_id)
            return self._store.delete_session(user_id)

    def transcript(self, user_id: str, limit: int | None = None) -> list[TranscriptEntry]:
        return self._store.get_transcript(user_id, limit=limit)

    def _active_session(self, user_id: str, now_ts: float) -> ConversationSession | None:
        session = self._store.get_session(user_id)
        if session is None:
            return None
        if session.updated_at is not None and now_ts - session.updated_at > self._idle_timeout_seconds:
            self._logger.info(
                "Session expired",
                extra={"user_id": user_id, "session_id": session.session_id, "stage": session.stage.value},
            )
            self._store.delete_session(user_id)
            self._store.clear_transcript(user_id)
            return None
        return session
