from abc import ABC, abstractmethod

from carebook.domain.entities.conversation_session import ConversationSession
from carebook.domain.entities.message import TranscriptEntry


class SessionStorePort(ABC):
    @abstractmethod
    def get_session(self, user_id: str) -> ConversationSession | None:
        raise NotImplementedError

    @abstractmethod
    def put_session(self, user_id: str, session: ConversationSession) -> None:
        """Store the user's active session, replacing any previous one."""
        raise NotImplementedError

    @abstractmethod
    def delete_session(self, user_id: str) -> bool:
        """Discard the user's active session. Returns True if one existed."""
        raise NotImplementedError

    @abstractmethod
    def append_message(self, user_id: str, speaker: str, text: str, timestamp: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_transcript(self, user_id: str, limit: int | None = None) -> list[TranscriptEntry]:
        """
        Get the ordered transcript for a user.
        Returns the last `limit` entries when a limit is given.
        """
        raise NotImplementedError

    @abstractmethod
    def clear_transcript(self, user_id: str) -> None:
        """Forget the user's transcript."""
        raise NotImplementedError
