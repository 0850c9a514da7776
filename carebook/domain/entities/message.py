from dataclasses import dataclass


SPEAKER_USER = "user"
SPEAKER_ENGINE = "engine"


@dataclass(frozen=True)
class TranscriptEntry:
    speaker: str
    text: str
    timestamp: float
