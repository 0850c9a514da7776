from __future__ import annotations

import re
from difflib import SequenceMatcher

from carebook.domain.entities.booking_request import PLATFORM_IN_PERSON, PLATFORM_ONLINE

AFFIRMATIVE_WORDS = (
    "y",
    "yes",
    "yeah",
    "yep",
    "yup",
    "sure",
    "ok",
    "okay",
    "confirm",
    "confirmed",
    "definitely",
)

AFFIRMATIVE_PHRASES = (
    "book it",
    "go ahead",
    "sounds good",
    "lets do it",
    "of course",
)

NEGATIVE_WORDS = (
    "n",
    "no",
    "nope",
    "nah",
)

NEGATIVE_PHRASES = (
    "not now",
    "not yet",
    "no thanks",
    "maybe later",
    "dont book",
)

CANCEL_COMMANDS = (
    "cancel",
    "cancel it",
    "cancel booking",
    "cancel appointment",
    "cancel the booking",
    "cancel the appointment",
    "stop",
    "quit",
    "exit",
    "abort",
    "never mind",
    "nevermind",
    "start over",
)

PLATFORM_ALIASES = {
    PLATFORM_ONLINE: ("online", "virtual", "video", "video call", "remote", "teleconsult", "zoom"),
    PLATFORM_IN_PERSON: ("in person", "inperson", "person", "face to face", "onsite", "clinic", "office", "visit"),
}


def normalize_text(text: str) -> str:
    normalized = (text or "").lower().replace("'", "")
    normalized = re.sub(r"[^a-z0-9\s]", " ", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    return normalized


def is_affirmative(text: str) -> bool:
    normalized = normalize_text(text)
    if not normalized:
        return False
    if any(normalized.startswith(phrase) for phrase in AFFIRMATIVE_PHRASES):
        return True
    return normalized.split()[0] in AFFIRMATIVE_WORDS


def is_negative(text: str) -> bool:
    normalized = normalize_text(text)
    if not normalized:
        return False
    if any(normalized.startswith(phrase) for phrase in NEGATIVE_PHRASES):
        return True
    return normalized.split()[0] in NEGATIVE_WORDS


def is_cancel_command(text: str) -> bool:
    """
    Only whole-utterance commands count, so symptom descriptions such as
    "I can't stop throwing up" are never read as a cancellation.
    """
    return normalize_text(text) in CANCEL_COMMANDS


def resolve_platform(text: str, threshold: float = 0.8) -> str | None:
    """
    Map a free-text answer to "Online" or "In Person".
    Exact alias hits win; otherwise a fuzzy match over word windows catches typos like "onlin".
    """
    normalized = normalize_text(text)
    if not normalized:
        return None

    padded = f" {normalized} "
    for platform, aliases in PLATFORM_ALIASES.items():
        if any(f" {alias} " in padded for alias in aliases):
            return platform

    best: tuple[float, str | None] = (0.0, None)
    for platform, aliases in PLATFORM_ALIASES.items():
        for alias in aliases:
            score = _best_window_ratio(alias, normalized)
            if score > best[0]:
                best = (score, platform)
    if best[0] >= threshold:
        return best[1]
    return None


def _best_window_ratio(alias: str, text: str) -> float:
    text_words = text.split()
    window = len(alias.split())
    if len(text_words) <= window:
        return SequenceMatcher(None, alias, text).ratio()

    best = 0.0
    for i in range(len(text_words) - window + 1):
        chunk = " ".join(text_words[i : i + window])
        best = max(best, SequenceMatcher(None, alias, chunk).ratio())
    return best
