from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

DAY_NUMBERS = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "tues": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}

MONTH_NUMBERS = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sept": 9,
    "sep": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}


AMBIGUOUS_MONTH_WORDS = ("may", "mar")
_TRAILING_WORD = re.compile(r"\s+(?!at\b|please\b)[a-z]")


def _alternation(words: dict[str, int]) -> str:
    # longest first so "thursday" wins over "thu"
    return "|".join(sorted(words, key=len, reverse=True))


DateExtractor = Callable[["re.Match[str]", date], "date | None"]


def _today(match: re.Match[str], today: date) -> date | None:
    return today


def _tomorrow(match: re.Match[str], today: date) -> date | None:
    return today + timedelta(days=1)


def _this_weekday(match: re.Match[str], today: date) -> date | None:
    days_ahead = (DAY_NUMBERS[match.group(1)] - today.weekday()) % 7
    return today + timedelta(days=days_ahead)


def _next_weekday(match: re.Match[str], today: date) -> date | None:
    days_ahead = (DAY_NUMBERS[match.group(1)] - today.weekday()) % 7
    if days_ahead == 0:
        days_ahead = 7
    return today + timedelta(days=days_ahead)


def _month_day(match: re.Match[str], today: date) -> date | None:
    word, ordinal, year_text = match.group(1), match.group(3), match.group(4)
    # "may 2 people": a bare "may"/"mar" with more words after the day is not a date
    if word in AMBIGUOUS_MONTH_WORDS and not (ordinal or year_text):
        if _TRAILING_WORD.match(match.string, match.end()):
            return None
    month = MONTH_NUMBERS[word]
    day = int(match.group(2))
    year = int(year_text) if year_text else today.year
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _iso(match: re.Match[str], today: date) -> date | None:
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


# Evaluated in order; the first rule that yields a date wins.
DATE_RULES: list[tuple[re.Pattern[str], DateExtractor]] = [
    (re.compile(r"\btoday\b"), _today),
    (re.compile(r"\b(?:tomorrow|next\s+day)\b"), _tomorrow),
    (re.compile(rf"\bthis\s+({_alternation(DAY_NUMBERS)})\b"), _this_weekday),
    (re.compile(rf"\bnext\s+({_alternation(DAY_NUMBERS)})\b"), _next_weekday),
    (
        re.compile(
            rf"\b({_alternation(MONTH_NUMBERS)})\.?\s+(\d{{1,2}})(st|nd|rd|th)?\b(?:,?\s*(\d{{4}})\b)?"
        ),
        _month_day,
    ),
    (re.compile(r"(\d{4})-(\d{2})-(\d{2})"), _iso),
]


def civil_now(timezone: ZoneInfo) -> datetime:
    return datetime.now(timezone)


def parse_date(text: str, now: datetime | date) -> date | None:
    """Parse a date from free text relative to `now` (already in the civil zone). Returns None if no rule matches."""
    today = now.date() if isinstance(now, datetime) else now
    normalized = (text or "").lower().strip()
    if not normalized:
        return None

    for pattern, extract in DATE_RULES:
        match = pattern.search(normalized)
        if not match:
            continue
        result = extract(match, today)
        if result is not None:
            return result
    return None


# A number glued to ".digit" or followed by another number ("8.30", "8 30") is not a time.
_TIME_PATTERN = re.compile(
    r"(?<![\d.:\-–])(\d{1,2})(?::(\d{2}))?(?![.\d:]|\s+\d)(?:\s*([ap])\.?\s*m\b\.?)?"
)
_RANGE_MARKER = re.compile(r"\s+to\s+|\s*[-–]\s*")
_RANGE_TAIL = re.compile(r"\s*(?:[-–]|to\b)\s*\d")


def slot_start(label: str) -> str:
    """Strip a trailing range from a slot label: "8:00 AM to 9:00 AM" -> "8:00 AM"."""
    return _RANGE_MARKER.split((label or "").strip(), maxsplit=1)[0].strip()


def parse_time_of_day(text: str) -> str | None:
    """
    Parse a time of day into canonical "H:MM AM/PM" form.

    Without a meridiem, hours 12-23 are read as a 24-hour clock and 0-11 are
    taken literally as morning hours ("8" -> "8:00 AM", "20" -> "8:00 PM").
    A range whose start has no meridiem ("1-2 pm") is ambiguous and yields None,
    as does anything else that cannot be read.
    """
    normalized = (text or "").lower().strip()
    if not normalized:
        return None
    if re.search(r"\bnoon\b", normalized):
        return "12:00 PM"
    if re.search(r"\bmidnight\b", normalized):
        return "12:00 AM"

    match = _TIME_PATTERN.search(normalized)
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) else 0
    meridiem = match.group(3)
    if minute > 59:
        return None

    if meridiem:
        if not 1 <= hour <= 12:
            return None
        suffix = "AM" if meridiem == "a" else "PM"
    else:
        if hour > 23 or _RANGE_TAIL.match(normalized, match.end()):
            return None
        suffix = "PM" if hour >= 12 else "AM"

    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def slot_start_canonical(label: str) -> str | None:
    """Canonical start time of a slot label: "8:00 AM to 9:00 AM" -> "8:00 AM"."""
    return parse_time_of_day(slot_start(label))


def slot_start_time(label: str) -> time | None:
    """24-hour start time of a slot label, or None if the label has no readable time."""
    canonical = slot_start_canonical(label)
    if canonical is None:
        return None
    return datetime.strptime(canonical, "%I:%M %p").time()


def match_slot(text: str, slots: list[str] | tuple[str, ...]) -> str | None:
    """Find the slot whose start time equals the time in `text`. Returns the slot label verbatim."""
    wanted = parse_time_of_day(text)
    if wanted is None:
        return None
    for slot in slots:
        if slot_start_canonical(slot) == wanted:
            return slot
    return None


def weekday_name(value: date) -> str:
    return WEEKDAY_NAMES[value.weekday()]


def format_word_date(value: date) -> str:
    """2025-04-25 -> "April 25, 2025 (Friday, Weekday)"."""
    kind = "Weekend" if value.weekday() >= 5 else "Weekday"
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year} ({weekday_name(value)}, {kind})"
