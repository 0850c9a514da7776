from __future__ import annotations

from datetime import date

from carebook.application.utils.date_parser import format_word_date
from carebook.domain.entities.booking_request import PLATFORMS, BookingRequest
from carebook.domain.entities.consultant import ConsultantSchedule

GREETING = "Hello! Tell me your symptoms, and I'll recommend a doctor."
ASK_YES_NO = "Please reply Yes or No."
TIME_HINT = 'Please enter a time like "8 PM" or "14:30".'


def offer_booking(explanation: str, consultant: ConsultantSchedule, preview: list[date]) -> str:
    return _join_blocks(
        [
            explanation.strip(),
            "Next available dates:\n" + _bullets(preview),
            f"Shall we book an appointment with {consultant.name}? (Yes/No)",
        ]
    )


def no_availability(explanation: str | None, consultant: ConsultantSchedule, lookahead_days: int) -> str:
    return _join_blocks(
        [
            (explanation or "").strip(),
            f"Sorry, {consultant.name} has no open slots in the next {lookahead_days} days. "
            "Please try again later.",
        ]
    )


def choose_date(dates: list[date] | tuple[date, ...]) -> str:
    return "Great! Choose a date:\n" + _lines(dates)


def date_not_understood(dates: list[date] | tuple[date, ...]) -> str:
    return _join_blocks(
        [
            'Sorry, I couldn\'t read that date. Try "tomorrow", "this Friday" or "May 8".',
            "Please pick from:\n" + _lines(dates),
        ]
    )


def date_unavailable(requested: date, dates: list[date] | tuple[date, ...]) -> str:
    if not dates:
        return f"Sorry, {format_word_date(requested)} isn't available and there are no other open dates right now."
    return f"Sorry, {format_word_date(requested)} isn't available.\nPlease pick from:\n" + _lines(dates)


def choose_time(on: date, slots: list[str]) -> str:
    return f"What time on {format_word_date(on)}?\nOptions: {', '.join(slots)}"


def time_not_understood(slots: list[str]) -> str:
    return f"{TIME_HINT}\nAvailable times: {', '.join(slots)}"


def time_unavailable(requested: str, slots: list[str]) -> str:
    return f"Sorry, {requested} isn't available. Available times: {', '.join(slots)}"


def ask_platform(consultant: ConsultantSchedule) -> str:
    offered = offered_platforms(consultant)
    if len(offered) == 1:
        return f"{consultant.name} only sees patients {offered[0]}. Reply {offered[0]} to continue."
    return "Online or In Person?"


def platform_not_understood(consultant: ConsultantSchedule) -> str:
    return f"Please reply {' or '.join(offered_platforms(consultant))}."


def platform_unavailable(requested: str, consultant: ConsultantSchedule) -> str:
    return f"Sorry, {consultant.name} doesn't offer {requested} consultations. Please reply {' or '.join(offered_platforms(consultant))}."


def summary(consultant: ConsultantSchedule, on: date, slot: str, platform: str) -> str:
    lines = [
        "Confirm appointment:",
        f"Consultant: {consultant.name}",
        format_word_date(on),
        f"Time: {slot}",
        f"Mode: {platform}",
    ]
    if consultant.hourly_rate:
        lines.append(f"Rate: {consultant.hourly_rate:,.2f} per hour")
    lines.append("(Yes/No)")
    return "\n".join(lines)


def booked(booking: BookingRequest, consultant: ConsultantSchedule) -> str:
    return (
        f"Your appointment request with {consultant.name} on {format_word_date(booking.date)} "
        f"at {booking.slot} ({booking.platform}) has been sent. Status: {booking.status.value}."
    )


def slot_conflict(slot: str, on: date, slots: tuple[str, ...]) -> str:
    return (
        f"Sorry, {slot} on {format_word_date(on)} was just booked by someone else.\n"
        f"Available times: {', '.join(slots)}"
    )


def date_filled_up(on: date, dates: list[date] | tuple[date, ...]) -> str:
    if not dates:
        return f"Sorry, {format_word_date(on)} just filled up and there are no other open dates right now."
    return f"Sorry, {format_word_date(on)} just filled up.\nPlease pick from:\n" + _lines(dates)


def declined() -> str:
    return "No worries, let me know if you need anything else."


def cancelled() -> str:
    return "Appointment cancelled."


def upstream_error(detail: str) -> str:
    return f"Error: {detail}"


def offered_platforms(consultant: ConsultantSchedule) -> tuple[str, ...]:
    offered = tuple(p for p in PLATFORMS if consultant.offers_platform(p))
    return offered or PLATFORMS


def _lines(dates: list[date] | tuple[date, ...]) -> str:
    return "\n".join(format_word_date(d) for d in dates)


def _bullets(dates: list[date] | tuple[date, ...]) -> str:
    return "\n".join(f"• {format_word_date(d)}" for d in dates)


def _join_blocks(blocks: list[str]) -> str:
    return "\n\n".join(block for block in blocks if block)
