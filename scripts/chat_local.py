#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user_id for the session
- Sends your typed messages through the same HandleUtteranceUseCase the API uses
- Prints the stage, action and failure kind of each turn, then the reply text
"""

from __future__ import annotations

import os
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from carebook.wiring.dependencies import get_container  # noqa: E402


def _print_header(user_id: str) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (new user), /reset (drop session), /history, /bookings, /quit, /help")
    print("-" * 60)


def main() -> None:
    user_id = os.getenv("CHAT_USER_ID", "local_user_1")
    container = get_container()
    use_case = container["use_case"]
    bookings = container["bookings"]
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new      -> start over as a new user_id")
            print("  /reset    -> discard the active booking session")
            print("  /history  -> show last 10 transcript entries")
            print("  /bookings -> list this user's booking requests")
            print("  /quit     -> exit")
            continue
        if cmd == "/new":
            user_id = f"local_user_{int(time.time())}"
            print(f"New user_id: {user_id}")
            continue
        if cmd == "/reset":
            print("Session discarded." if use_case.reset(user_id) else "No active session.")
            continue
        if cmd == "/history":
            print("\n--- Transcript (last 10) ---")
            for entry in use_case.transcript(user_id, limit=10):
                print(f"{entry.speaker}: {entry.text}")
            continue
        if cmd == "/bookings":
            for booking in bookings.list_bookings(requester_id=user_id):
                print(f"{booking.date.isoformat()} {booking.slot} {booking.platform} [{booking.status.value}]")
            continue

        result = use_case.handle(user_id, user_text)

        print("\n--- Turn ---")
        print(f"stage: {result.stage.value}")
        print(f"action: {result.action}")
        if result.failure is not None:
            print(f"failure: {result.failure.value}")

        print("\n--- Reply ---")
        print(result.message.strip() or "(empty reply)")
        print("-" * 60)


if __name__ == "__main__":
    main()
