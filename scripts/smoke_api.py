#!/usr/bin/env python3
"""Smoke-test a running Carebook server end to end over HTTP."""

import sys
import time

import httpx


BASE_URL = "http://127.0.0.1:8001"

CONVERSATION = [
    "I have lower back pain and I'm 30 weeks pregnant",
    "yes",
    "next monday",
    "8 AM",
    "online",
]


def send(user_id: str, text: str) -> dict | None:
    """Post one utterance and print the turn."""
    try:
        response = httpx.post(
            f"{BASE_URL}/api/v1/chat/{user_id}/messages",
            json={"text": text},
            timeout=30.0,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        print(f"❌ HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")
        return None

    data = response.json()
    print(f"\n> {text}")
    print(f"  stage={data['stage']} action={data['action']} failure={data['failure']}")
    for line in data["reply"].splitlines():
        print(f"  {line}")
    return data


def run_conversation(user_id: str) -> bool:
    print("=" * 60)
    print(f"Booking conversation as {user_id}")
    print("=" * 60)

    for text in CONVERSATION:
        data = send(user_id, text)
        if data is None:
            return False
        if data["stage"] == "idle":
            print("⚠️  Conversation ended early")
            return False

    data = send(user_id, "yes")
    if data is None or data["action"] != "booked":
        print("⚠️  Slot may already be taken, check the reply above")
        return False
    print(f"\n✅ Booked: {data['booking']['date']} {data['booking']['slot']} [{data['booking']['status']}]")
    return True


def show_bookings(user_id: str) -> None:
    print("\n" + "=" * 60)
    print(f"GET /api/v1/users/{user_id}/bookings")
    print("=" * 60)
    response = httpx.get(f"{BASE_URL}/api/v1/users/{user_id}/bookings", timeout=10.0)
    if response.status_code != 200:
        print(f"❌ HTTP Error: {response.status_code}")
        return
    for booking in response.json():
        print(f"  {booking['date']} {booking['slot']} {booking['platform']} [{booking['status']}]")


def main():
    print("\n🚀 Testing Carebook API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("✅ Server is running\n")
    except httpx.HTTPError:
        print("❌ Server is not running!")
        print("   Please start it with: uvicorn carebook.main:app --reload --port 8001")
        sys.exit(1)

    user_id = f"smoke_{int(time.time())}"
    run_conversation(user_id)
    show_bookings(user_id)

    print("\n" + "=" * 60)
    print("✅ Smoke run complete!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
