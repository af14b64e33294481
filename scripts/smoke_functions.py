#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from datetime import date, timedelta
from typing import Any

import httpx
from httpx import ConnectError


def build_booking(client_email: str) -> dict[str, Any]:
    tomorrow = date.today() + timedelta(days=1)
    return {
        "id": "smoke-booking",
        "service_name": "Gel Manicure",
        "service_price": 45,
        "appointment_date": tomorrow.isoformat(),
        "appointment_time": "2:00 PM",
        "client_name": "Smoke Test",
        "client_email": client_email,
        "client_phone": "555-0100",
        "confirmation_number": "FL-SMOKE",
    }


def build_contact_message(email: str) -> dict[str, Any]:
    return {
        "first_name": "Smoke",
        "last_name": "Test",
        "email": email,
        "inquiry_type": "General",
        "subject": "Smoke test",
        "message": "Checking the contact notification function.",
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Exercise the studio function endpoints")
    parser.add_argument("--base-url", default="http://127.0.0.1:8001")
    parser.add_argument("--function", choices=["booking-email", "contact", "reminders"], default="booking-email")
    parser.add_argument("--type", default="confirmation", help="Booking email type")
    parser.add_argument("--email", default="test@example.com", help="Recipient used for client and admin addresses")
    parser.add_argument("--anon-key", default="", help="Bearer token, when calling a deployed function")
    args = parser.parse_args()

    headers = {"Content-Type": "application/json"}
    if args.anon_key:
        headers["Authorization"] = f"Bearer {args.anon_key}"

    if args.function == "booking-email":
        url = f"{args.base_url}/functions/v1/send-booking-email"
        payload: dict[str, Any] | None = {"type": args.type, "booking": build_booking(args.email), "adminEmail": args.email}
    elif args.function == "contact":
        url = f"{args.base_url}/functions/v1/send-contact-notification"
        payload = {"message": build_contact_message(args.email), "adminEmail": args.email}
    else:
        url = f"{args.base_url}/functions/v1/booking-reminders"
        payload = None

    try:
        if payload is None:
            resp = httpx.post(url, headers=headers, timeout=60.0)
        else:
            resp = httpx.post(url, content=json.dumps(payload).encode("utf-8"), headers=headers, timeout=60.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn app.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
