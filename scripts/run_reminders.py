#!/usr/bin/env python3
from __future__ import annotations

"""
Run the booking reminder job once, outside the HTTP server.

Usage:
  python3 scripts/run_reminders.py
  python3 scripts/run_reminders.py --now "2024-06-10 13:00" --delay 0

Suitable for cron. Uses the same wiring as the API, so Supabase and Brevo
credentials come from the environment or .env.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from app.core.config import settings
from app.wiring.dependencies import get_booking_reminders_use_case


def main() -> None:
    parser = argparse.ArgumentParser(description="Send due 24-hour and 1-hour booking reminders")
    parser.add_argument("--now", default=None, help="Studio-local time to evaluate against, e.g. '2024-06-10 13:00'")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between sends (overrides REMINDER_SEND_DELAY_SECONDS)")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if args.delay is not None:
        settings.REMINDER_SEND_DELAY_SECONDS = args.delay
    now = datetime.strptime(args.now, "%Y-%m-%d %H:%M") if args.now else None

    result = get_booking_reminders_use_case().run(now=now)
    print(json.dumps(result.as_payload(), indent=2))
    if result.errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
