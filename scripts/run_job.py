#!/usr/bin/env python3
"""
Run one periodic job body once, for cron or another external scheduler.

Usage:
  python3 scripts/run_job.py reminders [--hours-ahead 24]
  python3 scripts/run_job.py follow-ups
  python3 scripts/run_job.py reset-flags

Uses the same settings as the API (STORE_PROVIDER=json so state is shared on disk).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from booking_core.core.config import settings
from booking_core.wiring.dependencies import get_reminder_use_case


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("job", choices=["reminders", "follow-ups", "reset-flags"])
    parser.add_argument("--hours-ahead", type=int, default=settings.REMINDER_HOURS_AHEAD)
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    reminders = get_reminder_use_case()

    if args.job == "reminders":
        count = reminders.send_upcoming_reminders(args.hours_ahead)
    elif args.job == "follow-ups":
        count = reminders.send_cancellation_follow_ups()
    else:
        count = reminders.reset_old_reminder_flags()

    print(f"{args.job}: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
