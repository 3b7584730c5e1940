"""
Periodic jobs for the reminder coordinator using APScheduler.

Only wires triggers to the job bodies in ReminderUseCase; a single process
should run the scheduler (set SCHEDULER_ENABLED on one instance), or trigger
the /api/v1/jobs endpoints from an external scheduler instead.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from booking_core.application.use_cases.reminders import ReminderUseCase

logger = logging.getLogger(__name__)

REMINDER_JOB_ID = "send_upcoming_reminders"
FOLLOW_UP_JOB_ID = "send_cancellation_follow_ups"
RESET_FLAGS_JOB_ID = "reset_old_reminder_flags"


def build_scheduler(
    reminders: ReminderUseCase,
    hours_ahead: int = 24,
    interval_minutes: int = 30,
    timezone: str = "UTC",
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone=timezone)

    scheduler.add_job(
        _run_reminders,
        IntervalTrigger(minutes=interval_minutes),
        args=[reminders, hours_ahead],
        id=REMINDER_JOB_ID,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_job(
        _run_follow_ups,
        CronTrigger(hour=9, minute=0),
        args=[reminders],
        id=FOLLOW_UP_JOB_ID,
        max_instances=1,
        replace_existing=True,
    )
    scheduler.add_job(
        _run_reset_flags,
        CronTrigger(day_of_week="sun", hour=0, minute=0),
        args=[reminders],
        id=RESET_FLAGS_JOB_ID,
        max_instances=1,
        replace_existing=True,
    )
    logger.info(
        "Scheduler configured",
        extra={"interval_minutes": interval_minutes, "hours_ahead": hours_ahead},
    )
    return scheduler


def _run_reminders(reminders: ReminderUseCase, hours_ahead: int) -> None:
    try:
        reminders.send_upcoming_reminders(hours_ahead)
    except Exception as e:
        logger.exception("Reminder job failed", extra={"error": str(e)})


def _run_follow_ups(reminders: ReminderUseCase) -> None:
    try:
        reminders.send_cancellation_follow_ups()
    except Exception as e:
        logger.exception("Cancellation follow-up job failed", extra={"error": str(e)})


def _run_reset_flags(reminders: ReminderUseCase) -> None:
    try:
        reminders.reset_old_reminder_flags()
    except Exception as e:
        logger.exception("Reminder flag reset job failed", extra={"error": str(e)})
