"""
Tests for the periodic job wiring.
"""

from __future__ import annotations

from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from booking_core.application.use_cases.reminders import ReminderUseCase
from booking_core.infrastructure.scheduler.jobs import (
    FOLLOW_UP_JOB_ID,
    REMINDER_JOB_ID,
    RESET_FLAGS_JOB_ID,
    _run_reminders,
    build_scheduler,
)

from tests.factories import NOW


class ExplodingReminders:
    def send_upcoming_reminders(self, hours_ahead):
        raise RuntimeError("store offline")


def test_scheduler_registers_three_jobs(store, catalog, notifier):
    reminders = ReminderUseCase(store=store, catalog=catalog, notifier=notifier, clock=lambda: NOW)

    scheduler = build_scheduler(reminders, hours_ahead=12, interval_minutes=15, timezone="UTC")

    jobs = {job.id: job for job in scheduler.get_jobs()}
    assert set(jobs) == {REMINDER_JOB_ID, FOLLOW_UP_JOB_ID, RESET_FLAGS_JOB_ID}
    assert isinstance(jobs[REMINDER_JOB_ID].trigger, IntervalTrigger)
    assert jobs[REMINDER_JOB_ID].args == (reminders, 12)
    assert isinstance(jobs[FOLLOW_UP_JOB_ID].trigger, CronTrigger)
    assert isinstance(jobs[RESET_FLAGS_JOB_ID].trigger, CronTrigger)
    assert scheduler.running is False


def test_job_failure_is_logged_not_raised(caplog):
    _run_reminders(ExplodingReminders(), 24)

    assert "Reminder job failed" in caplog.text
