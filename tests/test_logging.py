"""
Tests for the log line context formatter.
"""

from __future__ import annotations

import logging

from booking_core.main import ContextFormatter


def _format(**extra) -> str:
    record = logging.LogRecord("booking_core.test", logging.INFO, __file__, 1, "Reminder batch completed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return ContextFormatter("%(levelname)s:%(name)s:%(message)s").format(record)


def test_context_keys_are_appended():
    line = _format(count=0, failed=2, candidates=3, hours_ahead=24, subject="Booking Confirmed - Massage")

    assert line == (
        "INFO:booking_core.test:Reminder batch completed"
        " | count=0 failed=2 candidates=3 hours_ahead=24 subject=Booking Confirmed - Massage"
    )


def test_status_change_and_slot_context():
    line = _format(booking_id=4, status="CANCELLED", previous_status="PENDING", start="2026-03-02T10:00:00")

    assert "booking_id=4 status=CANCELLED previous_status=PENDING" in line
    assert "start=2026-03-02T10:00:00" in line


def test_plain_record_has_no_suffix():
    assert _format() == "INFO:booking_core.test:Reminder batch completed"
