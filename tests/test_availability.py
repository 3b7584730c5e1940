"""
Tests for slot generation and conflict checks.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from booking_core.application.exceptions import NotFoundError, ValidationError
from booking_core.domain.entities.booking import BookingStatus

from tests.factories import FULL_DAY_ID, MASSAGE_ID, MONDAY, SATURDAY, at, make_booking


def test_empty_day_slots_step_by_duration_plus_buffer(availability):
    slots = availability.get_available_slots(MASSAGE_ID, MONDAY)

    starts = [s.start_time for s in slots]
    assert starts == [
        at(MONDAY, 9, 0),
        at(MONDAY, 10, 15),
        at(MONDAY, 11, 30),
        at(MONDAY, 12, 45),
        at(MONDAY, 14, 0),
        at(MONDAY, 15, 15),
    ]
    assert all(s.end_time - s.start_time == timedelta(minutes=60) for s in slots)
    assert all(s.duration_minutes == 60 for s in slots)
    assert slots[-1].end_time <= at(MONDAY, 17)


def test_slot_ending_exactly_at_close_is_included(availability):
    slots = availability.get_available_slots(FULL_DAY_ID, MONDAY)

    assert len(slots) == 1
    assert slots[0].start_time == at(MONDAY, 9)
    assert slots[0].end_time == at(MONDAY, 17)


def test_slots_skip_existing_booking_and_resume_after_buffer(availability, store):
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 11)))

    slots = availability.get_available_slots(MASSAGE_ID, MONDAY)
    ranges = [(s.start_time, s.end_time) for s in slots]

    assert (at(MONDAY, 9), at(MONDAY, 10)) in ranges
    assert (at(MONDAY, 11, 15), at(MONDAY, 12, 15)) in ranges
    for start, end in ranges:
        assert not (start < at(MONDAY, 11) and end > at(MONDAY, 10))
    assert [s.start_time for s in slots] == sorted(s.start_time for s in slots)


def test_cancelled_and_completed_bookings_do_not_block(availability, store):
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10), BookingStatus.CANCELLED))
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 10, 15), at(MONDAY, 11, 15), BookingStatus.COMPLETED))

    slots = availability.get_available_slots(MASSAGE_ID, MONDAY)

    assert slots[0].start_time == at(MONDAY, 9)
    assert slots[1].start_time == at(MONDAY, 10, 15)


def test_bookings_of_other_services_do_not_block(availability, store):
    store.add(make_booking(FULL_DAY_ID, at(MONDAY, 9), at(MONDAY, 17)))

    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 11)) is True
    assert len(availability.get_available_slots(MASSAGE_ID, MONDAY)) == 6


def test_slots_for_unknown_service_raise(availability):
    with pytest.raises(NotFoundError):
        availability.get_available_slots(999, MONDAY)


def test_empty_store_window_inside_business_hours_is_available(availability):
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)) is True
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 16), at(MONDAY, 17)) is True
    assert availability.is_slot_available(MASSAGE_ID, at(SATURDAY, 12), at(SATURDAY, 13)) is True


def test_window_partly_outside_business_hours_is_unavailable(availability):
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 8, 30), at(MONDAY, 9, 30)) is False
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 16, 30), at(MONDAY, 17, 30)) is False
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 16), at(MONDAY, 10) + timedelta(days=1)) is False


def test_inverted_or_empty_range_raises(availability):
    with pytest.raises(ValidationError):
        availability.is_slot_available(MASSAGE_ID, at(MONDAY, 11), at(MONDAY, 10))
    with pytest.raises(ValidationError):
        availability.is_slot_available(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 10))


def test_touching_endpoints_do_not_conflict(availability, store):
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 11)))

    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 11), at(MONDAY, 12)) is True
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)) is True
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 10, 59), at(MONDAY, 12)) is False
    assert availability.is_slot_available(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10, 1)) is False


def test_excluded_booking_is_ignored(availability, store):
    existing = store.add(make_booking(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 11)))

    assert availability.is_slot_available(
        MASSAGE_ID, at(MONDAY, 10, 30), at(MONDAY, 11, 30), exclude_booking_id=existing.id
    ) is True


def test_next_available_slot_skips_weekend(availability, store):
    # Saturday start: first candidate is the following Monday.
    slot = availability.get_next_available_slot(MASSAGE_ID, SATURDAY)

    assert slot is not None
    assert slot.start_time == at(SATURDAY + timedelta(days=2), 9)


def test_next_available_slot_moves_past_full_days(availability, store):
    store.add(make_booking(FULL_DAY_ID, at(MONDAY, 9), at(MONDAY, 17)))

    slot = availability.get_next_available_slot(FULL_DAY_ID, MONDAY)

    assert slot.start_time == at(MONDAY + timedelta(days=1), 9)


def test_next_available_slot_none_when_horizon_fully_booked(availability, store):
    for offset in range(30):
        day = MONDAY + timedelta(days=offset)
        if day.weekday() < 5:
            store.add(make_booking(FULL_DAY_ID, at(day, 9), at(day, 17), BookingStatus.CONFIRMED))

    assert availability.get_next_available_slot(FULL_DAY_ID, MONDAY) is None


def test_next_available_slot_unknown_service_raises(availability):
    with pytest.raises(NotFoundError):
        availability.get_next_available_slot(999, MONDAY)
