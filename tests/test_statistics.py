"""
Tests for booking statistics.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from booking_core.application.use_cases.statistics import StatisticsUseCase, percentage
from booking_core.domain.entities.booking import BookingStatus

from tests.factories import FULL_DAY_ID, MASSAGE_ID, MONDAY, SATURDAY, at, make_booking


@pytest.fixture
def stats(store, catalog) -> StatisticsUseCase:
    return StatisticsUseCase(store=store, catalog=catalog)


@pytest.fixture
def seeded(store):
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10), BookingStatus.PENDING))
    store.add(make_booking(MASSAGE_ID, at(MONDAY, 10), at(MONDAY, 11), BookingStatus.COMPLETED))
    store.add(make_booking(MASSAGE_ID, datetime(2026, 3, 3, 9), datetime(2026, 3, 3, 10), BookingStatus.CANCELLED))
    store.add(make_booking(FULL_DAY_ID, at(SATURDAY, 9), at(SATURDAY, 17), BookingStatus.CONFIRMED))
    store.add(make_booking(77, datetime(2026, 2, 10, 9), datetime(2026, 2, 10, 9, 30), BookingStatus.NO_SHOW))
    return store


def test_overall_stats(stats, seeded):
    result = stats.get_overall_stats()

    assert result.total_bookings == 5
    assert result.pending == 1
    assert result.confirmed == 1
    assert result.completed == 1
    assert result.cancelled == 1
    assert result.no_show == 1
    assert result.cancellation_rate == 20.0
    assert result.completion_rate == 20.0


def test_overall_stats_on_empty_store(stats):
    result = stats.get_overall_stats()

    assert result.total_bookings == 0
    assert result.cancellation_rate == 0.0
    assert result.completion_rate == 0.0


def test_count_by_status_lists_every_status(stats, seeded):
    assert stats.get_booking_count_by_status() == {
        "PENDING": 1,
        "CONFIRMED": 1,
        "CANCELLED": 1,
        "COMPLETED": 1,
        "NO_SHOW": 1,
    }


def test_bookings_by_day_of_week(stats, seeded):
    result = stats.get_bookings_by_day_of_week()

    assert list(result) == ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"]
    assert result["MONDAY"] == 2
    assert result["TUESDAY"] == 2
    assert result["SATURDAY"] == 1
    assert result["SUNDAY"] == 0


def test_monthly_trend_oldest_first(stats, seeded):
    result = stats.get_monthly_booking_trend(3, today=date(2026, 3, 15))

    assert list(result.items()) == [("JAN 2026", 0), ("FEB 2026", 1), ("MAR 2026", 4)]


def test_monthly_trend_crosses_year_boundary(stats):
    result = stats.get_monthly_booking_trend(3, today=date(2026, 1, 10))

    assert list(result) == ["NOV 2025", "DEC 2025", "JAN 2026"]


def test_top_services_ranked_with_fallback_name(stats, seeded):
    top = stats.get_top_services(3)

    assert [(t.service_id, t.service_name, t.booking_count) for t in top] == [
        (MASSAGE_ID, "Massage", 3),
        (FULL_DAY_ID, "Workshop", 1),
        (77, "Service 77", 1),
    ]
    assert len(stats.get_top_services(1)) == 1


def test_average_duration(stats, seeded):
    assert stats.get_average_booking_duration() == 138.0


def test_average_duration_on_empty_store(stats):
    assert stats.get_average_booking_duration() == 0.0


def test_percentage_rounds_to_two_places():
    assert percentage(1, 3) == 33.33
    assert percentage(2, 3) == 66.67
    assert percentage(5, 0) == 0.0


def test_monthly_trend_defaults_to_business_clock(store, catalog, seeded):
    stats = StatisticsUseCase(store=store, catalog=catalog, clock=lambda: datetime(2026, 2, 28, 23, 30))

    assert list(stats.get_monthly_booking_trend(2).items()) == [("JAN 2026", 0), ("FEB 2026", 1)]
