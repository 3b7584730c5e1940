"""
Tests for durable booking and promo code persistence.
"""

from __future__ import annotations

import json
import tempfile
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest

from booking_core.application.exceptions import NotFoundError, OverlapConstraintError
from booking_core.domain.entities.booking import BookingStatus
from booking_core.infrastructure.pricing.promo_codes import JsonPromoCodeRegistry
from booking_core.infrastructure.store import json_store
from booking_core.infrastructure.store.json_store import JsonBookingStore

from tests.factories import MASSAGE_ID, MONDAY, NOW, at, make_booking


def test_json_store_persistence():
    """Bookings written by one store instance are visible to the next."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir, clock=lambda: NOW)
        created = store.add(
            make_booking(
                MASSAGE_ID,
                at(MONDAY, 10),
                at(MONDAY, 11),
                notes="Window seat",
                customer_name="Ana",
                customer_email="ana@example.com",
            )
        )
        store.save(replace(created, status=BookingStatus.CONFIRMED))

        reloaded = JsonBookingStore(data_dir=tmpdir, clock=lambda: NOW).get(created.id)

        assert reloaded is not None
        assert reloaded.status == BookingStatus.CONFIRMED
        assert reloaded.start_time == at(MONDAY, 10)
        assert reloaded.end_time == at(MONDAY, 11)
        assert reloaded.booking_date == MONDAY
        assert reloaded.notes == "Window seat"
        assert reloaded.customer_email == "ana@example.com"
        assert reloaded.created_at == NOW
        assert reloaded.updated_at == NOW


def test_ids_continue_after_restart():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        first = store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)))

        restarted = JsonBookingStore(data_dir=tmpdir)
        second = restarted.add(make_booking(MASSAGE_ID, at(MONDAY, 11), at(MONDAY, 12)))

        assert second.id == first.id + 1


def test_file_layout_and_no_temp_file_left():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)))

        path = Path(tmpdir) / "bookings.json"
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["version"] == 1
        assert data["next_id"] == 2
        assert data["bookings"][0]["start_time"] == "2026-03-02T09:00:00"
        assert data["bookings"][0]["status"] == "PENDING"
        assert not (Path(tmpdir) / "bookings.json.tmp").exists()


def test_reminder_claim_is_persisted():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        booking = store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10), BookingStatus.CONFIRMED))

        assert store.claim_reminder(booking.id) is True
        assert store.claim_reminder(booking.id) is False

        restarted = JsonBookingStore(data_dir=tmpdir)
        assert restarted.is_reminder_sent(booking.id) is True
        assert restarted.claim_reminder(booking.id) is False


def test_exclusion_constraint_rejects_overlap():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)))

        with pytest.raises(OverlapConstraintError):
            store.add(make_booking(MASSAGE_ID, at(MONDAY, 9, 30), at(MONDAY, 10, 30), BookingStatus.CONFIRMED))

        # A cancelled booking never takes part in the constraint.
        store.add(make_booking(MASSAGE_ID, at(MONDAY, 9, 30), at(MONDAY, 10, 30), BookingStatus.CANCELLED))
        assert len(JsonBookingStore(data_dir=tmpdir).list_all()) == 2


def test_failed_write_leaves_state_untouched(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)
        store.add(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10)))

        def broken_dump(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(json_store.json, "dump", broken_dump)

        with pytest.raises(OSError):
            store.add(make_booking(MASSAGE_ID, at(MONDAY, 11), at(MONDAY, 12)))

        assert len(store.list_all()) == 1
        assert not (Path(tmpdir) / "bookings.json.tmp").exists()


def test_save_unknown_booking_raises():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonBookingStore(data_dir=tmpdir)

        with pytest.raises(NotFoundError):
            store.save(make_booking(MASSAGE_ID, at(MONDAY, 9), at(MONDAY, 10), id=12))


def test_promo_registry_persists_registrations():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "promo_codes.json")
        registry = JsonPromoCodeRegistry(path)
        assert registry.get_rate("welcome10") == Decimal("0.10")

        registry.register("spring25", Decimal("0.25"))

        reloaded = JsonPromoCodeRegistry(path)
        assert reloaded.get_rate("SPRING25") == Decimal("0.25")
        assert reloaded.contains("  Spring25 ") is True
        assert json.loads(Path(path).read_text(encoding="utf-8"))["codes"]["SPRING25"] == "0.25"
