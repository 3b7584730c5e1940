from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import Any

from booking_core.domain.entities.booking import Booking, BookingStatus
from booking_core.infrastructure.store.memory_store import MemoryBookingStore

SCHEMA_VERSION = 1


class JsonBookingStore(MemoryBookingStore):
    """
    Durable booking store backed by a single JSON file.

    Every mutation (including reminder claims) is written before it becomes visible,
    via a temp file and an atomic rename, so a restarted process sees the same
    reminder_sent flags and never resends.
    """

    def __init__(
        self,
        data_dir: str = "./data",
        filename: str = "bookings.json",
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(clock=clock)
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / filename
        self._logger = logging.getLogger(__name__)
        self._bookings, self._next_id = self._load()

    def _load(self) -> tuple[dict[int, Booking], int]:
        """Load bookings from the JSON file, return empty state if missing."""
        if not self._file_path.exists():
            return {}, 1

        with open(self._file_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        bookings = {}
        for item in data.get("bookings", []):
            booking = self._deserialize_booking(item)
            bookings[booking.id] = booking
        next_id = data.get("next_id") or (max(bookings, default=0) + 1)
        self._logger.info("Booking store loaded", extra={"count": len(bookings), "path": str(self._file_path)})
        return bookings, next_id

    def _persist(self, bookings: dict[int, Booking], next_id: int) -> None:
        """Save all bookings to the JSON file atomically."""
        data = {
            "version": SCHEMA_VERSION,
            "next_id": next_id,
            "bookings": [self._serialize_booking(b) for b in bookings.values()],
        }
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    @staticmethod
    def _serialize_booking(booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "service_id": booking.service_id,
            "user_id": booking.user_id,
            "booking_date": booking.booking_date.isoformat(),
            "start_time": booking.start_time.isoformat(),
            "end_time": booking.end_time.isoformat(),
            "status": booking.status.value,
            "notes": booking.notes,
            "reminder_sent": booking.reminder_sent,
            "customer_name": booking.customer_name,
            "customer_email": booking.customer_email,
            "customer_phone": booking.customer_phone,
            "created_at": booking.created_at.isoformat() if booking.created_at else None,
            "updated_at": booking.updated_at.isoformat() if booking.updated_at else None,
        }

    @staticmethod
    def _deserialize_booking(data: dict[str, Any]) -> Booking:
        start_time = datetime.fromisoformat(data["start_time"])
        return Booking(
            id=int(data["id"]),
            service_id=int(data["service_id"]),
            user_id=data.get("user_id"),
            booking_date=date.fromisoformat(data["booking_date"]) if data.get("booking_date") else start_time.date(),
            start_time=start_time,
            end_time=datetime.fromisoformat(data["end_time"]),
            status=BookingStatus(data.get("status", BookingStatus.PENDING.value)),
            notes=data.get("notes"),
            reminder_sent=bool(data.get("reminder_sent", False)),
            customer_name=data.get("customer_name"),
            customer_email=data.get("customer_email"),
            customer_phone=data.get("customer_phone"),
            created_at=_parse_optional_datetime(data.get("created_at")),
            updated_at=_parse_optional_datetime(data.get("updated_at")),
        )


def _parse_optional_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
