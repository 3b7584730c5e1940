from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime

from booking_core.application.exceptions import NotFoundError, OverlapConstraintError
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.domain.entities.booking import Booking, BookingStatus


class MemoryBookingStore(BookingStorePort):
    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._bookings: dict[int, Booking] = {}
        self._next_id = 1
        self._clock = clock
        self._lock = threading.RLock()  # guards _bookings / _next_id
        self._service_locks: dict[int, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards _service_locks

    def service_lock(self, service_id: int) -> threading.Lock:
        """Get or create the lock for a service_id."""
        with self._lock_lock:
            if service_id not in self._service_locks:
                self._service_locks[service_id] = threading.Lock()
            return self._service_locks[service_id]

    def add(self, booking: Booking) -> Booking:
        with self._lock:
            self._check_exclusion(booking, exclude_booking_id=None)
            now = self._clock()
            created = replace(booking, id=self._next_id, created_at=now, updated_at=now)
            self._apply({**self._bookings, created.id: created}, self._next_id + 1)
            return created

    def save(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id is None or booking.id not in self._bookings:
                raise NotFoundError(f"Booking not found: {booking.id}")
            self._check_exclusion(booking, exclude_booking_id=booking.id)
            saved = replace(booking, updated_at=self._clock())
            self._apply({**self._bookings, saved.id: saved})
            return saved

    def get(self, booking_id: int) -> Booking | None:
        with self._lock:
            return self._bookings.get(booking_id)

    def list_all(self) -> list[Booking]:
        with self._lock:
            return list(self._bookings.values())

    def find_overlapping(
        self,
        service_id: int,
        start: datetime,
        end: datetime,
        statuses: Iterable[BookingStatus],
        exclude_booking_id: int | None = None,
    ) -> list[Booking]:
        wanted = set(statuses)
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.service_id == service_id
                and b.status in wanted
                and b.id != exclude_booking_id
                and b.overlaps(start, end)
            ]

    def find_starting_between(
        self,
        start: datetime,
        end: datetime,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        with self._lock:
            found = [
                b
                for b in self._bookings.values()
                if start <= b.start_time <= end and (status is None or b.status == status)
            ]
        return sorted(found, key=lambda b: b.start_time)

    def find_by_status_updated_between(
        self,
        status: BookingStatus,
        start: datetime,
        end: datetime,
    ) -> list[Booking]:
        with self._lock:
            return [
                b
                for b in self._bookings.values()
                if b.status == status and b.updated_at is not None and start <= b.updated_at <= end
            ]

    def claim_reminder(self, booking_id: int) -> bool:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None or booking.reminder_sent or booking.status != BookingStatus.CONFIRMED:
                return False
            self._apply({**self._bookings, booking_id: replace(booking, reminder_sent=True)})
            return True

    def release_reminder(self, booking_id: int) -> None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None or not booking.reminder_sent:
                return
            self._apply({**self._bookings, booking_id: replace(booking, reminder_sent=False)})

    def is_reminder_sent(self, booking_id: int) -> bool:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return bool(booking and booking.reminder_sent)

    def reset_reminder_flags_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            stale = [b for b in self._bookings.values() if b.reminder_sent and b.start_time < cutoff]
            if stale:
                updated = dict(self._bookings)
                for booking in stale:
                    updated[booking.id] = replace(booking, reminder_sent=False)
                self._apply(updated)
            return len(stale)

    def _check_exclusion(self, booking: Booking, exclude_booking_id: int | None) -> None:
        if not booking.status.is_blocking:
            return
        for other in self._bookings.values():
            if (
                other.id != exclude_booking_id
                and other.service_id == booking.service_id
                and other.status.is_blocking
                and other.overlaps(booking.start_time, booking.end_time)
            ):
                raise OverlapConstraintError(
                    f"Booking overlaps booking {other.id} for service {booking.service_id}"
                )

    def _apply(self, bookings: dict[int, Booking], next_id: int | None = None) -> None:
        """Persist first, then swap in the new state, so a failed write leaves memory untouched."""
        next_id = self._next_id if next_id is None else next_id
        self._persist(bookings, next_id)
        self._bookings = bookings
        self._next_id = next_id

    def _persist(self, bookings: dict[int, Booking], next_id: int) -> None:
        return None
