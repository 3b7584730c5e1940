from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    NO_SHOW = "NO_SHOW"

    @property
    def is_blocking(self) -> bool:
        return self in BLOCKING_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


BLOCKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}


@dataclass(frozen=True)
class Booking:
    service_id: int
    user_id: int | None
    booking_date: date
    start_time: datetime
    end_time: datetime
    status: BookingStatus = BookingStatus.PENDING
    notes: str | None = None
    reminder_sent: bool = False
    id: int | None = None  # assigned by the store on insert
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Half-open overlap: [a, b) and [c, d) conflict iff a < d and b > c."""
        return self.start_time < end and self.end_time > start
