from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from contextlib import AbstractContextManager
from datetime import datetime

from booking_core.domain.entities.booking import Booking, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        """
        Insert a new booking and return it with id and timestamps assigned.
        Raises OverlapConstraintError if a blocking booking would overlap another
        blocking booking of the same service.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, booking: Booking) -> Booking:
        """
        Replace an existing booking (matched by id). Same exclusion constraint as add,
        ignoring the booking's own previous record.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: int) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def find_overlapping(
        self,
        service_id: int,
        start: datetime,
        end: datetime,
        statuses: Iterable[BookingStatus],
        exclude_booking_id: int | None = None,
    ) -> list[Booking]:
        """Bookings of the service whose [start_time, end_time) overlaps [start, end)."""
        raise NotImplementedError

    @abstractmethod
    def find_starting_between(
        self,
        start: datetime,
        end: datetime,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Bookings with start_time in [start, end], ordered by start_time."""
        raise NotImplementedError

    @abstractmethod
    def find_by_status_updated_between(
        self,
        status: BookingStatus,
        start: datetime,
        end: datetime,
    ) -> list[Booking]:
        raise NotImplementedError

    @abstractmethod
    def service_lock(self, service_id: int) -> AbstractContextManager:
        """
        Lock serializing check-then-write sequences for one service.
        Callers hold it around availability check + add/save.
        """
        raise NotImplementedError

    @abstractmethod
    def claim_reminder(self, booking_id: int) -> bool:
        """
        Atomic check-and-set of reminder_sent. Returns True only for the caller that
        flipped the flag from False to True on a CONFIRMED booking.
        """
        raise NotImplementedError

    @abstractmethod
    def release_reminder(self, booking_id: int) -> None:
        """Undo a claim after a failed delivery."""
        raise NotImplementedError

    @abstractmethod
    def is_reminder_sent(self, booking_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def reset_reminder_flags_older_than(self, cutoff: datetime) -> int:
        """Clear reminder_sent on bookings starting before cutoff. Returns count updated."""
        raise NotImplementedError
