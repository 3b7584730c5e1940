from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from booking_core.application.exceptions import NotFoundError, ValidationError
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.domain.entities.booking import BLOCKING_STATUSES
from booking_core.domain.entities.service import Service
from booking_core.domain.entities.time_slot import TimeSlot


class AvailabilityUseCase:
    """
    Computes open time slots by comparing business hours against the blocking
    (PENDING/CONFIRMED) bookings of a service. Nothing is cached: every call
    reads the store.
    """

    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        open_hour: int = 9,
        close_hour: int = 17,
        buffer_minutes: int = 15,
        max_lookahead_days: int = 30,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._open = time(hour=open_hour)
        self._close = time(hour=close_hour)
        self._buffer_minutes = buffer_minutes
        self._max_lookahead_days = max_lookahead_days
        self._logger = logging.getLogger(__name__)

    def get_available_slots(self, service_id: int, day: date) -> list[TimeSlot]:
        """
        Walk business hours in steps of duration + buffer. A candidate that hits an
        existing booking is skipped and the walk resumes one buffer after that booking.
        """
        service = self._require_service(service_id)
        duration = timedelta(minutes=service.duration_minutes)
        step = timedelta(minutes=service.duration_minutes + self._buffer_minutes)

        day_start = datetime.combine(day, self._open)
        day_end = datetime.combine(day, self._close)
        existing = self._store.find_overlapping(service_id, day_start, day_end, BLOCKING_STATUSES)

        slots: list[TimeSlot] = []
        cursor = day_start
        while cursor + duration <= day_end:
            slot_end = cursor + duration
            blocking = [b for b in existing if b.overlaps(cursor, slot_end)]
            if not blocking:
                slots.append(TimeSlot(cursor, slot_end, service.duration_minutes))
                cursor += step
            else:
                # Resume one buffer after the latest conflicting booking ends.
                cursor = max(b.end_time for b in blocking) + timedelta(minutes=self._buffer_minutes)

        self._logger.debug(
            "Computed available slots",
            extra={"service_id": service_id, "date": day.isoformat(), "count": len(slots)},
        )
        return slots

    def is_slot_available(
        self,
        service_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: int | None = None,
    ) -> bool:
        if start >= end:
            raise ValidationError("Start time must be before end time")

        if not self.within_business_hours(start, end):
            return False

        conflicting = self._store.find_overlapping(
            service_id, start, end, BLOCKING_STATUSES, exclude_booking_id=exclude_booking_id
        )
        available = not conflicting
        self._logger.debug(
            "Slot availability checked",
            extra={
                "service_id": service_id,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "available": available,
            },
        )
        return available

    def get_next_available_slot(self, service_id: int, from_date: date) -> TimeSlot | None:
        self._require_service(service_id)
        for offset in range(self._max_lookahead_days):
            check_date = from_date + timedelta(days=offset)
            if check_date.weekday() >= 5:
                continue
            slots = self.get_available_slots(service_id, check_date)
            if slots:
                self._logger.info(
                    "Next available slot found",
                    extra={"service_id": service_id, "start": slots[0].start_time.isoformat()},
                )
                return slots[0]

        self._logger.info(
            "No available slot within lookahead",
            extra={"service_id": service_id, "from_date": from_date.isoformat(), "days": self._max_lookahead_days},
        )
        return None

    def within_business_hours(self, start: datetime, end: datetime) -> bool:
        if start.date() != end.date():
            return False
        return start.time() >= self._open and end.time() <= self._close

    def _require_service(self, service_id: int) -> Service:
        service = self._catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service not found: {service_id}")
        return service
