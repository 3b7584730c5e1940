from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager
from dataclasses import replace
from datetime import datetime

from booking_core.application.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    OverlapConstraintError,
    ValidationError,
)
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.application.use_cases.availability import AvailabilityUseCase
from booking_core.domain.entities.booking import Booking, BookingStatus

SLOT_UNAVAILABLE = "Time slot is not available"


class BookingLifecycleUseCase:
    """
    Owns the booking state machine.

    create/update run the availability check and the write while holding the
    store's lock for the target service, so two creators cannot both observe a
    free window and both commit. The store's exclusion constraint backs this up.
    Updates and status changes also hold the lock of the booking's current
    service, so moving a booking between services cannot race a cancel.
    Notifications are not sent from here; callers send them after the write.
    """

    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        availability: AvailabilityUseCase,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._availability = availability
        self._logger = logging.getLogger(__name__)

    def create_booking(
        self,
        service_id: int,
        start: datetime,
        end: datetime,
        notes: str | None = None,
        user_id: int | None = None,
        customer_name: str | None = None,
        customer_email: str | None = None,
        customer_phone: str | None = None,
    ) -> Booking:
        self._validate_range(start, end)
        self._require_bookable_service(service_id)

        with self._store.service_lock(service_id):
            if not self._availability.is_slot_available(service_id, start, end):
                self._logger.info(
                    "Booking rejected, slot unavailable",
                    extra={"service_id": service_id, "start": start.isoformat(), "end": end.isoformat()},
                )
                raise ConflictError(SLOT_UNAVAILABLE)

            booking = Booking(
                service_id=service_id,
                user_id=user_id,
                booking_date=start.date(),
                start_time=start,
                end_time=end,
                status=BookingStatus.PENDING,
                notes=notes,
                customer_name=customer_name,
                customer_email=customer_email,
                customer_phone=customer_phone,
            )
            try:
                created = self._store.add(booking)
            except OverlapConstraintError as e:
                raise ConflictError(SLOT_UNAVAILABLE) from e

        self._logger.info(
            "Booking created",
            extra={"booking_id": created.id, "service_id": service_id, "status": created.status.value},
        )
        return created

    def update_booking(
        self,
        booking_id: int,
        service_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        notes: str | None = None,
    ) -> Booking:
        extra_services = () if service_id is None else (service_id,)

        with self._locked_booking(booking_id, *extra_services) as current:
            if not current.status.is_blocking:
                raise InvalidStateError(f"Cannot update a booking in status {current.status.value}")

            target_service = service_id if service_id is not None else current.service_id
            if target_service != current.service_id:
                self._require_bookable_service(target_service)
            new_start = start or current.start_time
            new_end = end or current.end_time
            self._validate_range(new_start, new_end)

            if not self._availability.is_slot_available(
                target_service, new_start, new_end, exclude_booking_id=booking_id
            ):
                raise ConflictError(SLOT_UNAVAILABLE)

            updated = replace(
                current,
                service_id=target_service,
                start_time=new_start,
                end_time=new_end,
                booking_date=new_start.date(),
                notes=notes if notes is not None else current.notes,
            )
            try:
                saved = self._store.save(updated)
            except OverlapConstraintError as e:
                raise ConflictError(SLOT_UNAVAILABLE) from e

        self._logger.info("Booking updated", extra={"booking_id": booking_id, "service_id": target_service})
        return saved

    def confirm_booking(self, booking_id: int) -> Booking:
        return self._transition(booking_id, BookingStatus.CONFIRMED)

    def cancel_booking(self, booking_id: int) -> Booking:
        return self._transition(booking_id, BookingStatus.CANCELLED)

    def complete_booking(self, booking_id: int) -> Booking:
        return self._transition(booking_id, BookingStatus.COMPLETED)

    def mark_no_show(self, booking_id: int) -> Booking:
        return self._transition(booking_id, BookingStatus.NO_SHOW)

    def get_booking(self, booking_id: int) -> Booking:
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking not found: {booking_id}")
        return booking

    def list_bookings(
        self,
        status: BookingStatus | None = None,
        user_id: int | None = None,
    ) -> list[Booking]:
        bookings = self._store.list_all()
        if status is not None:
            bookings = [b for b in bookings if b.status == status]
        if user_id is not None:
            bookings = [b for b in bookings if b.user_id == user_id]
        return bookings

    def _transition(self, booking_id: int, target: BookingStatus) -> Booking:
        with self._locked_booking(booking_id) as booking:
            if not booking.status.can_transition_to(target):
                raise InvalidStateError(
                    f"Cannot change booking {booking_id} from {booking.status.value} to {target.value}"
                )
            saved = self._store.save(replace(booking, status=target))

        self._logger.info(
            "Booking status changed",
            extra={"booking_id": booking_id, "status": target.value, "previous_status": booking.status.value},
        )
        return saved

    @contextmanager
    def _locked_booking(self, booking_id: int, *service_ids: int) -> Iterator[Booking]:
        """
        Yield the current booking while holding the locks of its service and of any
        extra services, taken in ascending id order. If the booking moved to another
        service before its lock was acquired, the locks are released and taken again.
        """
        while True:
            booking = self.get_booking(booking_id)
            with ExitStack() as stack:
                for locked_id in sorted({booking.service_id, *service_ids}):
                    stack.enter_context(self._store.service_lock(locked_id))
                current = self.get_booking(booking_id)
                if current.service_id == booking.service_id:
                    yield current
                    return

    def _require_bookable_service(self, service_id: int) -> None:
        service = self._catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service not found: {service_id}")
        if not service.active:
            raise ValidationError(f"Service is not active: {service_id}")

    @staticmethod
    def _validate_range(start: datetime, end: datetime) -> None:
        if end <= start:
            raise ValidationError("End time must be after start time")
