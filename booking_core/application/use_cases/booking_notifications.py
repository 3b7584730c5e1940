from __future__ import annotations

import logging

from booking_core.application.exceptions import NotFoundError
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.notifications import NotificationPort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.application.utils.messages import (
    build_cancellation_body,
    build_confirmation_body,
    build_status_change_body,
)
from booking_core.domain.entities.booking import Booking, BookingStatus


class BookingNotificationsUseCase:
    """Customer emails for lifecycle events. Run after the booking write has committed."""

    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        notifier: NotificationPort,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def send_confirmation(self, booking_id: int) -> bool:
        booking = self._get(booking_id)
        service_name = self._service_name(booking)
        return self._send(
            booking,
            f"Booking Confirmed - {service_name}",
            build_confirmation_body(booking, service_name),
        )

    def send_cancellation_notice(self, booking_id: int) -> bool:
        booking = self._get(booking_id)
        service_name = self._service_name(booking)
        return self._send(
            booking,
            f"Booking Cancelled - {service_name}",
            build_cancellation_body(booking, service_name),
        )

    def send_status_change(self, booking_id: int, old_status: BookingStatus, new_status: BookingStatus) -> bool:
        booking = self._get(booking_id)
        service_name = self._service_name(booking)
        return self._send(
            booking,
            f"Booking Status Updated - {service_name}",
            build_status_change_body(booking, service_name, old_status, new_status),
        )

    def _send(self, booking: Booking, subject: str, body: str) -> bool:
        """Returns True if an email went out, False if skipped (no address)."""
        if not booking.customer_email:
            self._logger.info("No email address, skipping notification", extra={"booking_id": booking.id})
            return False
        self._notifier.send_email(booking.customer_email, subject, body)
        self._logger.info("Notification sent", extra={"booking_id": booking.id, "subject": subject})
        return True

    def _get(self, booking_id: int) -> Booking:
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking not found: {booking_id}")
        return booking

    def _service_name(self, booking: Booking) -> str:
        service = self._catalog.get_service(booking.service_id)
        return service.name if service else "Service"
