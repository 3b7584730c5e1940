from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from booking_core.application.exceptions import NotificationDeliveryError, ValidationError
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.notifications import NotificationPort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.application.utils.messages import (
    build_follow_up_body,
    build_reminder_message,
    build_reminder_subject,
)
from booking_core.domain.entities.booking import Booking, BookingStatus


class ReminderUseCase:
    """
    Periodic job bodies for reminders.

    The persisted reminder_sent flag is the only dedup state: a booking is claimed
    in the store (check-and-set) before delivery and released again if delivery
    fails, so at most one reminder is ever sent per booking, across restarts and
    overlapping scheduler ticks.
    """

    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        notifier: NotificationPort,
        clock: Callable[[], datetime] = datetime.now,
        retention_days: int = 30,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._notifier = notifier
        self._clock = clock
        self._retention_days = retention_days
        self._logger = logging.getLogger(__name__)

    def send_upcoming_reminders(self, hours_ahead: int, now: datetime | None = None) -> int:
        if hours_ahead <= 0:
            raise ValidationError("Hours ahead must be a positive number")

        bookings = self.get_bookings_needing_reminder(hours_ahead, now)
        sent = 0
        failed = 0

        for booking in bookings:
            if not self._store.claim_reminder(booking.id):
                self._logger.debug("Reminder already claimed, skipping", extra={"booking_id": booking.id})
                continue
            try:
                self._deliver_reminder(booking)
            except Exception as e:
                failed += 1
                self._store.release_reminder(booking.id)
                self._logger.error(
                    "Failed to send reminder",
                    extra={"booking_id": booking.id, "error": str(e)},
                )
                continue
            sent += 1
            self._logger.info("Reminder sent", extra={"booking_id": booking.id})

        self._logger.info(
            "Reminder batch completed",
            extra={"count": sent, "failed": failed, "candidates": len(bookings), "hours_ahead": hours_ahead},
        )
        return sent

    def get_bookings_needing_reminder(self, hours_ahead: int, now: datetime | None = None) -> list[Booking]:
        now = now or self._clock()
        upcoming = self._store.find_starting_between(
            now, now + timedelta(hours=hours_ahead), status=BookingStatus.CONFIRMED
        )
        return [b for b in upcoming if not b.reminder_sent]

    def is_reminder_sent(self, booking_id: int) -> bool:
        return self._store.is_reminder_sent(booking_id)

    def send_cancellation_follow_ups(self, now: datetime | None = None) -> int:
        """
        Best-effort rebooking emails for bookings cancelled in the previous 24 hours.

        Nothing is recorded per booking, so a second run inside the same 24 hours
        emails the same customers again. Trigger it once a day, either from the
        scheduler or from the jobs endpoint, not both.
        """
        now = now or self._clock()
        cancelled = self._store.find_by_status_updated_between(
            BookingStatus.CANCELLED, now - timedelta(days=1), now
        )

        sent = 0
        for booking in cancelled:
            if not booking.customer_email:
                continue
            service_name = self._service_name(booking)
            try:
                self._notifier.send_email(
                    booking.customer_email,
                    f"We'd love to see you again - {service_name}",
                    build_follow_up_body(booking, service_name),
                )
                sent += 1
            except Exception as e:
                self._logger.error(
                    "Failed to send cancellation follow-up",
                    extra={"booking_id": booking.id, "error": str(e)},
                )

        self._logger.info("Cancellation follow-ups completed", extra={"count": sent, "candidates": len(cancelled)})
        return sent

    def reset_old_reminder_flags(self, now: datetime | None = None, retention_days: int | None = None) -> int:
        now = now or self._clock()
        days = self._retention_days if retention_days is None else retention_days
        updated = self._store.reset_reminder_flags_older_than(now - timedelta(days=days))
        self._logger.info("Reset old reminder flags", extra={"count": updated})
        return updated

    def _deliver_reminder(self, booking: Booking) -> None:
        if not booking.customer_email and not booking.customer_phone:
            raise NotificationDeliveryError("Booking has no email address or phone number")

        service_name = self._service_name(booking)
        message = build_reminder_message(booking, service_name)
        channels: list[tuple[str, Callable[[], None]]] = []
        if booking.customer_email:
            subject = build_reminder_subject(booking, service_name)
            channels.append(("email", lambda: self._notifier.send_email(booking.customer_email, subject, message)))
        if booking.customer_phone:
            channels.append(("sms", lambda: self._notifier.send_sms(booking.customer_phone, message)))

        # Once any channel has delivered, the reminder counts as sent and the claim stays.
        errors: list[str] = []
        for channel, send in channels:
            try:
                send()
            except Exception as e:
                errors.append(f"{channel}: {e}")
                self._logger.warning(
                    "Reminder channel failed",
                    extra={"booking_id": booking.id, "channel": channel, "error": str(e)},
                )
        if len(errors) == len(channels):
            raise NotificationDeliveryError("; ".join(errors))

    def _service_name(self, booking: Booking) -> str:
        service = self._catalog.get_service(booking.service_id)
        return service.name if service else "appointment"
