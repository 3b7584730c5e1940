from __future__ import annotations

from datetime import datetime

from booking_core.domain.entities.booking import Booking, BookingStatus


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_date(value: datetime | None) -> str:
    """E.g. "Monday, March 2, 2026"."""
    if value is None:
        return "N/A"
    return f"{WEEKDAYS[value.weekday()]}, {MONTHS[value.month - 1]} {value.day}, {value.year}"


def format_time(value: datetime | None) -> str:
    if value is None:
        return "N/A"
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"


def build_reminder_message(booking: Booking, service_name: str | None) -> str:
    parts = ["Reminder: You have an upcoming booking"]
    if service_name:
        parts.append(f" for {service_name}")
    parts.append(f" on {format_date(booking.start_time)}")
    parts.append(f" at {format_time(booking.start_time)}")
    if booking.notes and booking.notes.strip():
        parts.append(f". Notes: {booking.notes}")
    return "".join(parts)


def build_reminder_subject(booking: Booking, service_name: str | None) -> str:
    return f"Reminder: Your {service_name or 'appointment'} on {booking.start_time.date().isoformat()}"


def build_confirmation_body(booking: Booking, service_name: str) -> str:
    lines = [
        "Your booking has been confirmed!",
        "",
        f"Service: {service_name}",
        f"Date: {format_date(booking.start_time)}",
        f"Time: {format_time(booking.start_time)} - {format_time(booking.end_time)}",
    ]
    if booking.notes and booking.notes.strip():
        lines.append(f"Notes: {booking.notes}")
    lines.extend(["", "Thank you for your booking!"])
    return "\n".join(lines)


def build_cancellation_body(booking: Booking, service_name: str) -> str:
    return (
        f"Your booking for {service_name} on {format_date(booking.start_time)} has been cancelled.\n\n"
        "If this was not intended, please contact us to rebook."
    )


def build_status_change_body(
    booking: Booking,
    service_name: str,
    old_status: BookingStatus,
    new_status: BookingStatus,
) -> str:
    return (
        f"Your booking for {service_name} has been updated from {old_status.value} to {new_status.value}.\n\n"
        f"Date: {format_date(booking.start_time)}"
    )


def build_follow_up_body(booking: Booking, service_name: str) -> str:
    greeting = f"Hi {booking.customer_name}," if booking.customer_name else "Hi,"
    return (
        f"{greeting}\n\n"
        f"We noticed your {service_name} appointment was cancelled. "
        "We'd love to see you again - reply to this email or book a new time online."
    )
