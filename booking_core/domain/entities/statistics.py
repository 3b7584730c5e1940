from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BookingStats:
    total_bookings: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    no_show: int
    cancellation_rate: float  # percent
    completion_rate: float  # percent


@dataclass(frozen=True)
class ServiceBookingCount:
    service_id: int
    service_name: str
    booking_count: int
