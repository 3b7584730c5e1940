from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.domain.entities.booking import Booking, BookingStatus
from booking_core.domain.entities.statistics import BookingStats, ServiceBookingCount

DAY_NAMES = ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"]
MONTH_ABBR = ["", "JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"]


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def percentage(part: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round2(part / total * 100)


class StatisticsUseCase:
    """Read-only metrics over a snapshot of the booking store."""

    def __init__(
        self,
        store: BookingStorePort,
        catalog: ServiceCatalogPort,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def get_overall_stats(self) -> BookingStats:
        bookings = self._store.list_all()
        counts = self._count_by_status(bookings)
        total = len(bookings)
        stats = BookingStats(
            total_bookings=total,
            pending=counts[BookingStatus.PENDING],
            confirmed=counts[BookingStatus.CONFIRMED],
            completed=counts[BookingStatus.COMPLETED],
            cancelled=counts[BookingStatus.CANCELLED],
            no_show=counts[BookingStatus.NO_SHOW],
            cancellation_rate=percentage(counts[BookingStatus.CANCELLED], total),
            completion_rate=percentage(counts[BookingStatus.COMPLETED], total),
        )
        self._logger.info(
            "Booking stats computed",
            extra={"count": total, "cancellation_rate": stats.cancellation_rate},
        )
        return stats

    def get_booking_count_by_status(self) -> dict[str, int]:
        counts = self._count_by_status(self._store.list_all())
        return {status.value: counts[status] for status in BookingStatus}

    def get_bookings_by_day_of_week(self) -> dict[str, int]:
        result = {day: 0 for day in DAY_NAMES}
        for booking in self._store.list_all():
            if booking.booking_date is not None:
                result[DAY_NAMES[booking.booking_date.weekday()]] += 1
        return result

    def get_monthly_booking_trend(self, months: int, today: date | None = None) -> dict[str, int]:
        """Booking counts for the last `months` months including the current one, oldest first."""
        today = today or self._clock().date()
        keys: list[tuple[int, int]] = []
        year, month = today.year, today.month
        for _ in range(max(months, 0)):
            keys.append((year, month))
            year, month = (year - 1, 12) if month == 1 else (year, month - 1)
        keys.reverse()

        counts = Counter(
            (b.booking_date.year, b.booking_date.month)
            for b in self._store.list_all()
            if b.booking_date is not None
        )
        return {f"{MONTH_ABBR[m]} {y}": counts.get((y, m), 0) for y, m in keys}

    def get_top_services(self, limit: int) -> list[ServiceBookingCount]:
        # Counter keeps first-encounter order, and sorted() is stable, so ties stay in that order.
        counts = Counter(b.service_id for b in self._store.list_all() if b.service_id is not None)
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[: max(limit, 0)]
        return [
            ServiceBookingCount(service_id=service_id, service_name=self._service_name(service_id), booking_count=count)
            for service_id, count in ranked
        ]

    def get_average_booking_duration(self) -> float:
        durations = [
            (b.end_time - b.start_time).total_seconds() / 60
            for b in self._store.list_all()
            if b.start_time is not None and b.end_time is not None
        ]
        if not durations:
            return 0.0
        return round2(sum(durations) / len(durations))

    def _service_name(self, service_id: int) -> str:
        service = self._catalog.get_service(service_id)
        return service.name if service else f"Service {service_id}"

    @staticmethod
    def _count_by_status(bookings: list[Booking]) -> Counter:
        return Counter(b.status for b in bookings)
