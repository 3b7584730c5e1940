from __future__ import annotations

import logging
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal

from booking_core.application.exceptions import NotFoundError
from booking_core.application.ports.promo_codes import PromoCodeRegistryPort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.domain.entities.price_breakdown import PriceBreakdown
from booking_core.domain.entities.service import Service

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

PEAK_START = time(10, 0)
PEAK_END = time(14, 0)
OFF_PEAK_BEFORE = time(9, 0)
OFF_PEAK_FROM = time(16, 0)

PEAK_SURCHARGE_RATE = Decimal("0.15")
WEEKEND_SURCHARGE_RATE = Decimal("0.20")
OFF_PEAK_DISCOUNT_RATE = Decimal("0.10")


def money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_weekend(moment: datetime) -> bool:
    return moment.weekday() >= 5


def is_peak_hour(moment: datetime) -> bool:
    return not is_weekend(moment) and PEAK_START <= moment.time() < PEAK_END


def is_off_peak(moment: datetime) -> bool:
    t = moment.time()
    return not is_weekend(moment) and (t < OFF_PEAK_BEFORE or t >= OFF_PEAK_FROM)


class PricingUseCase:
    def __init__(self, catalog: ServiceCatalogPort, promo_codes: PromoCodeRegistryPort) -> None:
        self._catalog = catalog
        self._promo_codes = promo_codes
        self._logger = logging.getLogger(__name__)

    def calculate_price(
        self,
        service_id: int,
        start_time: datetime,
        promo_code: str | None = None,
    ) -> PriceBreakdown:
        """
        Quote a price for a service at a start time.

        Peak (+15%) and weekend (+20%) surcharges are independent; the off-peak
        discount (-10%) applies only when neither surcharge did. A registered promo
        code subtracts base * rate on top. Every component is rounded to cents
        half-up and the final price never goes below zero.
        """
        base = self._require_service(service_id).price
        surcharge = ZERO
        discount = ZERO
        applied_promo: str | None = None

        peak = is_peak_hour(start_time)
        weekend = is_weekend(start_time)

        if peak:
            surcharge += money(base * PEAK_SURCHARGE_RATE)
        if weekend:
            surcharge += money(base * WEEKEND_SURCHARGE_RATE)
        if not peak and not weekend and is_off_peak(start_time):
            discount += money(base * OFF_PEAK_DISCOUNT_RATE)

        if promo_code and promo_code.strip():
            rate = self._promo_codes.get_rate(promo_code)
            if rate is not None:
                discount += money(base * rate)
                applied_promo = promo_code.strip().upper()

        final_price = max(ZERO, money(base + surcharge - discount))

        self._logger.info(
            "Price calculated",
            extra={
                "service_id": service_id,
                "base": str(base),
                "surcharge": str(surcharge),
                "discount": str(discount),
                "final": str(final_price),
                "promo": applied_promo,
            },
        )
        return PriceBreakdown(
            base_price=base,
            surcharge=surcharge,
            discount=discount,
            final_price=final_price,
            applied_promo=applied_promo,
        )

    def validate_promo_code(self, promo_code: str | None) -> bool:
        return self._promo_codes.contains(promo_code)

    def get_base_price(self, service_id: int) -> Decimal:
        return self._require_service(service_id).price

    def _require_service(self, service_id: int) -> Service:
        service = self._catalog.get_service(service_id)
        if service is None:
            raise NotFoundError(f"Service not found: {service_id}")
        return service
