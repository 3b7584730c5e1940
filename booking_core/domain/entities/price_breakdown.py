from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Decimal
    surcharge: Decimal
    discount: Decimal
    final_price: Decimal
    applied_promo: str | None = None
