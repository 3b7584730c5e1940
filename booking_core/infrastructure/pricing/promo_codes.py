from __future__ import annotations

import json
import logging
import threading
from decimal import Decimal, InvalidOperation
from pathlib import Path

from booking_core.application.exceptions import ValidationError
from booking_core.application.ports.promo_codes import PromoCodeRegistryPort

DEFAULT_PROMO_CODES: dict[str, Decimal] = {
    "WELCOME10": Decimal("0.10"),
    "SAVE20": Decimal("0.20"),
    "VIP15": Decimal("0.15"),
    "FIRST50": Decimal("0.50"),
}


def normalize_code(code: str) -> str:
    return code.strip().upper()


class MemoryPromoCodeRegistry(PromoCodeRegistryPort):
    def __init__(self, seed: dict[str, Decimal] | None = None) -> None:
        self._codes: dict[str, Decimal] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        for code, rate in (DEFAULT_PROMO_CODES if seed is None else seed).items():
            self._put(code, rate)
        self._logger.info("Promo codes initialized", extra={"count": len(self._codes)})

    def get_rate(self, code: str) -> Decimal | None:
        if code is None or not code.strip():
            return None
        return self._codes.get(normalize_code(code))

    def register(self, code: str, rate: Decimal) -> None:
        with self._lock:
            self._put(code, rate)
            self._commit()

    def codes(self) -> dict[str, Decimal]:
        return dict(self._codes)

    def _put(self, code: str, rate: Decimal) -> None:
        if not code or not code.strip():
            raise ValidationError("Promo code must not be blank")
        try:
            rate = Decimal(str(rate))
        except InvalidOperation as e:
            raise ValidationError(f"Invalid promo rate: {rate!r}") from e
        if not (Decimal("0") < rate <= Decimal("1")):
            raise ValidationError("Promo rate must be greater than 0 and at most 1")
        self._codes[normalize_code(code)] = rate

    def _commit(self) -> None:
        return None


class JsonPromoCodeRegistry(MemoryPromoCodeRegistry):
    """Registry persisted to a JSON file; the defaults seed the file on first start."""

    def __init__(self, path: str, seed: dict[str, Decimal] | None = None) -> None:
        self._path = Path(path)
        stored = self._load()
        super().__init__(seed=stored if stored is not None else seed)
        if stored is None:
            self._commit()

    def _load(self) -> dict[str, Decimal] | None:
        if not self._path.exists():
            return None
        with open(self._path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return {code: Decimal(str(rate)) for code, rate in data.get("codes", {}).items()}

    def _commit(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".json.tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump({"codes": {code: str(rate) for code, rate in self._codes.items()}}, f, indent=2)
        temp_path.replace(self._path)
