from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class PromoCodeRegistryPort(ABC):
    @abstractmethod
    def get_rate(self, code: str) -> Decimal | None:
        """Discount rate for a code (case-insensitive, trimmed), or None if unknown."""
        raise NotImplementedError

    @abstractmethod
    def register(self, code: str, rate: Decimal) -> None:
        """Add or replace a code. Raises ValidationError unless 0 < rate <= 1."""
        raise NotImplementedError

    @abstractmethod
    def codes(self) -> dict[str, Decimal]:
        raise NotImplementedError

    def contains(self, code: str | None) -> bool:
        if code is None or not code.strip():
            return False
        return self.get_rate(code) is not None
