from __future__ import annotations

from abc import ABC, abstractmethod

from booking_core.domain.entities.service import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: int) -> Service | None:
        """Get service by id."""
        raise NotImplementedError

    @abstractmethod
    def list_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def list_active_services(self) -> list[Service]:
        raise NotImplementedError

    @abstractmethod
    def add_service(self, service: Service) -> Service:
        """Register a service. Raises ValidationError on non-positive duration or negative price."""
        raise NotImplementedError
