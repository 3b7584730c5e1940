from __future__ import annotations

import threading

from booking_core.application.exceptions import ValidationError
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.domain.entities.service import Service
from booking_core.infrastructure.catalog.service_catalog_data import DEFAULT_SERVICES


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(self, services: list[Service] | None = None) -> None:
        self._lock = threading.Lock()
        self._services: dict[int, Service] = {}
        for service in DEFAULT_SERVICES if services is None else services:
            self.add_service(service)

    def get_service(self, service_id: int) -> Service | None:
        return self._services.get(service_id)

    def list_services(self) -> list[Service]:
        return list(self._services.values())

    def list_active_services(self) -> list[Service]:
        return [s for s in self._services.values() if s.active]

    def add_service(self, service: Service) -> Service:
        if service.duration_minutes <= 0:
            raise ValidationError("Service duration must be positive")
        if service.price < 0:
            raise ValidationError("Service price must not be negative")
        with self._lock:
            self._services[service.id] = service
        return service
