from __future__ import annotations

from decimal import Decimal

import pytest

from booking_core.application.use_cases.availability import AvailabilityUseCase
from booking_core.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from booking_core.domain.entities.service import Service
from booking_core.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_core.infrastructure.notifications.mock_notifier import MockNotifier
from booking_core.infrastructure.store.memory_store import MemoryBookingStore

from tests.factories import FULL_DAY_ID, MASSAGE_ID, NOW, RETIRED_ID


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore(
        [
            Service(id=MASSAGE_ID, name="Massage", duration_minutes=60, price=Decimal("100.00")),
            Service(id=FULL_DAY_ID, name="Workshop", duration_minutes=480, price=Decimal("400.00")),
            Service(id=RETIRED_ID, name="Retired", duration_minutes=30, price=Decimal("10.00"), active=False),
        ]
    )


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore(clock=lambda: NOW)


@pytest.fixture
def availability(store, catalog) -> AvailabilityUseCase:
    return AvailabilityUseCase(store=store, catalog=catalog)


@pytest.fixture
def lifecycle(store, catalog, availability) -> BookingLifecycleUseCase:
    return BookingLifecycleUseCase(store=store, catalog=catalog, availability=availability)


@pytest.fixture
def notifier() -> MockNotifier:
    return MockNotifier()
