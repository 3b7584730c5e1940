from functools import lru_cache, partial
import logging
from pathlib import Path

from booking_core.core.config import settings
from booking_core.application.ports.booking_store import BookingStorePort
from booking_core.application.ports.notifications import NotificationPort
from booking_core.application.ports.promo_codes import PromoCodeRegistryPort
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.application.use_cases.availability import AvailabilityUseCase
from booking_core.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from booking_core.application.use_cases.booking_notifications import BookingNotificationsUseCase
from booking_core.application.use_cases.pricing import PricingUseCase
from booking_core.application.use_cases.reminders import ReminderUseCase
from booking_core.application.use_cases.statistics import StatisticsUseCase
from booking_core.application.utils.clock import business_now
from booking_core.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from booking_core.infrastructure.notifications.http_notifier import HttpNotifier
from booking_core.infrastructure.notifications.mock_notifier import MockNotifier
from booking_core.infrastructure.pricing.promo_codes import JsonPromoCodeRegistry, MemoryPromoCodeRegistry
from booking_core.infrastructure.store.json_store import JsonBookingStore
from booking_core.infrastructure.store.memory_store import MemoryBookingStore


logger = logging.getLogger(__name__)

_booking_store: BookingStorePort | None = None


def get_clock():
    return partial(business_now, settings.BUSINESS_TIMEZONE)


def get_booking_store() -> BookingStorePort:
    global _booking_store
    if _booking_store is None:
        if settings.STORE_PROVIDER.lower() == "json":
            _booking_store = JsonBookingStore(data_dir=settings.DATA_DIR, clock=get_clock())
        else:
            _booking_store = MemoryBookingStore(clock=get_clock())
        logger.info("Booking store initialized", extra={"provider": settings.STORE_PROVIDER})
    return _booking_store


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


@lru_cache
def get_promo_registry() -> PromoCodeRegistryPort:
    if settings.PROMO_STORE_PATH:
        return JsonPromoCodeRegistry(settings.PROMO_STORE_PATH)
    if settings.STORE_PROVIDER.lower() == "json":
        return JsonPromoCodeRegistry(str(Path(settings.DATA_DIR) / "promo_codes.json"))
    return MemoryPromoCodeRegistry()


@lru_cache
def get_notifier() -> NotificationPort:
    if not (settings.NOTIFY_EMAIL_ENDPOINT or settings.NOTIFY_SMS_ENDPOINT):
        if settings.ENV.lower() in {"dev", "local", "test"}:
            logger.info("Using MockNotifier (no gateway endpoints configured)")
            return MockNotifier()
        raise ValueError("NOTIFY_EMAIL_ENDPOINT or NOTIFY_SMS_ENDPOINT is required outside dev.")
    return HttpNotifier(
        email_endpoint=settings.NOTIFY_EMAIL_ENDPOINT,
        sms_endpoint=settings.NOTIFY_SMS_ENDPOINT,
        api_key=settings.NOTIFY_API_KEY,
        from_address=settings.NOTIFY_FROM_ADDRESS,
    )


def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        open_hour=settings.BUSINESS_OPEN_HOUR,
        close_hour=settings.BUSINESS_CLOSE_HOUR,
        buffer_minutes=settings.BOOKING_BUFFER_MINUTES,
        max_lookahead_days=settings.MAX_LOOKAHEAD_DAYS,
    )


def get_booking_lifecycle_use_case() -> BookingLifecycleUseCase:
    return BookingLifecycleUseCase(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        availability=get_availability_use_case(),
    )


def get_booking_notifications_use_case() -> BookingNotificationsUseCase:
    return BookingNotificationsUseCase(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        notifier=get_notifier(),
    )


def get_pricing_use_case() -> PricingUseCase:
    return PricingUseCase(catalog=get_service_catalog(), promo_codes=get_promo_registry())


def get_reminder_use_case() -> ReminderUseCase:
    return ReminderUseCase(
        store=get_booking_store(),
        catalog=get_service_catalog(),
        notifier=get_notifier(),
        clock=get_clock(),
        retention_days=settings.REMINDER_RETENTION_DAYS,
    )


def get_statistics_use_case() -> StatisticsUseCase:
    return StatisticsUseCase(store=get_booking_store(), catalog=get_service_catalog(), clock=get_clock())
