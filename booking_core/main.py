import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking_core.api.v1.bookings import router as bookings_router
from booking_core.api.v1.jobs import router as jobs_router
from booking_core.api.v1.pricing import router as pricing_router
from booking_core.api.v1.services import router as services_router
from booking_core.api.v1.statistics import router as statistics_router
from booking_core.core.config import settings
from booking_core.infrastructure.scheduler.jobs import build_scheduler
from booking_core.wiring.dependencies import get_reminder_use_case


LOG_CONTEXT_KEYS = (
    "booking_id",
    "service_id",
    "status",
    "previous_status",
    "count",
    "failed",
    "candidates",
    "hours_ahead",
    "interval_minutes",
    "date",
    "from_date",
    "days",
    "start",
    "end",
    "available",
    "channel",
    "recipient",
    "subject",
    "base",
    "surcharge",
    "discount",
    "final",
    "promo",
    "cancellation_rate",
    "provider",
    "path",
    "error",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in LOG_CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = None
    if settings.SCHEDULER_ENABLED and settings.REMINDER_ENABLED:
        scheduler = build_scheduler(
            get_reminder_use_case(),
            hours_ahead=settings.REMINDER_HOURS_AHEAD,
            interval_minutes=settings.REMINDER_INTERVAL_MINUTES,
            timezone=settings.BUSINESS_TIMEZONE,
        )
        scheduler.start()
        logger.info("Scheduler started")
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")


app = FastAPI(title="Appointment Booking Core", version="1.0.0", lifespan=lifespan)

app.include_router(services_router, prefix="/api/v1/services", tags=["services"])
app.include_router(bookings_router, prefix="/api/v1/bookings", tags=["bookings"])
app.include_router(pricing_router, prefix="/api/v1/pricing", tags=["pricing"])
app.include_router(statistics_router, prefix="/api/v1/statistics", tags=["statistics"])
app.include_router(jobs_router, prefix="/api/v1/jobs", tags=["jobs"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
