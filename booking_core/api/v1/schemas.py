from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from booking_core.application.utils.clock import to_business_local
from booking_core.core.config import settings
from booking_core.domain.entities.booking import Booking, BookingStatus
from booking_core.domain.entities.price_breakdown import PriceBreakdown
from booking_core.domain.entities.service import Service
from booking_core.domain.entities.time_slot import TimeSlot


class ServiceSchema(BaseModel):
    id: int
    name: str
    description: str | None = None
    duration_minutes: int
    price: Decimal
    active: bool

    @classmethod
    def from_entity(cls, service: Service) -> "ServiceSchema":
        return cls(
            id=service.id,
            name=service.name,
            description=service.description,
            duration_minutes=service.duration_minutes,
            price=service.price,
            active=service.active,
        )


class TimeSlotSchema(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int

    @classmethod
    def from_entity(cls, slot: TimeSlot) -> "TimeSlotSchema":
        return cls(start_time=slot.start_time, end_time=slot.end_time, duration_minutes=slot.duration_minutes)


class AvailabilitySchema(BaseModel):
    service_id: int
    start_time: datetime
    end_time: datetime
    available: bool


class CreateBookingRequestSchema(BaseModel):
    service_id: int
    start_time: datetime
    end_time: datetime
    notes: str | None = Field(default=None, max_length=1000)
    user_id: int | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: datetime) -> datetime:
        return to_business_local(value, settings.BUSINESS_TIMEZONE)


class UpdateBookingRequestSchema(BaseModel):
    service_id: int | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: datetime | None) -> datetime | None:
        return to_business_local(value, settings.BUSINESS_TIMEZONE)


class BookingSchema(BaseModel):
    id: int
    service_id: int
    user_id: int | None = None
    booking_date: date
    start_time: datetime
    end_time: datetime
    status: BookingStatus
    notes: str | None = None
    reminder_sent: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, booking: Booking) -> "BookingSchema":
        return cls(
            id=booking.id,
            service_id=booking.service_id,
            user_id=booking.user_id,
            booking_date=booking.booking_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            status=booking.status,
            notes=booking.notes,
            reminder_sent=booking.reminder_sent,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class PriceBreakdownSchema(BaseModel):
    base_price: Decimal
    surcharge: Decimal
    discount: Decimal
    final_price: Decimal
    applied_promo: str | None = None

    @classmethod
    def from_entity(cls, breakdown: PriceBreakdown) -> "PriceBreakdownSchema":
        return cls(
            base_price=breakdown.base_price,
            surcharge=breakdown.surcharge,
            discount=breakdown.discount,
            final_price=breakdown.final_price,
            applied_promo=breakdown.applied_promo,
        )


class PromoCodeValidationSchema(BaseModel):
    code: str
    valid: bool


class BookingStatsSchema(BaseModel):
    total_bookings: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    no_show: int
    cancellation_rate: float
    completion_rate: float


class ServiceBookingCountSchema(BaseModel):
    service_id: int
    service_name: str
    booking_count: int


class AverageDurationSchema(BaseModel):
    average_duration_minutes: float


class JobResultSchema(BaseModel):
    job: str
    count: int
