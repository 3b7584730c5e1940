from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_core.api.v1.errors import to_http_error
from booking_core.api.v1.schemas import AvailabilitySchema, ServiceSchema, TimeSlotSchema
from booking_core.application.exceptions import BookingError
from booking_core.application.ports.service_catalog import ServiceCatalogPort
from booking_core.application.use_cases.availability import AvailabilityUseCase
from booking_core.application.utils.clock import to_business_local
from booking_core.core.config import settings
from booking_core.wiring.dependencies import get_availability_use_case, get_service_catalog

router = APIRouter()


@router.get("", response_model=list[ServiceSchema])
def list_services(
    active_only: bool = Query(False),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    services = catalog.list_active_services() if active_only else catalog.list_services()
    return [ServiceSchema.from_entity(s) for s in services]


@router.get("/{service_id}", response_model=ServiceSchema)
def get_service(service_id: int, catalog: ServiceCatalogPort = Depends(get_service_catalog)):
    service = catalog.get_service(service_id)
    if service is None:
        raise HTTPException(status_code=404, detail=f"Service not found: {service_id}")
    return ServiceSchema.from_entity(service)


@router.get("/{service_id}/slots", response_model=list[TimeSlotSchema])
def get_available_slots(
    service_id: int,
    day: date = Query(..., alias="date"),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slots = uc.get_available_slots(service_id, day)
    except BookingError as e:
        raise to_http_error(e)
    return [TimeSlotSchema.from_entity(s) for s in slots]


@router.get("/{service_id}/availability", response_model=AvailabilitySchema)
def is_slot_available(
    service_id: int,
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    start_time = to_business_local(start_time, settings.BUSINESS_TIMEZONE)
    end_time = to_business_local(end_time, settings.BUSINESS_TIMEZONE)
    try:
        available = uc.is_slot_available(service_id, start_time, end_time)
    except BookingError as e:
        raise to_http_error(e)
    return AvailabilitySchema(service_id=service_id, start_time=start_time, end_time=end_time, available=available)


@router.get("/{service_id}/next-slot", response_model=TimeSlotSchema | None)
def get_next_available_slot(
    service_id: int,
    from_date: date = Query(...),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        slot = uc.get_next_available_slot(service_id, from_date)
    except BookingError as e:
        raise to_http_error(e)
    return TimeSlotSchema.from_entity(slot) if slot else None
