from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from booking_core.api.v1.errors import to_http_error
from booking_core.api.v1.schemas import BookingSchema, CreateBookingRequestSchema, UpdateBookingRequestSchema
from booking_core.application.exceptions import BookingError
from booking_core.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from booking_core.application.use_cases.booking_notifications import BookingNotificationsUseCase
from booking_core.domain.entities.booking import BookingStatus
from booking_core.wiring.dependencies import (
    get_booking_lifecycle_use_case,
    get_booking_notifications_use_case,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _notify(send: Callable[..., bool], *args) -> None:
    """Runs after the response; delivery problems are logged, the booking change stands."""
    try:
        send(*args)
    except Exception as e:
        logger.exception("Booking notification failed", extra={"booking_id": args[0] if args else None, "error": str(e)})


@router.post("", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingRequestSchema,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
):
    try:
        booking = uc.create_booking(
            service_id=req.service_id,
            start=req.start_time,
            end=req.end_time,
            notes=req.notes,
            user_id=req.user_id,
            customer_name=req.customer_name,
            customer_email=req.customer_email,
            customer_phone=req.customer_phone,
        )
    except BookingError as e:
        raise to_http_error(e)
    return BookingSchema.from_entity(booking)


@router.get("", response_model=list[BookingSchema])
def list_bookings(
    status: BookingStatus | None = Query(None),
    user_id: int | None = Query(None),
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
):
    return [BookingSchema.from_entity(b) for b in uc.list_bookings(status=status, user_id=user_id)]


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(booking_id: int, uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case)):
    try:
        return BookingSchema.from_entity(uc.get_booking(booking_id))
    except BookingError as e:
        raise to_http_error(e)


@router.patch("/{booking_id}", response_model=BookingSchema)
def update_booking(
    booking_id: int,
    req: UpdateBookingRequestSchema,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
):
    try:
        booking = uc.update_booking(
            booking_id,
            service_id=req.service_id,
            start=req.start_time,
            end=req.end_time,
            notes=req.notes,
        )
    except BookingError as e:
        raise to_http_error(e)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/confirm", response_model=BookingSchema)
def confirm_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
    notifications: BookingNotificationsUseCase = Depends(get_booking_notifications_use_case),
):
    try:
        booking = uc.confirm_booking(booking_id)
    except BookingError as e:
        raise to_http_error(e)
    background_tasks.add_task(_notify, notifications.send_confirmation, booking.id)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/cancel", response_model=BookingSchema)
def cancel_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
    notifications: BookingNotificationsUseCase = Depends(get_booking_notifications_use_case),
):
    try:
        booking = uc.cancel_booking(booking_id)
    except BookingError as e:
        raise to_http_error(e)
    background_tasks.add_task(_notify, notifications.send_cancellation_notice, booking.id)
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/complete", response_model=BookingSchema)
def complete_booking(
    booking_id: int,
    background_tasks: BackgroundTasks,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
    notifications: BookingNotificationsUseCase = Depends(get_booking_notifications_use_case),
):
    try:
        booking = uc.complete_booking(booking_id)
    except BookingError as e:
        raise to_http_error(e)
    background_tasks.add_task(
        _notify, notifications.send_status_change, booking.id, BookingStatus.CONFIRMED, BookingStatus.COMPLETED
    )
    return BookingSchema.from_entity(booking)


@router.post("/{booking_id}/no-show", response_model=BookingSchema)
def mark_no_show(
    booking_id: int,
    background_tasks: BackgroundTasks,
    uc: BookingLifecycleUseCase = Depends(get_booking_lifecycle_use_case),
    notifications: BookingNotificationsUseCase = Depends(get_booking_notifications_use_case),
):
    try:
        booking = uc.mark_no_show(booking_id)
    except BookingError as e:
        raise to_http_error(e)
    background_tasks.add_task(
        _notify, notifications.send_status_change, booking.id, BookingStatus.CONFIRMED, BookingStatus.NO_SHOW
    )
    return BookingSchema.from_entity(booking)
