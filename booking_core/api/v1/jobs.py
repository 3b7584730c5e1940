from fastapi import APIRouter, Depends, Query

from booking_core.api.v1.errors import to_http_error
from booking_core.api.v1.schemas import JobResultSchema
from booking_core.application.exceptions import BookingError
from booking_core.application.use_cases.reminders import ReminderUseCase
from booking_core.core.config import settings
from booking_core.wiring.dependencies import get_reminder_use_case

router = APIRouter()


@router.post("/reminders", response_model=JobResultSchema)
def send_upcoming_reminders(
    hours_ahead: int = Query(settings.REMINDER_HOURS_AHEAD),
    uc: ReminderUseCase = Depends(get_reminder_use_case),
):
    try:
        sent = uc.send_upcoming_reminders(hours_ahead)
    except BookingError as e:
        raise to_http_error(e)
    return JobResultSchema(job="send_upcoming_reminders", count=sent)


@router.post("/cancellation-follow-ups", response_model=JobResultSchema)
def send_cancellation_follow_ups(uc: ReminderUseCase = Depends(get_reminder_use_case)):
    return JobResultSchema(job="send_cancellation_follow_ups", count=uc.send_cancellation_follow_ups())


@router.post("/reset-reminder-flags", response_model=JobResultSchema)
def reset_reminder_flags(uc: ReminderUseCase = Depends(get_reminder_use_case)):
    return JobResultSchema(job="reset_old_reminder_flags", count=uc.reset_old_reminder_flags())
