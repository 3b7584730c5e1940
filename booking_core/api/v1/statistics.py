from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from booking_core.api.v1.schemas import AverageDurationSchema, BookingStatsSchema, ServiceBookingCountSchema
from booking_core.application.use_cases.statistics import StatisticsUseCase
from booking_core.wiring.dependencies import get_statistics_use_case

router = APIRouter()


@router.get("/summary", response_model=BookingStatsSchema)
def overall_stats(uc: StatisticsUseCase = Depends(get_statistics_use_case)):
    return BookingStatsSchema(**asdict(uc.get_overall_stats()))


@router.get("/by-status", response_model=dict[str, int])
def count_by_status(uc: StatisticsUseCase = Depends(get_statistics_use_case)):
    return uc.get_booking_count_by_status()


@router.get("/by-day-of-week", response_model=dict[str, int])
def by_day_of_week(uc: StatisticsUseCase = Depends(get_statistics_use_case)):
    return uc.get_bookings_by_day_of_week()


@router.get("/monthly-trend", response_model=dict[str, int])
def monthly_trend(
    months: int = Query(6, ge=1, le=60),
    uc: StatisticsUseCase = Depends(get_statistics_use_case),
):
    return uc.get_monthly_booking_trend(months)


@router.get("/top-services", response_model=list[ServiceBookingCountSchema])
def top_services(
    limit: int = Query(5, ge=1, le=100),
    uc: StatisticsUseCase = Depends(get_statistics_use_case),
):
    return [ServiceBookingCountSchema(**asdict(item)) for item in uc.get_top_services(limit)]


@router.get("/average-duration", response_model=AverageDurationSchema)
def average_duration(uc: StatisticsUseCase = Depends(get_statistics_use_case)):
    return AverageDurationSchema(average_duration_minutes=uc.get_average_booking_duration())
