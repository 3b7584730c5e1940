from datetime import datetime

from fastapi import APIRouter, Depends, Query

from booking_core.api.v1.errors import to_http_error
from booking_core.api.v1.schemas import PriceBreakdownSchema, PromoCodeValidationSchema
from booking_core.application.exceptions import BookingError
from booking_core.application.use_cases.pricing import PricingUseCase
from booking_core.application.utils.clock import to_business_local
from booking_core.core.config import settings
from booking_core.wiring.dependencies import get_pricing_use_case

router = APIRouter()


@router.get("/quote", response_model=PriceBreakdownSchema)
def calculate_price(
    service_id: int = Query(...),
    start_time: datetime = Query(...),
    promo_code: str | None = Query(None),
    uc: PricingUseCase = Depends(get_pricing_use_case),
):
    start_time = to_business_local(start_time, settings.BUSINESS_TIMEZONE)
    try:
        breakdown = uc.calculate_price(service_id, start_time, promo_code)
    except BookingError as e:
        raise to_http_error(e)
    return PriceBreakdownSchema.from_entity(breakdown)


@router.get("/promo-codes/{code}", response_model=PromoCodeValidationSchema)
def validate_promo_code(code: str, uc: PricingUseCase = Depends(get_pricing_use_case)):
    return PromoCodeValidationSchema(code=code, valid=uc.validate_promo_code(code))
