from fastapi import HTTPException

from booking_core.application.exceptions import (
    BookingError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)


def to_http_error(error: BookingError) -> HTTPException:
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (ConflictError, InvalidStateError)):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=500, detail="Internal error")
