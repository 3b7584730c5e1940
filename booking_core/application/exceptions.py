class BookingError(RuntimeError):
    """Base class for errors surfaced by the booking core."""
    pass


class ValidationError(BookingError):
    """Raised on malformed input (inverted time range, non-positive lookahead, bad catalog data)."""
    pass


class NotFoundError(BookingError):
    """Raised when a service or booking id is unknown."""
    pass


class ConflictError(BookingError):
    """Raised when the requested window is not available for the service."""
    pass


class InvalidStateError(BookingError):
    """Raised when a booking status transition is not allowed."""
    pass


class OverlapConstraintError(ConflictError):
    """Raised by a booking store when a write would violate the per-service exclusion constraint."""
    pass


class NotificationDeliveryError(RuntimeError):
    """Raised when the notification transport rejects or fails to deliver a message."""
    pass
