"""Video module exceptions."""

from shared.exceptions import AuthorizationError, NotFoundError


class BookingNotFoundError(NotFoundError):
    """Raised when a booking doesn't exist."""

    def __init__(self, booking_id: str):
        super().__init__(
            "Booking not found",
            code="BOOKING_NOT_FOUND",
            details={"booking_id": booking_id},
        )


class NotBookingParticipantError(AuthorizationError):
    """Raised when the caller is neither the owner nor the provider of a booking."""

    def __init__(self, booking_id: str):
        super().__init__(
            "You are not a participant in this booking",
            code="NOT_BOOKING_PARTICIPANT",
            details={"booking_id": booking_id},
        )
