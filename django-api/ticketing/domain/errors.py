"""Domain error codes for the ticketing module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    TICKET_EVENT_MISMATCH = "TICKET_EVENT_MISMATCH"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    BOOKING_ACCESS_DENIED = "BOOKING_ACCESS_DENIED"
    ACCESS_DENIED = "ACCESS_DENIED"
    CREATE_FAILED = "CREATE_FAILED"
    UPDATE_FAILED = "UPDATE_FAILED"
    CANCEL_FAILED = "CANCEL_FAILED"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class TicketNotFoundError(DomainError):
    """Raised when a ticket tier is not found."""

    def __init__(self, ticket_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_NOT_FOUND,
            message="Ticket not found",
        )
        self.ticket_id = ticket_id


class BookingNotFoundError(DomainError):
    """Raised when a booking does not exist or has been cancelled."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class UserNotFoundError(DomainError):
    def __init__(self, user_id: str) -> None:
        super().__init__(
            code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
        )
        self.user_id = user_id


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidQuantityError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_QUANTITY,
            message="Quantity must be a positive integer",
        )


class TicketEventMismatchError(DomainError):
    """Raised when a ticket does not belong to the requested event."""

    def __init__(self, ticket_id: str, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.TICKET_EVENT_MISMATCH,
            message="Invalid ticket for this event",
        )
        self.ticket_id = ticket_id
        self.event_id = event_id


class InsufficientInventoryError(DomainError):
    """Raised when a tier cannot cover the requested quantity.

    ``requested`` is the full quantity for new bookings and tier switches,
    and the increase for a same-tier quantity change.
    """

    def __init__(self, ticket_id: str, requested: int, available: int) -> None:
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message="Not enough tickets available",
        )
        self.ticket_id = ticket_id
        self.requested = requested
        self.available = available


class BookingAccessDeniedError(DomainError):
    """Raised when the actor neither owns the booking nor is an admin."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_ACCESS_DENIED,
            message="Unauthorized to access this booking",
        )
        self.booking_id = booking_id


class AccessDeniedError(DomainError):
    def __init__(self, message: str = "Only admins can perform this action") -> None:
        super().__init__(code=ErrorCode.ACCESS_DENIED, message=message)


class BookingCreateFailedError(DomainError):
    """Raised when the booking transaction could not be committed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CREATE_FAILED,
            message="Failed to create booking",
        )


class BookingUpdateFailedError(DomainError):
    """Raised when the update transaction was rolled back."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.UPDATE_FAILED,
            message="Failed to update booking",
        )
        self.booking_id = booking_id


class BookingCancelFailedError(DomainError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.CANCEL_FAILED,
            message="Failed to cancel booking",
        )
        self.booking_id = booking_id


class StorageUnavailableError(DomainError):
    """Raised when a read could not reach the storage backend."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.STORAGE_UNAVAILABLE,
            message="Service temporarily unavailable",
        )
