"""
Domain error taxonomy.

Every failure the booking core can produce is a DomainError subclass with
a stable ErrorCode and a user-safe message. Services raise them; the API
layer maps codes to HTTP responses in one place (see main.py).
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    EVENT_NOT_BOOKABLE = "EVENT_NOT_BOOKABLE"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    STORAGE_ERROR = "STORAGE_ERROR"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    PERMISSION_DENIED = "PERMISSION_DENIED"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRequest(DomainError):
    """Malformed input, rejected before any store access."""

    code = ErrorCode.INVALID_REQUEST


class NotFound(DomainError):
    code = ErrorCode.NOT_FOUND


class EventNotFound(NotFound):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class BookingNotFound(NotFound):
    code = ErrorCode.BOOKING_NOT_FOUND

    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class EventNotBookable(DomainError):
    """The event exists but is not open for booking (past or cancelled)."""

    code = ErrorCode.EVENT_NOT_BOOKABLE

    def __init__(self, event_id: str, status: str) -> None:
        super().__init__(f"Event is {status} and cannot be booked")
        self.event_id = event_id
        self.status = status


class InsufficientInventory(DomainError):
    """
    Not enough seats left. Retrying with fewer tickets may succeed;
    retrying the same request will not.
    """

    code = ErrorCode.INSUFFICIENT_INVENTORY

    def __init__(self, event_id: str, requested: int, available: int) -> None:
        super().__init__(f"Only {available} seats available")
        self.event_id = event_id
        self.requested = requested
        self.available = available


class StorageError(DomainError):
    """Underlying store failure. Safe to retry later."""

    code = ErrorCode.STORAGE_ERROR

    def __init__(self, message: str = "Booking could not be stored, please try again later",
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class AlreadyCancelled(DomainError):
    code = ErrorCode.ALREADY_CANCELLED

    def __init__(self, booking_id: str) -> None:
        super().__init__("Booking is already cancelled")
        self.booking_id = booking_id


class PermissionDenied(DomainError):
    code = ErrorCode.PERMISSION_DENIED

    def __init__(self, message: str = "Admin access required") -> None:
        super().__init__(message)
