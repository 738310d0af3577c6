"""
Booking ledger interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from eventhub.models.booking import Booking


class BookingLedger(ABC):

    @abstractmethod
    async def append(self, booking: Booking) -> Booking:
        """
        Persist a new booking and return it with its id assigned.

        Raises:
            StorageError: On write failure. The caller owns inventory compensation.
        """
        pass

    @abstractmethod
    async def get(self, booking_id: str) -> Booking:
        """Raises BookingNotFound."""
        pass

    @abstractmethod
    async def cancel(self, booking_id: str, user_id: Optional[str] = None, strict: bool = False) -> Booking:
        """
        Mark a booking cancelled and release its seats.

        Cancelling an already cancelled booking is a no-op that returns the
        booking, unless strict=True, in which case AlreadyCancelled is raised.
        Seats are released exactly once however many times this is called.

        Raises:
            BookingNotFound: If absent, or not owned by user_id when given.
            AlreadyCancelled: Only with strict=True.
        """
        pass
