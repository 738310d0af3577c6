"""
Read-only query facade over events, bookings and categories.

Reads are eventually consistent with respect to concurrent reservations:
a listed seat count may be stale by the time a booking is attempted.
The reservation coordinator is the only source of truth for admission.
"""

from abc import ABC, abstractmethod
from typing import Optional

from eventhub.models.booking import Booking
from eventhub.models.category import Category
from eventhub.models.event import Event


class QueryFacade(ABC):

    @abstractmethod
    async def list_upcoming_events(
        self,
        search_text: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[Event]:
        """
        Upcoming events ordered by start_date ascending.

        search_text is a case-insensitive substring match on title or
        description; category_id is an exact match. Both optional, ANDed.
        """
        pass

    @abstractmethod
    async def list_featured(self, limit: int) -> list[Event]:
        """Featured upcoming events, soonest first, at most `limit`."""
        pass

    @abstractmethod
    async def get_event(self, event_id: str) -> Event:
        """Event with category and organizer resolved. Raises EventNotFound."""
        pass

    @abstractmethod
    async def list_user_bookings(self, user_id: str) -> list[Booking]:
        """A user's bookings with event and category, newest first."""
        pass

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        pass

    @abstractmethod
    async def list_all_events(self) -> list[Event]:
        """Every event regardless of status, most recently created first."""
        pass
