"""
In-process implementations of the booking interfaces.

All three share one MemoryBackend. Seat counters are guarded by one
asyncio.Lock per event, created on first use; there is no lock spanning
events. Records are the same mapped classes the SQL stores use, kept as
transient (session-less) instances.

`latency` inserts an await between reading and writing the counter, which
is where a real store would suspend. Tests use it to force interleaving.
"""

import asyncio
import itertools
from datetime import datetime
from decimal import Decimal
from typing import Optional

from eventhub.core.errors import (
    AlreadyCancelled, BookingNotFound, EventNotFound, InsufficientInventory,
    InvalidRequest,
)
from eventhub.core.logging import get_logger
from eventhub.db.base import new_id, utcnow
from eventhub.models.booking import Booking, BookingStatus
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.models.profile import Profile
from eventhub.services.interfaces.access import AccessControl
from eventhub.services.interfaces.catalog import QueryFacade
from eventhub.services.interfaces.inventory import InventoryStore
from eventhub.services.interfaces.ledger import BookingLedger

logger = get_logger(__name__)


class MemoryBackend:
    """Tables and per-event locks for the in-memory stores."""

    def __init__(self):
        self.events: dict[str, Event] = {}
        self.bookings: dict[str, Booking] = {}
        self.categories: dict[str, Category] = {}
        self.profiles: dict[str, Profile] = {}
        self.admins: set[str] = set()
        self._locks: dict[str, asyncio.Lock] = {}
        # Insertion order breaks created_at ties
        self._sequence = itertools.count()
        self._order: dict[str, int] = {}

    def lock_for(self, event_id: str) -> asyncio.Lock:
        return self._locks.setdefault(event_id, asyncio.Lock())

    def next_sequence(self, record_id: str) -> int:
        self._order[record_id] = next(self._sequence)
        return self._order[record_id]

    def sequence_of(self, record_id: str) -> int:
        return self._order.get(record_id, -1)

    def add_category(self, name: str) -> Category:
        category = Category(id=new_id(), name=name, created_at=utcnow(), updated_at=utcnow())
        self.categories[category.id] = category
        return category

    def add_profile(self, user_id: Optional[str] = None, full_name: Optional[str] = None,
                    email: Optional[str] = None, phone: Optional[str] = None) -> Profile:
        profile = Profile(
            id=user_id or new_id(),
            full_name=full_name,
            email=email,
            phone=phone,
            created_at=utcnow(),
            updated_at=utcnow(),
        )
        self.profiles[profile.id] = profile
        return profile

    def add_event(
        self,
        title: str,
        start_date: datetime,
        total_seats: int,
        price: Decimal = Decimal("0.00"),
        available_seats: Optional[int] = None,
        status: str = EventStatus.UPCOMING.value,
        featured: bool = False,
        description: Optional[str] = None,
        category: Optional[Category] = None,
        organizer: Optional[Profile] = None,
        tags: Optional[list[str]] = None,
        **extra,
    ) -> Event:
        if total_seats <= 0:
            raise InvalidRequest("total_seats must be positive")
        available = total_seats if available_seats is None else available_seats
        if not 0 <= available <= total_seats:
            raise InvalidRequest("available_seats must be between 0 and total_seats")

        event = Event(
            id=new_id(),
            title=title,
            description=description,
            category_id=category.id if category else None,
            start_date=start_date,
            price=Decimal(str(price)),
            total_seats=total_seats,
            available_seats=available,
            status=status,
            featured=featured,
            tags=list(dict.fromkeys(tags or [])),
            organizer_id=organizer.id if organizer else None,
            version=1,
            created_at=utcnow(),
            updated_at=utcnow(),
            **extra,
        )
        event.category = category
        event.organizer = organizer
        self.events[event.id] = event
        self.next_sequence(event.id)
        return event

    def get_event(self, event_id: str) -> Event:
        event = self.events.get(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event


class MemoryInventoryStore(InventoryStore):

    def __init__(self, backend: MemoryBackend, latency: float = 0.0):
        self.backend = backend
        self.latency = latency

    async def get_availability(self, event_id: str) -> int:
        return self.backend.get_event(event_id).available_seats

    async def reserve(self, event_id: str, count: int) -> int:
        if count <= 0:
            raise InvalidRequest("Seat count must be positive")
        event = self.backend.get_event(event_id)

        async with self.backend.lock_for(event_id):
            available = event.available_seats
            if self.latency:
                await asyncio.sleep(self.latency)
            if count > available:
                logger.warning("inventory_insufficient", event_id=event_id, requested=count, available=available)
                raise InsufficientInventory(event_id, count, available)
            event.available_seats = available - count
            event.version += 1
            return event.available_seats

    async def release(self, event_id: str, count: int) -> int:
        if count <= 0:
            raise InvalidRequest("Seat count must be positive")
        event = self.backend.get_event(event_id)

        async with self.backend.lock_for(event_id):
            available = event.available_seats
            if self.latency:
                await asyncio.sleep(self.latency)
            event.available_seats = min(available + count, event.total_seats)
            event.version += 1
            return event.available_seats


class MemoryBookingLedger(BookingLedger):

    def __init__(self, backend: MemoryBackend, inventory: InventoryStore):
        self.backend = backend
        self.inventory = inventory

    async def append(self, booking: Booking) -> Booking:
        booking.id = booking.id or new_id()
        booking.created_at = booking.created_at or utcnow()
        booking.updated_at = booking.created_at
        booking.event = self.backend.events.get(booking.event_id)
        self.backend.bookings[booking.id] = booking
        self.backend.next_sequence(booking.id)
        return booking

    async def get(self, booking_id: str) -> Booking:
        booking = self.backend.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    async def cancel(self, booking_id: str, user_id: Optional[str] = None, strict: bool = False) -> Booking:
        booking = await self.get(booking_id)
        if user_id is not None and booking.user_id != user_id:
            raise BookingNotFound(booking_id)

        # No await between the check and the status write
        if booking.status == BookingStatus.CANCELLED.value:
            if strict:
                raise AlreadyCancelled(booking_id)
            return booking
        booking.status = BookingStatus.CANCELLED.value
        booking.updated_at = utcnow()

        await self.inventory.release(booking.event_id, booking.tickets_count)
        return booking


class MemoryQueryFacade(QueryFacade):

    def __init__(self, backend: MemoryBackend):
        self.backend = backend

    def _upcoming(self) -> list[Event]:
        return [e for e in self.backend.events.values() if e.status == EventStatus.UPCOMING.value]

    async def list_upcoming_events(
        self,
        search_text: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[Event]:
        events = self._upcoming()
        if search_text and search_text.strip():
            needle = search_text.strip().casefold()
            events = [
                e for e in events
                if needle in (e.title or "").casefold() or needle in (e.description or "").casefold()
            ]
        if category_id:
            events = [e for e in events if e.category_id == category_id]
        return sorted(events, key=lambda e: e.start_date)

    async def list_featured(self, limit: int) -> list[Event]:
        featured = [e for e in self._upcoming() if e.featured]
        return sorted(featured, key=lambda e: e.start_date)[:limit]

    async def get_event(self, event_id: str) -> Event:
        return self.backend.get_event(event_id)

    async def list_user_bookings(self, user_id: str) -> list[Booking]:
        bookings = [b for b in self.backend.bookings.values() if b.user_id == user_id]
        return sorted(
            bookings,
            key=lambda b: (b.created_at, self.backend.sequence_of(b.id)),
            reverse=True,
        )

    async def list_categories(self) -> list[Category]:
        return sorted(self.backend.categories.values(), key=lambda c: c.name)

    async def list_all_events(self) -> list[Event]:
        return sorted(
            self.backend.events.values(),
            key=lambda e: (e.created_at, self.backend.sequence_of(e.id)),
            reverse=True,
        )


class MemoryAccessControl(AccessControl):

    def __init__(self, backend: MemoryBackend):
        self.backend = backend

    async def is_admin(self, user_id: str) -> bool:
        return user_id in self.backend.admins
