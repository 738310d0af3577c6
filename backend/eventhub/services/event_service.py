"""
Admin-side event management: create, delete, aggregate stats.

Callers are expected to have passed the require_admin check already.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.errors import EventNotFound, InvalidRequest
from eventhub.core.logging import get_logger
from eventhub.models.booking import Booking, BookingStatus
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.schemas.event import EventCreate
from eventhub.services.query_service import SqlQueryFacade

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


async def create_event(db: AsyncSession, event_data: EventCreate, organizer_id: str) -> Event:
    """Create a new event with every seat available."""
    start_date = _as_utc(event_data.start_date)
    if start_date <= datetime.now(timezone.utc):
        raise InvalidRequest("Event start date must be in the future")
    if event_data.end_date is not None and _as_utc(event_data.end_date) < start_date:
        raise InvalidRequest("Event end date must not be before its start date")
    if event_data.category_id is not None and await db.get(Category, event_data.category_id) is None:
        raise InvalidRequest(f"Category {event_data.category_id} does not exist")

    event = Event(
        title=event_data.title,
        description=event_data.description,
        category_id=event_data.category_id,
        location=event_data.location,
        venue_name=event_data.venue_name,
        start_date=start_date,
        end_date=_as_utc(event_data.end_date) if event_data.end_date is not None else None,
        price=event_data.price,
        total_seats=event_data.total_seats,
        available_seats=event_data.total_seats,
        status=EventStatus.UPCOMING.value,
        featured=event_data.featured,
        tags=list(dict.fromkeys(event_data.tags)),
        organizer_id=organizer_id,
    )
    db.add(event)
    await db.flush()

    logger.info("event_created", event_id=event.id, title=event.title, seats=event.total_seats)
    # Re-read so category and organizer are loaded for the response
    return await SqlQueryFacade(db).get_event(event.id)


async def delete_event(db: AsyncSession, event_id: str) -> None:
    """Delete an event together with its bookings."""
    result = await db.execute(select(Event.id).where(Event.id == event_id))
    if result.scalar_one_or_none() is None:
        raise EventNotFound(event_id)

    bookings_deleted = await db.execute(delete(Booking).where(Booking.event_id == event_id))
    await db.execute(delete(Event).where(Event.id == event_id))

    logger.info("event_deleted", event_id=event_id, bookings_deleted=bookings_deleted.rowcount)


async def get_admin_stats(db: AsyncSession) -> dict:
    """Event count, booking count and revenue from confirmed bookings."""
    total_events = (await db.execute(select(func.count()).select_from(Event))).scalar()
    total_bookings = (await db.execute(select(func.count()).select_from(Booking))).scalar()
    revenue = (
        await db.execute(
            select(func.coalesce(func.sum(Booking.total_amount), 0))
            .where(Booking.status == BookingStatus.CONFIRMED.value)
        )
    ).scalar()

    return {
        "total_events": total_events or 0,
        "total_bookings": total_bookings or 0,
        "total_revenue": Decimal(str(revenue or 0)).quantize(Decimal("0.01")),
    }
