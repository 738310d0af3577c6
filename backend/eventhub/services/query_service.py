"""
SQL read paths for listing, search and the user dashboard.

Queries use populate_existing so that rows already in the session's
identity map are refreshed: inventory UPDATEs bypass ORM synchronization,
and a listing must not show the seat count from before a booking made
earlier in the same request.
"""

from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventhub.core.errors import EventNotFound
from eventhub.models.booking import Booking
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.services.interfaces.catalog import QueryFacade


def _like_pattern(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlQueryFacade(QueryFacade):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _all(self, query) -> list:
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def list_upcoming_events(
        self,
        search_text: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[Event]:
        query = select(Event).where(Event.status == EventStatus.UPCOMING.value)

        if search_text and search_text.strip():
            pattern = _like_pattern(search_text.strip())
            query = query.where(
                or_(
                    Event.title.ilike(pattern, escape="\\"),
                    Event.description.ilike(pattern, escape="\\"),
                )
            )

        if category_id:
            query = query.where(Event.category_id == category_id)

        # Uses ix_events_status_start_date
        return await self._all(query.order_by(Event.start_date.asc()))

    async def list_featured(self, limit: int) -> list[Event]:
        query = (
            select(Event)
            .where(Event.featured.is_(True), Event.status == EventStatus.UPCOMING.value)
            .order_by(Event.start_date.asc())
            .limit(limit)
        )
        return await self._all(query)

    async def get_event(self, event_id: str) -> Event:
        result = await self.db.execute(
            select(Event)
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise EventNotFound(event_id)
        return event

    async def list_user_bookings(self, user_id: str) -> list[Booking]:
        query = (
            select(Booking)
            .options(selectinload(Booking.event).selectinload(Event.category))
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc())
        )
        return await self._all(query)

    async def list_categories(self) -> list[Category]:
        return await self._all(select(Category).order_by(Category.name.asc()))

    async def list_all_events(self) -> list[Event]:
        return await self._all(select(Event).order_by(Event.created_at.desc()))
