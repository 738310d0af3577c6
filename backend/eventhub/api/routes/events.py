"""
Public event endpoints with Redis caching on list operations.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from eventhub.api.deps import get_query_facade
from eventhub.core.config import get_settings
from eventhub.core.logging import get_logger
from eventhub.schemas.event import EventDetailResponse, EventListResponse, EventResponse
from eventhub.services.cache_service import (
    get_cached, set_cached, make_featured_key, make_upcoming_key,
)
from eventhub.services.query_service import SqlQueryFacade

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


@router.get("/", response_model=EventListResponse)
async def list_events_endpoint(
    search: Optional[str] = Query(None, max_length=200),
    category_id: Optional[str] = Query(None),
    facade: SqlQueryFacade = Depends(get_query_facade),
):
    """
    Upcoming events, soonest first, optionally filtered by a text search
    over title and description and by category.
    Results are cached in Redis; bookings and admin edits invalidate them.
    """
    key = make_upcoming_key(search, category_id)
    cached = await get_cached(key)
    if cached is not None:
        logger.info("events_list_cache_hit", key=key)
        return EventListResponse(events=cached, total=len(cached), cached=True)

    events = await facade.list_upcoming_events(search_text=search, category_id=category_id)
    payload = [EventResponse.model_validate(e).model_dump(mode="json") for e in events]
    await set_cached(key, payload)

    return EventListResponse(events=payload, total=len(payload), cached=False)


@router.get("/featured", response_model=list[EventResponse])
async def list_featured_endpoint(
    limit: Optional[int] = Query(None, ge=1, le=50),
    facade: SqlQueryFacade = Depends(get_query_facade),
):
    """Featured upcoming events for the home page."""
    limit = limit or get_settings().FEATURED_EVENTS_LIMIT
    key = make_featured_key(limit)
    cached = await get_cached(key)
    if cached is not None:
        return cached

    events = await facade.list_featured(limit)
    payload = [EventResponse.model_validate(e).model_dump(mode="json") for e in events]
    await set_cached(key, payload)
    return payload


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event_endpoint(
    event_id: str,
    facade: SqlQueryFacade = Depends(get_query_facade),
):
    """Single event with category and organizer. Not cached (live seat count)."""
    return await facade.get_event(event_id)
