"""
Admin endpoints: event management and dashboard stats.
Every route goes through require_admin.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.api.deps import get_query_facade, require_admin
from eventhub.db.session import get_db
from eventhub.schemas.admin import AdminStatsResponse
from eventhub.schemas.event import EventCreate, EventResponse
from eventhub.services.cache_service import invalidate_event_cache
from eventhub.services.event_service import create_event, delete_event, get_admin_stats
from eventhub.services.query_service import SqlQueryFacade

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/events", response_model=list[EventResponse])
async def list_all_events_endpoint(
    _: str = Depends(require_admin),
    facade: SqlQueryFacade = Depends(get_query_facade),
):
    """Every event, newest first, regardless of status."""
    return await facade.list_all_events()


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    admin_id: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    event = await create_event(db, event_data, organizer_id=admin_id)
    await db.commit()
    await invalidate_event_cache()
    return event


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: str,
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await delete_event(db, event_id)
    await db.commit()
    await invalidate_event_cache()


@router.get("/stats", response_model=AdminStatsResponse)
async def stats_endpoint(
    _: str = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await get_admin_stats(db)
