"""
Booking endpoints backed by the reservation coordinator.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.api.deps import get_coordinator, get_query_facade
from eventhub.db.session import get_db
from eventhub.schemas.booking import (
    BookingCreate, BookingResponse, BookingCancelResponse, UserBookingResponse,
)
from eventhub.services.booking_service import ReservationCoordinator
from eventhub.services.cache_service import invalidate_event_cache
from eventhub.services.query_service import SqlQueryFacade
from eventhub.core.security import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: str = Depends(get_current_user_id),
    coordinator: ReservationCoordinator = Depends(get_coordinator),
    db: AsyncSession = Depends(get_db),
):
    """
    Book tickets for an event.

    409 with code INSUFFICIENT_INVENTORY when fewer seats are left than
    requested (retry with fewer tickets), 503 STORAGE_ERROR when the booking
    could not be recorded (retry later, no seats were taken).
    """
    booking = await coordinator.book(booking_data.event_id, user_id, booking_data.tickets_count)
    # Commit first so a listing refilled after invalidation sees the new seat count
    await db.commit()
    await invalidate_event_cache()
    return booking


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking_endpoint(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    coordinator: ReservationCoordinator = Depends(get_coordinator),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release seats back to the event. Repeatable."""
    booking = await coordinator.cancel(booking_id, user_id=user_id)
    await db.commit()
    await invalidate_event_cache()
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking_id=booking.id,
        status=booking.status,
    )


@router.get("/", response_model=list[UserBookingResponse])
async def list_user_bookings(
    user_id: str = Depends(get_current_user_id),
    facade: SqlQueryFacade = Depends(get_query_facade),
):
    """The authenticated user's bookings, newest first."""
    return await facade.list_user_bookings(user_id)
