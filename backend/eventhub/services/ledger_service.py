"""
SQL-backed booking ledger.

append() runs inside a SAVEPOINT: if the INSERT fails, only the savepoint
is rolled back and the surrounding transaction (which already holds the
inventory decrement) stays usable, so the coordinator can release the
seats in the same session.

cancel() flips the status with a conditional UPDATE
(... WHERE status != 'cancelled'). Only the caller whose UPDATE matched
releases seats, so concurrent or repeated cancels release exactly once.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.errors import AlreadyCancelled, BookingNotFound, StorageError
from eventhub.core.logging import get_logger
from eventhub.db.base import utcnow
from eventhub.models.booking import Booking, BookingStatus
from eventhub.services.interfaces.inventory import InventoryStore
from eventhub.services.interfaces.ledger import BookingLedger

logger = get_logger(__name__)


class SqlBookingLedger(BookingLedger):

    def __init__(self, db: AsyncSession, inventory: InventoryStore):
        self.db = db
        self.inventory = inventory

    async def append(self, booking: Booking) -> Booking:
        try:
            async with self.db.begin_nested():
                self.db.add(booking)
                await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "ledger_append_failed",
                event_id=booking.event_id,
                user_id=booking.user_id,
                error=str(e),
            )
            raise StorageError(cause=e) from e

        logger.debug("ledger_appended", booking_id=booking.id, event_id=booking.event_id)
        return booking

    async def get(self, booking_id: str) -> Booking:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise BookingNotFound(booking_id)
        return booking

    async def cancel(self, booking_id: str, user_id: Optional[str] = None, strict: bool = False) -> Booking:
        booking = await self.get(booking_id)
        if user_id is not None and booking.user_id != user_id:
            # Someone else's booking is indistinguishable from a missing one
            raise BookingNotFound(booking_id)

        try:
            update_result = await self.db.execute(
                update(Booking)
                .where(
                    Booking.id == booking_id,
                    Booking.status != BookingStatus.CANCELLED.value,
                )
                .values(status=BookingStatus.CANCELLED.value, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("ledger_cancel_failed", booking_id=booking_id, error=str(e))
            raise StorageError("Booking could not be cancelled, please try again later", cause=e) from e

        if update_result.rowcount == 0:
            if strict:
                raise AlreadyCancelled(booking_id)
            logger.info("booking_cancel_noop", booking_id=booking_id, reason="already_cancelled")
            await self.db.refresh(booking)
            return booking

        await self.inventory.release(booking.event_id, booking.tickets_count)
        await self.db.refresh(booking)

        logger.info(
            "booking_cancelled",
            booking_id=booking.id,
            user_id=booking.user_id,
            event_id=booking.event_id,
            seats_restored=booking.tickets_count,
        )
        return booking
