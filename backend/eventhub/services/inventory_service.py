"""
SQL-backed seat inventory.

CONCURRENCY STRATEGY: Conditional UPDATE
========================================

Problem:
  Two users try to book the last seats simultaneously.
  Both read available_seats=2, both subtract 2, both succeed.
  Result: Overbooking.

Solution:
  The check and the decrement are one statement:

    UPDATE events
       SET available_seats = available_seats - :n, version = version + 1
     WHERE id = :event_id AND available_seats >= :n

  The database takes a row lock for the UPDATE and re-evaluates the WHERE
  clause against the latest committed row once the lock is granted, so
  concurrent reservations on the same event serialize on that row while
  reservations on other events proceed in parallel. rowcount == 0 means
  either the event is gone or there were not enough seats; a follow-up
  read tells the two apart.

  No retry loop is needed: unlike a version-compare, a failed conditional
  decrement is a real "not enough seats" answer, not a lost race.

  The CHECK constraint available_seats >= 0 stays as the last line of defence.
"""

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.errors import EventNotFound, InsufficientInventory, InvalidRequest, StorageError
from eventhub.core.logging import get_logger
from eventhub.models.event import Event
from eventhub.services.interfaces.inventory import InventoryStore

logger = get_logger(__name__)


class SqlInventoryStore(InventoryStore):
    """Inventory bound to one request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_availability(self, event_id: str) -> int:
        try:
            result = await self.db.execute(select(Event.available_seats).where(Event.id == event_id))
        except SQLAlchemyError as e:
            raise StorageError("Could not read seat availability", cause=e) from e
        available = result.scalar_one_or_none()
        if available is None:
            raise EventNotFound(event_id)
        return available

    async def reserve(self, event_id: str, count: int) -> int:
        if count <= 0:
            raise InvalidRequest("Seat count must be positive")

        try:
            update_result = await self.db.execute(
                update(Event)
                .where(
                    Event.id == event_id,
                    Event.available_seats >= count,
                )
                .values(
                    available_seats=Event.available_seats - count,
                    version=Event.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("inventory_reserve_error", event_id=event_id, error=str(e))
            raise StorageError("Could not reserve seats", cause=e) from e

        if update_result.rowcount == 0:
            # Raises EventNotFound if the row is missing altogether
            available = await self.get_availability(event_id)
            logger.warning(
                "inventory_insufficient",
                event_id=event_id,
                requested=count,
                available=available,
            )
            raise InsufficientInventory(event_id, count, available)

        remaining = await self.get_availability(event_id)
        logger.debug("inventory_reserved", event_id=event_id, seats=count, remaining=remaining)
        return remaining

    async def release(self, event_id: str, count: int) -> int:
        if count <= 0:
            raise InvalidRequest("Seat count must be positive")

        restored = Event.available_seats + count
        try:
            update_result = await self.db.execute(
                update(Event)
                .where(Event.id == event_id)
                .values(
                    available_seats=case(
                        (restored > Event.total_seats, Event.total_seats),
                        else_=restored,
                    ),
                    version=Event.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("inventory_release_error", event_id=event_id, error=str(e))
            raise StorageError("Could not release seats", cause=e) from e

        if update_result.rowcount == 0:
            raise EventNotFound(event_id)

        remaining = await self.get_availability(event_id)
        logger.debug("inventory_released", event_id=event_id, seats=count, remaining=remaining)
        return remaining
