"""
Reservation coordinator: one booking request, all or nothing.

FLOW
====

  1. Validate tickets_count (positive int)          -> InvalidRequest
  2. Load the event through the query facade        -> EventNotFound
     Only upcoming events can be booked             -> EventNotBookable
  3. inventory.reserve(event, n)                    -> InsufficientInventory
     (atomic compare-and-decrement, nothing changed on failure)
  4. ledger.append(confirmed booking)
  5. If step 4 fails for any reason (StorageError, timeout, task
     cancellation) the seats taken in step 3 are released before the
     error surfaces. This is the only recovery the coordinator performs.

Why reserve before append:
  Writing the booking first and decrementing afterwards leaves a window in
  which two bookings can both be recorded against the last seats, and a
  failed decrement leaves a booking nobody paid seats for. Reserving first
  means the counter is the admission decision; the ledger entry can only
  follow a successful decrement, and a failed append is undone by a release.

Where the store supports transactions (SQL), steps 3-5 also share the
request transaction, so a crash between them is rolled back by the database.
"""

import asyncio
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Optional

from eventhub.core.errors import (
    AlreadyCancelled, DomainError, EventNotBookable, InvalidRequest, StorageError,
)
from eventhub.core.logging import get_logger
from eventhub.core.metrics import (
    booked_seats, booking_latency, inventory_compensation_failures,
    record_booking_attempt, record_cancellation, record_compensation,
)
from eventhub.models.booking import Booking, BookingStatus
from eventhub.models.event import EventStatus
from eventhub.services.interfaces.catalog import QueryFacade
from eventhub.services.interfaces.inventory import InventoryStore
from eventhub.services.interfaces.ledger import BookingLedger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def compute_total_amount(price, tickets_count: int) -> Decimal:
    """
    tickets_count x unit price, in currency units.

    The unit price is truncated to cents first, then the product is rounded
    half-up to cents (never half-even).
    """
    unit_price = Decimal(str(price)).quantize(CENTS, rounding=ROUND_DOWN)
    return (unit_price * tickets_count).quantize(CENTS, rounding=ROUND_HALF_UP)


def validate_tickets_count(tickets_count) -> int:
    if isinstance(tickets_count, bool) or not isinstance(tickets_count, int) or tickets_count <= 0:
        raise InvalidRequest("tickets_count must be a positive integer")
    return tickets_count


class ReservationCoordinator:
    """
    Orchestrates booking and cancellation over injected stores.

    Holds no state of its own; build one per request (SQL) or share one
    across tasks (memory).
    """

    def __init__(
        self,
        catalog: QueryFacade,
        inventory: InventoryStore,
        ledger: BookingLedger,
        append_timeout: Optional[float] = None,
    ):
        self.catalog = catalog
        self.inventory = inventory
        self.ledger = ledger
        self.append_timeout = append_timeout

    async def book(self, event_id: str, user_id: str, tickets_count: int) -> Booking:
        try:
            validate_tickets_count(tickets_count)
            with booking_latency.time():
                booking = await self._book(event_id, user_id, tickets_count)
        except DomainError as e:
            record_booking_attempt(e.code.value.lower())
            raise

        record_booking_attempt("success")
        booked_seats.inc(tickets_count)
        return booking

    async def _book(self, event_id: str, user_id: str, tickets_count: int) -> Booking:
        event = await self.catalog.get_event(event_id)
        if event.status != EventStatus.UPCOMING.value:
            logger.info("booking_rejected", event_id=event_id, reason="not_bookable", status=event.status)
            raise EventNotBookable(event_id, event.status)

        total_amount = compute_total_amount(event.price, tickets_count)

        remaining = await self.inventory.reserve(event_id, tickets_count)

        booking = Booking(
            event_id=event_id,
            user_id=user_id,
            tickets_count=tickets_count,
            total_amount=total_amount,
            status=BookingStatus.CONFIRMED.value,
        )
        try:
            booking = await asyncio.wait_for(self.ledger.append(booking), timeout=self.append_timeout)
        except asyncio.TimeoutError as e:
            await self._compensate(event_id, tickets_count, reason="timeout")
            raise StorageError("Booking timed out, please try again later", cause=e) from e
        except BaseException as e:
            # StorageError, task cancellation, or anything the store leaked
            await self._compensate(event_id, tickets_count, reason=type(e).__name__)
            raise

        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=user_id,
            event_id=event_id,
            tickets=tickets_count,
            total_amount=str(total_amount),
            remaining=remaining,
        )
        return booking

    async def _compensate(self, event_id: str, tickets_count: int, reason: str) -> None:
        record_compensation(reason)
        try:
            # Shielded so a second cancellation can't interrupt the release
            restored = await asyncio.shield(self.inventory.release(event_id, tickets_count))
        except Exception:
            inventory_compensation_failures.inc()
            logger.exception(
                "inventory_compensation_failed",
                event_id=event_id,
                seats=tickets_count,
                reason=reason,
            )
            raise
        logger.warning(
            "inventory_compensated",
            event_id=event_id,
            seats=tickets_count,
            reason=reason,
            available=restored,
        )

    async def cancel(self, booking_id: str, user_id: Optional[str] = None) -> Booking:
        """
        Cancel a booking and return its seats. Repeating the call is a
        no-op that returns the already cancelled booking.
        """
        try:
            booking = await self.ledger.cancel(booking_id, user_id=user_id, strict=True)
        except AlreadyCancelled:
            record_cancellation(False)
            return await self.ledger.get(booking_id)

        record_cancellation(True)
        return booking
