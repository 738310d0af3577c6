"""
Reservation coordinator wired to the SQL stores on one session, the way a
request sees it.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from eventhub.core.errors import AlreadyCancelled, BookingNotFound, StorageError
from eventhub.models import Booking
from eventhub.services.booking_service import ReservationCoordinator
from eventhub.services.inventory_service import SqlInventoryStore
from eventhub.services.ledger_service import SqlBookingLedger
from eventhub.services.query_service import SqlQueryFacade
from conftest import make_event


class FailingSqlLedger(SqlBookingLedger):

    async def append(self, booking):
        raise StorageError()


def sql_coordinator(db, ledger_class=SqlBookingLedger) -> ReservationCoordinator:
    inventory = SqlInventoryStore(db)
    return ReservationCoordinator(
        catalog=SqlQueryFacade(db),
        inventory=inventory,
        ledger=ledger_class(db, inventory),
        append_timeout=5.0,
    )


async def booking_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(Booking))).scalar()


@pytest.mark.asyncio
async def test_book_and_cancel(db_session, test_user):
    event = await make_event(db_session, total_seats=10, available_seats=10, price=Decimal("12.50"))
    coordinator = sql_coordinator(db_session)

    booking = await coordinator.book(event.id, test_user.id, 4)
    assert booking.total_amount == Decimal("50.00")
    assert booking.status == "confirmed"
    assert await coordinator.inventory.get_availability(event.id) == 6

    cancelled = await coordinator.cancel(booking.id, user_id=test_user.id)
    assert cancelled.status == "cancelled"
    assert await coordinator.inventory.get_availability(event.id) == 10

    again = await coordinator.cancel(booking.id, user_id=test_user.id)
    assert again.status == "cancelled"
    assert await coordinator.inventory.get_availability(event.id) == 10


@pytest.mark.asyncio
async def test_strict_cancel(db_session, test_user):
    event = await make_event(db_session, total_seats=5, available_seats=5)
    coordinator = sql_coordinator(db_session)
    booking = await coordinator.book(event.id, test_user.id, 1)

    await coordinator.ledger.cancel(booking.id)
    with pytest.raises(AlreadyCancelled):
        await coordinator.ledger.cancel(booking.id, strict=True)
    assert await coordinator.inventory.get_availability(event.id) == 5


@pytest.mark.asyncio
async def test_cancel_wrong_owner(db_session, test_user, other_user):
    event = await make_event(db_session, total_seats=5, available_seats=5)
    coordinator = sql_coordinator(db_session)
    booking = await coordinator.book(event.id, test_user.id, 2)

    with pytest.raises(BookingNotFound):
        await coordinator.cancel(booking.id, user_id=other_user.id)
    assert await coordinator.inventory.get_availability(event.id) == 3


@pytest.mark.asyncio
async def test_failed_append_releases_seats(db_session, test_user):
    event = await make_event(db_session, total_seats=10, available_seats=10)
    coordinator = sql_coordinator(db_session, ledger_class=FailingSqlLedger)

    with pytest.raises(StorageError):
        await coordinator.book(event.id, test_user.id, 3)

    assert await coordinator.inventory.get_availability(event.id) == 10
    assert await booking_count(db_session) == 0


@pytest.mark.asyncio
async def test_rejected_insert_rolls_back_savepoint_and_releases(db_session):
    """A constraint failure on INSERT leaves the session usable for the release."""
    event = await make_event(db_session, total_seats=10, available_seats=10)
    coordinator = sql_coordinator(db_session)

    # user_id is NOT NULL
    with pytest.raises(StorageError) as exc_info:
        await coordinator.book(event.id, None, 3)

    assert exc_info.value.cause is not None
    assert await coordinator.inventory.get_availability(event.id) == 10
    assert await booking_count(db_session) == 0


@pytest.mark.asyncio
async def test_listing_reflects_reservation_in_same_session(db_session, test_user):
    event = await make_event(db_session, total_seats=10, available_seats=10)
    coordinator = sql_coordinator(db_session)

    await coordinator.book(event.id, test_user.id, 7)

    upcoming = await SqlQueryFacade(db_session).list_upcoming_events()
    assert [e.available_seats for e in upcoming] == [3]
