"""
Request-scoped wiring of the booking components.

Each request gets its own stores bound to its own AsyncSession; nothing
here is a process-wide singleton.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.config import get_settings
from eventhub.core.errors import PermissionDenied
from eventhub.core.logging import get_logger
from eventhub.core.security import get_current_user_id
from eventhub.db.session import get_db
from eventhub.services.access_service import SqlAccessControl
from eventhub.services.booking_service import ReservationCoordinator
from eventhub.services.inventory_service import SqlInventoryStore
from eventhub.services.ledger_service import SqlBookingLedger
from eventhub.services.query_service import SqlQueryFacade

logger = get_logger(__name__)


async def get_query_facade(db: AsyncSession = Depends(get_db)) -> SqlQueryFacade:
    return SqlQueryFacade(db)


async def get_coordinator(db: AsyncSession = Depends(get_db)) -> ReservationCoordinator:
    inventory = SqlInventoryStore(db)
    return ReservationCoordinator(
        catalog=SqlQueryFacade(db),
        inventory=inventory,
        ledger=SqlBookingLedger(db, inventory),
        append_timeout=get_settings().BOOKING_APPEND_TIMEOUT_SECONDS,
    )


async def require_admin(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> str:
    """The single admin gate. Returns the admin's user id."""
    if not await SqlAccessControl(db).is_admin(user_id):
        logger.warning("admin_access_denied", user_id=user_id)
        raise PermissionDenied()
    return user_id
