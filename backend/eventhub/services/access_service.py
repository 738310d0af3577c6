"""
Role lookups over the user_roles table.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.logging import get_logger
from eventhub.models.user import UserRole
from eventhub.services.interfaces.access import AccessControl

logger = get_logger(__name__)

ADMIN_ROLE = "admin"


class SqlAccessControl(AccessControl):

    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_admin(self, user_id: str) -> bool:
        result = await self.db.execute(
            select(UserRole.id).where(UserRole.user_id == user_id, UserRole.role == ADMIN_ROLE)
        )
        return result.first() is not None


async def grant_role(db: AsyncSession, user_id: str, role: str) -> UserRole:
    """Idempotently give a user a role."""
    result = await db.execute(
        select(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
    )
    existing = result.scalar_one_or_none()
    if existing:
        return existing

    user_role = UserRole(user_id=user_id, role=role)
    db.add(user_role)
    await db.flush()
    logger.info("role_granted", user_id=user_id, role=role)
    return user_role
