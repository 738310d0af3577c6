"""
Profile read/update for the dashboard. A user can only touch their own row.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.errors import NotFound
from eventhub.core.logging import get_logger
from eventhub.models.profile import Profile
from eventhub.schemas.user import ProfileUpdate

logger = get_logger(__name__)


async def get_profile(db: AsyncSession, user_id: str) -> Profile:
    result = await db.execute(select(Profile).where(Profile.id == user_id))
    profile = result.scalar_one_or_none()
    if not profile:
        raise NotFound("Profile not found")
    return profile


async def update_profile(db: AsyncSession, user_id: str, data: ProfileUpdate) -> Profile:
    profile = await get_profile(db, user_id)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(profile, field, value)
    await db.flush()
    await db.refresh(profile)

    logger.info("profile_updated", user_id=user_id, fields=sorted(changes))
    return profile
