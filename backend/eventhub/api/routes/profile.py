"""
The authenticated user's own profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.security import get_current_user_id
from eventhub.db.session import get_db
from eventhub.schemas.user import ProfileResponse, ProfileUpdate
from eventhub.services.profile_service import get_profile, update_profile

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/", response_model=ProfileResponse)
async def get_profile_endpoint(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    return await get_profile(db, user_id)


@router.put("/", response_model=ProfileResponse)
async def update_profile_endpoint(
    profile_data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Update display name and phone. Email is owned by the account."""
    return await update_profile(db, user_id, profile_data)
