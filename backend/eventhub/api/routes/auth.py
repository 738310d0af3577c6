"""
Account endpoints: sign up, sign in, and who-am-I.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.errors import NotFound
from eventhub.core.security import get_current_user_id
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.user import Token, UserCreate, UserLogin, UserResponse
from eventhub.services.auth_service import authenticate_user, register_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create an account with its profile and the default role. 409 on a taken email."""
    return await register_user(db, user_data)


@router.post("/login", response_model=Token)
async def login_endpoint(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    return Token(access_token=await authenticate_user(db, login_data))


@router.get("/me", response_model=UserResponse)
async def me_endpoint(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user
