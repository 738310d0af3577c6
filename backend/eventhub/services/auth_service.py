"""
Account registration and password login.

A new account always gets a profile row (the dashboard and organizer
views read names from profiles, never from users) and the plain "user"
role. Admin is granted separately.
"""

from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.core.logging import get_logger
from eventhub.core.security import create_access_token, hash_password, verify_password
from eventhub.models.profile import Profile
from eventhub.models.user import User
from eventhub.schemas.user import UserCreate, UserLogin
from eventhub.services.access_service import grant_role

logger = get_logger(__name__)

DEFAULT_ROLE = "user"


def _email_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")


async def _find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """Create user, profile and default role. 409 if the email is in use."""
    if await _find_by_email(db, user_data.email):
        logger.warning("registration_rejected", reason="email_exists", email=user_data.email)
        raise _email_taken()

    user = User(email=user_data.email, hashed_password=hash_password(user_data.password))
    try:
        async with db.begin_nested():
            db.add(user)
            await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same address
        logger.warning("registration_rejected", reason="email_race", email=user_data.email)
        raise _email_taken()

    db.add(Profile(id=user.id, full_name=user_data.full_name, email=user_data.email))
    await grant_role(db, user.id, DEFAULT_ROLE)
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> str:
    """Check credentials and issue an access token (401 bad credentials, 403 inactive)."""
    user = await _find_by_email(db, login_data.email)

    if user is None or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        logger.warning("login_rejected", user_id=user.id, reason="inactive")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")

    logger.info("user_logged_in", user_id=user.id)
    return create_access_token(data={"sub": user.id})
