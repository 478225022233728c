"""Email/password accounts and the auth state stream"""

from datetime import datetime
from typing import Callable, List, Optional

import structlog
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from digital_menu.models.user import User
from digital_menu.schemas.auth import UserResponse

logger = structlog.get_logger()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

AuthListener = Callable[[Optional[UserResponse]], None]


class AuthError(Exception):
    """Sign-in or sign-up rejected"""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash password"""
    return pwd_context.hash(password)


class AuthStateFeed:
    """Notifies listeners with the signed-in user, or None after sign-out"""

    def __init__(self):
        self._listeners: List[AuthListener] = []

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def emit(self, user: Optional[User]) -> None:
        identity = UserResponse.model_validate(user) if user is not None else None
        for listener in list(self._listeners):
            listener(identity)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def sign_up(db: AsyncSession, email: str, password: str) -> User:
    if await get_user_by_email(db, email) is not None:
        raise AuthError("Email already registered")

    user = User(email=email.lower(), hashed_password=get_password_hash(password))
    db.add(user)
    await db.commit()
    logger.info("User signed up", user_id=str(user.id))
    return user


async def sign_in(db: AsyncSession, email: str, password: str) -> User:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        raise AuthError("Incorrect email or password")

    user.last_login = datetime.utcnow()
    await db.commit()
    return user


async def store_refresh_token(db: AsyncSession, user: User, refresh_token: Optional[str]) -> None:
    user.refresh_token = refresh_token
    await db.commit()


async def sign_out(db: AsyncSession, user: User) -> None:
    """Invalidate the user's refresh token"""
    await store_refresh_token(db, user, None)
