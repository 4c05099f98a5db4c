from datetime import datetime
from typing import AsyncGenerator
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import async_session_maker
from app.core.security import decode_access_token
from app.core.exceptions import AppException
from app.models.user import User
from app.models.enums import Role


bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """Resolve the staff user (admin or teacher) from the bearer JWT."""
    if credentials is None or not credentials.credentials:
        AppException().raise_401("Not authorized to access this route")
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        AppException().raise_401("Could not validate credentials")

    user_id = payload.get("sub")
    try:
        user_uuid = UUID(user_id)
    except (ValueError, TypeError):
        AppException().raise_401("Could not validate credentials")

    user = await db.get(User, user_uuid)
    if user is None:
        AppException().raise_401("Could not validate credentials")
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        AppException().raise_400("Inactive user")
    return current_user


async def get_current_active_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    if current_user.role != Role.admin.value:
        AppException().raise_403(f"User role {current_user.role} is not authorized to access this route")
    return current_user


def get_now() -> datetime:
    """Wall clock for request handlers (local time); overridden in tests."""
    return datetime.now()
