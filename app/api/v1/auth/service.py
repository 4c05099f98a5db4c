from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.auth.schemas import UserInfo
from app.core.security import verify_password
from app.models.enums import Role
from app.models.school_class import SchoolClass
from app.models.user import User


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        user = result.scalar_one_or_none()
        if user is None or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def get_user_info(self, user: User) -> UserInfo:
        info = UserInfo(id=user.id, name=user.name, email=user.email, role=user.role)
        if user.role == Role.teacher.value:
            result = await self.db.execute(
                select(SchoolClass).where(SchoolClass.user_id == user.id).limit(1)
            )
            school_class = result.scalar_one_or_none()
            if school_class:
                info.class_id = school_class.id
                info.class_name = school_class.class_name
                info.sheet_id = school_class.sheet_id
        return info
