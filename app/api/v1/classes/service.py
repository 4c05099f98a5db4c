from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.classes.schemas import CreateClassRequest, UpdateClassRequest
from app.core.exceptions import AppException
from app.models.enums import Role
from app.models.school_class import SchoolClass
from app.models.user import User


class ClassService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _ensure_teacher_exists(self, user_id: UUID | None) -> None:
        if user_id is None:
            return
        if await self.db.get(User, user_id) is None:
            AppException().raise_404(f"User with id {user_id} not found")

    async def create_class(self, data: CreateClassRequest) -> SchoolClass:
        await self._ensure_teacher_exists(data.user_id)
        school_class = SchoolClass(
            class_name=data.class_name.strip(),
            sheet_id=data.sheet_id,
            user_id=data.user_id,
        )
        self.db.add(school_class)
        await self.db.commit()
        await self.db.refresh(school_class)
        return school_class

    async def get_class(self, class_id: UUID) -> SchoolClass:
        school_class = await self.db.get(SchoolClass, class_id)
        if not school_class:
            AppException().raise_404("Class not found")
        return school_class

    async def get_all_classes(self, current_user: User) -> List[SchoolClass]:
        """Admins see every class; teachers only the classes they own."""
        query = select(SchoolClass).order_by(SchoolClass.class_name)
        if current_user.role != Role.admin.value:
            query = query.where(SchoolClass.user_id == current_user.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_class(self, class_id: UUID, data: UpdateClassRequest) -> SchoolClass:
        school_class = await self.get_class(class_id)
        update_data = data.model_dump(exclude_unset=True)
        if "user_id" in update_data:
            await self._ensure_teacher_exists(update_data["user_id"])
        for field, value in update_data.items():
            setattr(school_class, field, value)
        await self.db.commit()
        await self.db.refresh(school_class)
        return school_class
