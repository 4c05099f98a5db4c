from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.classes.schemas import ClassResponse, CreateClassRequest, UpdateClassRequest
from app.api.v1.classes.service import ClassService
from app.core.deps import get_db, get_current_active_user, get_current_active_admin_user
from app.models.user import User

router = APIRouter()


@router.post(
    "/",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a class",
    description="Create a class, optionally owned by a teacher. Admin only.",
    dependencies=[Depends(get_current_active_admin_user)],
)
async def create_class(
    data: CreateClassRequest,
    db: AsyncSession = Depends(get_db),
):
    school_class = await ClassService(db).create_class(data)
    return ClassResponse.model_validate(school_class)


@router.get(
    "/",
    response_model=List[ClassResponse],
    summary="List classes",
)
async def get_all_classes(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    classes = await ClassService(db).get_all_classes(current_user)
    return [ClassResponse.model_validate(c) for c in classes]


@router.get(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Get class details",
    dependencies=[Depends(get_current_active_user)],
)
async def get_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    school_class = await ClassService(db).get_class(class_id)
    return ClassResponse.model_validate(school_class)


@router.put(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
    description="Rename a class or change its teacher. Admin only.",
    dependencies=[Depends(get_current_active_admin_user)],
)
async def update_class(
    class_id: UUID,
    data: UpdateClassRequest,
    db: AsyncSession = Depends(get_db),
):
    school_class = await ClassService(db).update_class(class_id, data)
    return ClassResponse.model_validate(school_class)
