from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.auth.schemas import LoginRequest, LoginResponse, UserInfo
from app.api.v1.auth.service import AuthService
from app.core.deps import get_db, get_current_active_user
from app.core.exceptions import AppException
from app.core.security import create_access_token
from app.models.user import User

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Staff login",
    description="Authenticate an admin or teacher and receive an access token.",
    tags=["auth"],
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    auth_service = AuthService(db)
    user = await auth_service.authenticate(data.email, data.password)
    if not user:
        AppException().raise_401("Invalid credentials")
    access_token = create_access_token(user_id=str(user.id), role=user.role)
    return LoginResponse(access_token=access_token, user=await auth_service.get_user_info(user))


@router.get(
    "/me",
    response_model=UserInfo,
    status_code=status.HTTP_200_OK,
    summary="Current user",
    tags=["auth"],
)
async def get_me(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    return await AuthService(db).get_user_info(current_user)
