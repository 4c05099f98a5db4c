from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, description="Staff email")
    password: str = Field(..., min_length=1, description="Staff password")


class UserInfo(BaseModel):
    """Logged-in staff user; teachers also get the class they own."""
    id: UUID
    name: str
    email: str
    role: str
    class_id: Optional[UUID] = None
    class_name: Optional[str] = None
    sheet_id: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
