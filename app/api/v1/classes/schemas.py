from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class CreateClassRequest(BaseModel):
    class_name: str = Field(..., min_length=1, max_length=20, description="Class name (max 20 characters)")
    sheet_id: Optional[str] = Field(None, description="External spreadsheet id (stored, not used)")
    user_id: Optional[UUID] = Field(None, description="Teacher who owns the class")


class UpdateClassRequest(BaseModel):
    class_name: Optional[str] = Field(None, min_length=1, max_length=20)
    sheet_id: Optional[str] = None
    user_id: Optional[UUID] = None


class ClassResponse(BaseModel):
    id: UUID
    class_name: str
    sheet_id: Optional[str] = None
    user_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
