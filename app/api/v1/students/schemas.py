from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.enums import MonthCode

EMAIL_PATTERN = r"^\w+([\.-]?\w+)*@\w+([\.-]?\w+)*(\.\w{2,3})+$"


class CreateStudentRequest(BaseModel):
    student_name: str = Field(..., min_length=1, description="Student full name")
    date_of_birth: date
    parent_contact_number: str = Field(..., min_length=1)
    parent_whatsapp_number: Optional[str] = None
    parent_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, description="Parent email")
    class_id: UUID


class UpdateStudentRequest(BaseModel):
    student_name: Optional[str] = Field(None, min_length=1)
    date_of_birth: Optional[date] = None
    parent_contact_number: Optional[str] = Field(None, min_length=1)
    parent_whatsapp_number: Optional[str] = None
    parent_email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    class_id: Optional[UUID] = None


class StudentResponse(BaseModel):
    id: UUID
    name: str
    dob: Optional[str] = Field(None, description="mm/dd/yyyy")
    parent_phone: Optional[str] = None
    parent_whatsapp: Optional[str] = None
    parent_email: Optional[str] = None
    class_name: Optional[str] = None
    status: str
    joined_at: Optional[str] = None


class StudentPaymentRow(BaseModel):
    """One student's payment record for the selected month."""
    id: UUID
    payment_record_id: UUID
    name: str
    dob: Optional[str] = None
    payment_date: Optional[str] = None
    last_reminder_date: Optional[str] = None
    status: str
    parent_phone: Optional[str] = None
    payment_status: str
    payment_marked_by: Optional[str] = None
    student_status: str
    amount: Optional[float] = None
    payment_due: Optional[int] = Field(None, description="Days outstanding; only set for unpaid records")


class StudentListResponse(BaseModel):
    count: int
    data: List[StudentPaymentRow]
    has_next_page: bool


class StudentStatsResponse(BaseModel):
    total: int
    paid: int
    unpaid: int


class UpdatePaymentStatusRequest(BaseModel):
    student_id: UUID
    new_status: Literal["paid", "not-paid"]
    month: MonthCode
    class_id: UUID
    amount: Optional[float] = Field(None, ge=0)

    @field_validator("month", mode="before")
    @classmethod
    def month_upper(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class UpdateAmountRequest(BaseModel):
    student_id: UUID
    amount: float = Field(..., ge=0)
    month: MonthCode
    class_id: UUID

    @field_validator("month", mode="before")
    @classmethod
    def month_upper(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class UpdateAmountResponse(BaseModel):
    amount: Optional[float] = None


class MessageResponse(BaseModel):
    message: str
