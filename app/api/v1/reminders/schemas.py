from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.cron.payment_reminders import SweepResult


class ReminderRunResponse(BaseModel):
    """Per-month counts of an immediate reminder run."""
    ran_at: datetime
    sweeps: List[SweepResult]


class NotificationLogResponse(BaseModel):
    id: UUID
    payment_record_id: UUID
    sent_at: datetime
    type: str
    success: bool
    error_message: Optional[str] = None

    class Config:
        from_attributes = True


class NotificationLogListResponse(BaseModel):
    items: List[NotificationLogResponse]
    total: int = Field(..., description="Total matching entries before pagination")
