from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.reminders.schemas import (
    NotificationLogListResponse,
    NotificationLogResponse,
    ReminderRunResponse,
)
from app.core.deps import get_db, get_current_active_admin_user, get_current_active_user, get_now
from app.cron.payment_reminders import run_all_reminders_now
from app.models.enums import Role
from app.models.notification_log import NotificationLog
from app.models.payment_record import PaymentRecord
from app.models.school_class import SchoolClass
from app.models.student import Student
from app.models.user import User

router = APIRouter()


@router.post(
    "/run",
    response_model=ReminderRunResponse,
    status_code=status.HTTP_200_OK,
    summary="Run reminders now (admin)",
    description="Send reminders for every unpaid record of the current and previous month, "
                "ignoring the reminder-day schedule. Admin only.",
    dependencies=[Depends(get_current_active_admin_user)],
)
async def run_reminders_now(now: datetime = Depends(get_now)):
    # ReminderRunError is answered with 503 by the app-level handler.
    sweeps = await run_all_reminders_now(now)
    return ReminderRunResponse(ran_at=now, sweeps=sweeps)


@router.get(
    "/logs",
    response_model=NotificationLogListResponse,
    summary="Reminder attempt log",
    description="Notification log entries, newest first. Teachers only see logs for the classes they own.",
)
async def get_notification_logs(
    payment_record_id: Optional[UUID] = Query(None, description="Filter by payment record"),
    success: Optional[bool] = Query(None, description="Filter by outcome"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    query = select(NotificationLog)
    if current_user.role != Role.admin.value:
        query = (
            query.join(PaymentRecord, NotificationLog.payment_record_id == PaymentRecord.id)
            .join(Student, PaymentRecord.student_id == Student.id)
            .join(SchoolClass, Student.class_id == SchoolClass.id)
            .where(SchoolClass.user_id == current_user.id)
        )
    if payment_record_id is not None:
        query = query.where(NotificationLog.payment_record_id == payment_record_id)
    if success is not None:
        query = query.where(NotificationLog.success == success)
    total = await db.scalar(select(func.count()).select_from(query.subquery())) or 0
    result = await db.execute(query.order_by(NotificationLog.sent_at.desc()).offset(skip).limit(limit))
    items = [NotificationLogResponse.model_validate(log) for log in result.scalars().all()]
    return NotificationLogListResponse(items=items, total=total)
