"""
Tuition reminder dispatch: one SMS attempt per call for one payment record.
Every attempt for an active student is written to NotificationLog, successful or not.
There is no duplicate prevention here; the reminder day policy decides when to call.
"""
import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.due_dates import due_label
from app.core.sms_client import get_sms_client
from app.core.utils import format_amount, to_e164_or_none
from app.models.enums import NotificationType, StudentStatus
from app.models.notification_log import NotificationLog
from app.models.payment_record import PaymentRecord

logger = logging.getLogger(__name__)

INVALID_PHONE_MESSAGE = "Invalid phone number"


def build_reminder_message(student_name: str, amount: str, due_date_str: str) -> str:
    return (
        "Dear Parent/Student,\n"
        f"Tuition fees for {student_name} are due. Kindly settle the payment of {amount} "
        f"by {due_date_str}.\n"
        "Thank you,\n"
        f"{settings.SCHOOL_NAME}"
    )


async def send_reminder_for_record(
    db: AsyncSession,
    record: PaymentRecord,
    notification_type: NotificationType | str,
    now: datetime,
    transport=None,
) -> NotificationLog | None:
    """
    Attempt one reminder for `record` (student must be loaded) and log the outcome.
    Returns the NotificationLog written, or None when the student is inactive (nothing logged).
    On success last_reminder_at is set to `now` in the same commit as the log entry.
    """
    type_value = NotificationType(notification_type).value
    student = record.student
    if student is None or student.status == StudentStatus.inactive.value:
        logger.debug("Skipping reminder for record %s: student inactive or missing", record.id)
        return None

    to = to_e164_or_none(student.parent_contact_number)
    if not to:
        logger.error(
            "Invalid phone number for SMS: student_id=%s raw=%s",
            student.id, student.parent_contact_number,
        )
        log_entry = NotificationLog(
            payment_record_id=record.id,
            type=type_value,
            success=False,
            error_message=INVALID_PHONE_MESSAGE,
            sent_at=now,
        )
        db.add(log_entry)
        await db.commit()
        return log_entry

    body = build_reminder_message(
        student_name=student.student_name,
        amount=format_amount(record.amount),
        due_date_str=due_label(record.month, record.year),
    )
    transport = transport or get_sms_client()

    try:
        await transport.send(to, body)
    except Exception as e:
        error_message = str(e) or e.__class__.__name__
        logger.error(
            "SMS_FAILED student_id=%s to=%s type=%s error=%s",
            student.id, to, type_value, error_message,
        )
        log_entry = NotificationLog(
            payment_record_id=record.id,
            type=type_value,
            success=False,
            error_message=error_message[:500],
            sent_at=now,
        )
        db.add(log_entry)
        await db.commit()
        return log_entry

    log_entry = NotificationLog(
        payment_record_id=record.id,
        type=type_value,
        success=True,
        sent_at=now,
    )
    record.last_reminder_at = now
    db.add(log_entry)
    db.add(record)
    await db.commit()
    logger.info(
        "SMS_SENT student_id=%s to=%s type=%s payment_record_id=%s",
        student.id, to, type_value, record.id,
    )
    return log_entry
