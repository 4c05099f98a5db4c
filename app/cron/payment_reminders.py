"""
Cron job: send SMS reminders for unpaid tuition.
Current month (type Scheduled) on the 5th, 10th, 20th and every second day after the 20th;
previous month (type MonthFallback) on the 1st and 2nd. The immediate run ignores the day checks
and sweeps both months. Per-record outcomes live in NotificationLog.
"""
import logging
from datetime import datetime
from typing import Iterable
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

import app.models.registry  # noqa: F401
from app.core.database import get_async_session_maker_instance
from app.core.due_dates import get_month_year, get_prev_month_year
from app.core.eligibility import month_records_query
from app.core.exceptions import ReminderRunError
from app.core.notification_service import send_reminder_for_record
from app.core.reminder_policy import is_current_month_reminder_day, is_prev_month_reminder_day
from app.models.enums import NotificationType, PaymentStatus
from app.models.payment_record import PaymentRecord

logger = logging.getLogger(__name__)


class SweepResult(BaseModel):
    """Counts for one month bucket of a reminder run."""
    notification_type: str
    month: str
    year: int
    processed: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0


async def fetch_unpaid_records(
    session: AsyncSession,
    month: str,
    year: int,
    student_ids: Iterable[UUID] | None = None,
) -> list[PaymentRecord]:
    """Not-paid records of eligible students for (month, year), with the student loaded."""
    query = month_records_query(month, year, PaymentStatus.not_paid.value).options(
        selectinload(PaymentRecord.student)
    )
    if student_ids is not None:
        query = query.where(PaymentRecord.student_id.in_(list(student_ids)))
    result = await session.execute(query)
    return list(result.scalars().all())


async def _run_sweep(
    month: str,
    year: int,
    notification_type: NotificationType,
    now: datetime,
    session_maker=None,
    transport=None,
) -> SweepResult:
    session_maker = session_maker or get_async_session_maker_instance()
    try:
        async with session_maker() as session:
            records = await fetch_unpaid_records(session, month, year)
    except (SQLAlchemyError, OSError) as e:
        # OSError: the driver could not reach the database (refused, DNS, timeout).
        logger.exception("Reminders: could not load unpaid records for %s %s", month, year)
        raise ReminderRunError(f"Could not load unpaid records for {month} {year}: {e}") from e

    result = SweepResult(notification_type=notification_type.value, month=month, year=year)
    logger.info(
        "Reminders: %s sweep for %s %s started, count=%s",
        notification_type.value, month, year, len(records),
    )

    # One session per record: a failure rolls back that record only.
    for record in records:
        result.processed += 1
        async with session_maker() as session:
            try:
                session.add(record)
                log_entry = await send_reminder_for_record(session, record, notification_type, now, transport)
            except Exception as e:
                result.failed += 1
                await session.rollback()
                logger.exception("Reminders: error processing payment record %s: %s", record.id, e)
                continue
        if log_entry is None:
            result.skipped += 1
        elif log_entry.success:
            result.sent += 1
        else:
            result.failed += 1

    logger.info(
        "Reminders: %s sweep for %s %s finished: processed=%s sent=%s failed=%s skipped=%s",
        notification_type.value, month, year,
        result.processed, result.sent, result.failed, result.skipped,
    )
    return result


async def run_current_month_sweep(now: datetime, session_maker=None, transport=None) -> SweepResult:
    month, year = get_month_year(now)
    return await _run_sweep(month, year, NotificationType.scheduled, now, session_maker, transport)


async def run_prev_month_sweep(now: datetime, session_maker=None, transport=None) -> SweepResult:
    month, year = get_prev_month_year(now)
    return await _run_sweep(month, year, NotificationType.month_fallback, now, session_maker, transport)


async def _run_sweeps(sweeps, now: datetime, session_maker, transport) -> list[SweepResult]:
    """Run each sweep even if an earlier one failed to load; re-raise the first failure at the end."""
    results: list[SweepResult] = []
    first_error: ReminderRunError | None = None
    for sweep in sweeps:
        try:
            results.append(await sweep(now, session_maker=session_maker, transport=transport))
        except ReminderRunError as e:
            first_error = first_error or e
    if first_error is not None:
        raise first_error
    return results


async def run_scheduled_reminders(now: datetime | None = None, session_maker=None, transport=None) -> list[SweepResult]:
    """Daily pass: each sweep runs only on its reminder days."""
    now = now or datetime.now()
    sweeps = []
    if is_current_month_reminder_day(now):
        sweeps.append(run_current_month_sweep)
    if is_prev_month_reminder_day(now):
        sweeps.append(run_prev_month_sweep)
    if not sweeps:
        logger.info("Reminders: %s is not a reminder day, nothing to send", now.date())
        return []
    return await _run_sweeps(sweeps, now, session_maker, transport)


async def run_all_reminders_now(now: datetime | None = None, session_maker=None, transport=None) -> list[SweepResult]:
    """Manual run: current and previous month regardless of the day of month."""
    now = now or datetime.now()
    logger.info("Reminders: immediate run started at %s", now)
    results = await _run_sweeps([run_current_month_sweep, run_prev_month_sweep], now, session_maker, transport)
    logger.info("Reminders: immediate run completed")
    return results
