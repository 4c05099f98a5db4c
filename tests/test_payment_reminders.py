"""Tests for the reminder sweeps run by the daily cron and the immediate run."""

from datetime import date, datetime

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.exceptions import ReminderRunError
from app.cron.payment_reminders import (
    fetch_unpaid_records,
    run_all_reminders_now,
    run_scheduled_reminders,
)
from app.models.enums import StudentStatus
from app.models.notification_log import NotificationLog
from app.models.payment_record import PaymentRecord

pytestmark = pytest.mark.integration


async def _logs(session_maker) -> list[NotificationLog]:
    async with session_maker() as session:
        result = await session.execute(select(NotificationLog).order_by(NotificationLog.sent_at))
        return list(result.scalars().all())


class TestScheduledReminders:
    async def test_non_reminder_day_sends_nothing(self, session_maker, make_student, sms_transport):
        await make_student()

        sweeps = await run_scheduled_reminders(datetime(2024, 3, 15, 9, 0), session_maker, sms_transport)

        assert sweeps == []
        assert sms_transport.sent == []
        assert await _logs(session_maker) == []

    async def test_current_month_day_sends_scheduled(self, session_maker, make_student, sms_transport):
        await make_student(name="Ava Chen", phone="4165550001")
        await make_student(name="Ben Park", phone="4165550002")
        now = datetime(2024, 3, 20, 9, 0)

        sweeps = await run_scheduled_reminders(now, session_maker, sms_transport)

        assert len(sweeps) == 1
        sweep = sweeps[0]
        assert (sweep.notification_type, sweep.month, sweep.year) == ("Scheduled", "MAR", 2024)
        assert (sweep.processed, sweep.sent, sweep.failed, sweep.skipped) == (2, 2, 0, 0)
        logs = await _logs(session_maker)
        assert len(logs) == 2
        assert all(log.type == "Scheduled" and log.success for log in logs)
        assert all("MAR 2024" in body for _, body in sms_transport.sent)

    async def test_first_of_month_sends_previous_month_fallback(self, session_maker, make_student, sms_transport):
        await make_student()

        sweeps = await run_scheduled_reminders(datetime(2024, 3, 1, 9, 0), session_maker, sms_transport)

        assert [(s.notification_type, s.month) for s in sweeps] == [("MonthFallback", "FEB")]
        assert "FEB 2024" in sms_transport.sent[0][1]

    async def test_january_fallback_targets_december_of_last_year(
        self, session_maker, make_student, sms_transport
    ):
        await make_student(enrolled=date(2024, 12, 1))

        sweeps = await run_scheduled_reminders(datetime(2025, 1, 2, 9, 0), session_maker, sms_transport)

        assert (sweeps[0].month, sweeps[0].year, sweeps[0].sent) == ("DEC", 2024, 1)

    async def test_paid_records_are_not_reminded(self, session_maker, make_student, sms_transport):
        await make_student(paid=("MAR",))

        sweeps = await run_scheduled_reminders(datetime(2024, 3, 5, 9, 0), session_maker, sms_transport)

        assert sweeps[0].processed == 0
        assert sms_transport.sent == []

    async def test_repeat_run_same_day_sends_again(self, session_maker, make_student, sms_transport):
        await make_student()
        now = datetime(2024, 3, 22, 9, 0)

        await run_scheduled_reminders(now, session_maker, sms_transport)
        await run_scheduled_reminders(now, session_maker, sms_transport)

        assert len(sms_transport.sent) == 2
        assert len(await _logs(session_maker)) == 2


class TestImmediateRun:
    async def test_runs_both_months_on_any_day(self, session_maker, make_student, sms_transport):
        await make_student()
        now = datetime(2024, 3, 15, 14, 30)

        sweeps = await run_all_reminders_now(now, session_maker, sms_transport)

        assert [(s.notification_type, s.month) for s in sweeps] == [
            ("Scheduled", "MAR"),
            ("MonthFallback", "FEB"),
        ]
        assert len(sms_transport.sent) == 2
        async with session_maker() as session:
            stamped = await session.scalars(
                select(PaymentRecord).where(PaymentRecord.last_reminder_at.is_not(None))
            )
            assert sorted(r.month for r in stamped) == ["FEB", "MAR"]

    async def test_one_failure_does_not_stop_the_sweep(self, session_maker, make_student, make_transport):
        transport = make_transport(fail_for={"+14165550002"})
        await make_student(name="Ava Chen", phone="4165550001")
        await make_student(name="Ben Park", phone="4165550002")
        await make_student(name="Cai Lin", phone="4165550003")
        await make_student(name="Dee Roy", phone="not a phone")

        sweeps = await run_all_reminders_now(datetime(2024, 3, 15, 9, 0), session_maker, transport)

        current = sweeps[0]
        assert (current.processed, current.sent, current.failed) == (4, 2, 2)
        logs = await _logs(session_maker)
        failures = [log for log in logs if not log.success]
        assert len(logs) == 8
        assert len(failures) == 4
        assert {log.error_message for log in failures} == {
            "Twilio error 21610: unsubscribed recipient",
            "Invalid phone number",
        }

    async def test_inactive_students_are_not_reminded(self, session_maker, make_student, sms_transport):
        await make_student(status=StudentStatus.inactive.value)

        sweeps = await run_all_reminders_now(datetime(2024, 3, 15, 9, 0), session_maker, sms_transport)

        assert all(s.processed == 0 for s in sweeps)
        assert await _logs(session_maker) == []

    async def test_unreadable_store_raises_reminder_run_error(self, sms_transport):
        # No tables: loading unpaid records fails.
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        broken_session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
        try:
            with pytest.raises(ReminderRunError):
                await run_all_reminders_now(datetime(2024, 3, 15, 9, 0), broken_session_maker, sms_transport)
        finally:
            await engine.dispose()
        assert sms_transport.sent == []


class TestFetchUnpaidRecords:
    async def test_eligibility_and_status_filter(self, db_session, make_student):
        active = await make_student(name="Ava Chen")
        await make_student(name="Ben Park", paid=("MAR",))
        await make_student(name="Cai Lin", status=StudentStatus.inactive.value)

        records = await fetch_unpaid_records(db_session, "MAR", 2024)

        assert [r.student_id for r in records] == [active.id]
        assert records[0].student.student_name == "Ava Chen"

    async def test_student_ids_filter(self, db_session, make_student):
        first = await make_student(name="Ava Chen")
        await make_student(name="Ben Park")

        records = await fetch_unpaid_records(db_session, "APR", 2024, student_ids=[first.id])

        assert len(records) == 1
        assert records[0].month == "APR"


class _UnreachableStore:
    """Session maker whose sessions fail the way a refused driver connection does."""

    def __init__(self):
        self.attempts = 0

    def __call__(self):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def execute(self, *args, **kwargs):
        self.attempts += 1
        raise ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)")


class TestUnreachableStore:
    async def test_connection_refused_becomes_reminder_run_error(self, sms_transport):
        store = _UnreachableStore()

        with pytest.raises(ReminderRunError, match="Connect call failed"):
            await run_all_reminders_now(datetime(2024, 3, 15, 9, 0), store, sms_transport)

        # The previous-month sweep is still attempted after the current-month one fails.
        assert store.attempts == 2
        assert sms_transport.sent == []

    async def test_scheduled_pass_wraps_connection_refused(self, sms_transport):
        with pytest.raises(ReminderRunError):
            await run_scheduled_reminders(datetime(2024, 3, 20, 9, 0), _UnreachableStore(), sms_transport)
