"""
Pytest configuration and global fixtures.

Settings are read at import time, so the environment is prepared before any app module is imported.
Each test gets its own in-memory SQLite database.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "test"
os.environ["REMINDER_CRON_ENABLED"] = "false"
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["TWILIO_FROM_NUMBER"] = ""

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import date, datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.due_dates import remaining_months  # noqa: E402
from app.core.exceptions import SmsDeliveryError  # noqa: E402
from app.core.security import get_password_hash  # noqa: E402
from app.models.enums import PaymentStatus, Role, StudentStatus  # noqa: E402
from app.models.payment_record import PaymentRecord  # noqa: E402
from app.models.registry import Base  # noqa: E402
from app.models.school_class import SchoolClass  # noqa: E402
from app.models.student import Student  # noqa: E402
from app.models.user import User  # noqa: E402


class FakeSmsTransport:
    """Records sent messages; raises SmsDeliveryError for numbers listed in fail_for."""

    def __init__(self, fail_for=None, error="Twilio error 21610: unsubscribed recipient"):
        self.sent: list[tuple[str, str]] = []
        self.fail_for = set(fail_for or [])
        self.error = error

    async def send(self, to: str, body: str) -> str:
        if to in self.fail_for:
            raise SmsDeliveryError(self.error)
        self.sent.append((to, body))
        return f"SM{len(self.sent):032d}"


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
def sms_transport() -> FakeSmsTransport:
    return FakeSmsTransport()


@pytest.fixture
def make_transport():
    """Factory for transports that fail for chosen numbers."""
    return FakeSmsTransport


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = User(
        name="Office Admin",
        email="admin@example.com",
        password_hash=get_password_hash("Admin@123"),
        role=Role.admin.value,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def teacher_user(db_session: AsyncSession) -> User:
    user = User(
        name="Ms Teacher",
        email="teacher@example.com",
        password_hash=get_password_hash("Teacher@123"),
        role=Role.teacher.value,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def school_class(db_session: AsyncSession) -> SchoolClass:
    school_class = SchoolClass(class_name="Ballet A")
    db_session.add(school_class)
    await db_session.commit()
    await db_session.refresh(school_class)
    return school_class


@pytest.fixture
def make_student(db_session: AsyncSession, school_class: SchoolClass):
    """
    Factory: student plus not-paid records from `enrolled` through December.
    `paid` lists month codes to mark paid (amount 120.0).
    """

    async def _make(
        name: str = "Ava Chen",
        phone: str = "4165551234",
        status: str = StudentStatus.active.value,
        enrolled: date = date(2024, 1, 1),
        paid: tuple[str, ...] = (),
        amount: float | None = None,
    ) -> Student:
        student = Student(
            student_name=name,
            date_of_birth=date(2015, 6, 1),
            parent_contact_number=phone,
            status=status,
            class_id=school_class.id,
            joined_at=datetime.combine(enrolled, datetime.min.time()),
        )
        db_session.add(student)
        await db_session.flush()
        for month in remaining_months(enrolled):
            is_paid = month in paid
            db_session.add(
                PaymentRecord(
                    student_id=student.id,
                    month=month,
                    year=enrolled.year,
                    status=PaymentStatus.paid.value if is_paid else PaymentStatus.not_paid.value,
                    amount=120.0 if is_paid else amount,
                    paid_at=datetime(enrolled.year, 1, 1) if is_paid else None,
                )
            )
        await db_session.commit()
        await db_session.refresh(student)
        return student

    return _make
