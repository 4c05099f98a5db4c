import logging
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.api.v1.students.schemas import (
    CreateStudentRequest,
    StudentListResponse,
    StudentPaymentRow,
    StudentResponse,
    StudentStatsResponse,
    UpdateAmountRequest,
    UpdatePaymentStatusRequest,
    UpdateStudentRequest,
)
from app.core.due_dates import calculate_days_due, get_month_year, is_valid_month, remaining_months
from app.core.eligibility import month_records_query
from app.core.exceptions import AppException
from app.core.utils import format_phone_display, format_timestamp
from app.models.enums import PaymentStatus, StudentStatus
from app.models.notification_log import NotificationLog
from app.models.payment_record import PaymentRecord
from app.models.school_class import SchoolClass
from app.models.student import Student
from app.models.user import User

PAGE_SIZE = 15


def format_date_of_birth(value: Optional[date]) -> Optional[str]:
    return value.strftime("%m/%d/%Y") if value else None


class StudentService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def _get_class(self, class_id: UUID) -> SchoolClass:
        school_class = await self.db.get(SchoolClass, class_id)
        if not school_class:
            AppException().raise_404("Class not found for the given class_id")
        return school_class

    async def _get_student(self, student_id: UUID) -> Student:
        student = await self.db.get(Student, student_id)
        if not student:
            AppException().raise_404("Student not found")
        return student

    @staticmethod
    def _resolve_month(month: Optional[str], now: datetime) -> str:
        if not month:
            return get_month_year(now)[0]
        month = month.strip().upper()
        if not is_valid_month(month):
            AppException().raise_400("Invalid month code. Use JAN, FEB, MAR, etc.")
        return month

    def _to_student_response(self, student: Student, school_class: Optional[SchoolClass]) -> StudentResponse:
        return StudentResponse(
            id=student.id,
            name=student.student_name,
            dob=format_date_of_birth(student.date_of_birth),
            parent_phone=format_phone_display(student.parent_contact_number),
            parent_whatsapp=student.parent_whatsapp_number,
            parent_email=student.parent_email,
            class_name=school_class.class_name if school_class else None,
            status=student.status,
            joined_at=format_timestamp(student.joined_at),
        )

    async def create_student(self, data: CreateStudentRequest, now: datetime) -> StudentResponse:
        """Create the student and one not-paid record per month from now through December."""
        school_class = await self._get_class(data.class_id)
        student = Student(
            student_name=data.student_name.strip(),
            date_of_birth=data.date_of_birth,
            parent_contact_number=data.parent_contact_number,
            parent_whatsapp_number=data.parent_whatsapp_number or None,
            parent_email=data.parent_email or None,
            class_id=school_class.id,
            joined_at=now,
        )
        self.db.add(student)
        await self.db.flush()
        for month in remaining_months(now):
            self.db.add(
                PaymentRecord(
                    student_id=student.id,
                    month=month,
                    year=now.year,
                    status=PaymentStatus.not_paid.value,
                )
            )
        await self.db.commit()
        await self.db.refresh(student)
        self.logger.info("Student %s created with records %s..DEC %s", student.id, get_month_year(now)[0], now.year)
        return self._to_student_response(student, school_class)

    def _class_month_query(self, class_id: UUID, month: str, year: int, status: Optional[str], search: Optional[str]):
        query = month_records_query(month, year, status).where(Student.class_id == class_id)
        if search:
            query = query.where(Student.student_name.ilike(f"%{search.strip()}%"))
        return query

    async def list_students(
        self,
        class_id: UUID,
        now: datetime,
        month: Optional[str] = None,
        page: int = 1,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
    ) -> StudentListResponse:
        """Payment rows of eligible students in a class for one month of the current year."""
        month = self._resolve_month(month, now)
        year = now.year
        await self._get_class(class_id)

        query = self._class_month_query(class_id, month, year, status_filter, search)
        total = await self.db.scalar(select(func.count()).select_from(query.subquery())) or 0

        skip = (max(page, 1) - 1) * PAGE_SIZE
        result = await self.db.execute(
            query.options(selectinload(PaymentRecord.student), selectinload(PaymentRecord.marked_by))
            .order_by(Student.student_name, PaymentRecord.id)
            .offset(skip)
            .limit(PAGE_SIZE)
        )
        records = list(result.scalars().all())

        rows = []
        for record in records:
            student = record.student
            is_paid = record.status == PaymentStatus.paid.value
            rows.append(
                StudentPaymentRow(
                    id=student.id,
                    payment_record_id=record.id,
                    name=student.student_name,
                    dob=format_date_of_birth(student.date_of_birth),
                    payment_date=format_timestamp(record.paid_at),
                    last_reminder_date=format_timestamp(record.last_reminder_at),
                    status=PaymentStatus.paid.value if is_paid else PaymentStatus.not_paid.value,
                    parent_phone=format_phone_display(student.parent_contact_number),
                    payment_status=record.status,
                    payment_marked_by=record.marked_by.name if record.marked_by else None,
                    student_status=student.status,
                    amount=record.amount,
                    payment_due=None if is_paid else calculate_days_due(month, now),
                )
            )
        return StudentListResponse(count=len(rows), data=rows, has_next_page=skip + len(rows) < total)

    async def get_stats(self, class_id: UUID, now: datetime, month: Optional[str] = None) -> StudentStatsResponse:
        month = self._resolve_month(month, now)
        year = now.year
        await self._get_class(class_id)

        async def count(status: str) -> int:
            query = self._class_month_query(class_id, month, year, status, None)
            return await self.db.scalar(select(func.count()).select_from(query.subquery())) or 0

        paid = await count(PaymentStatus.paid.value)
        unpaid = await count(PaymentStatus.not_paid.value)
        return StudentStatsResponse(total=paid + unpaid, paid=paid, unpaid=unpaid)

    async def _get_month_record(self, student_id: UUID, month: str, year: int) -> PaymentRecord:
        result = await self.db.execute(
            select(PaymentRecord).where(
                PaymentRecord.student_id == student_id,
                PaymentRecord.month == month,
                PaymentRecord.year == year,
            )
        )
        record = result.scalar_one_or_none()
        if not record:
            AppException().raise_404("Payment record not found or update failed")
        return record

    async def update_payment_status(
        self, data: UpdatePaymentStatusRequest, current_user: User, now: datetime
    ) -> PaymentRecord:
        """Mark a month paid or not paid. Paid keeps a provided amount; not-paid clears it."""
        await self._get_class(data.class_id)
        student = await self._get_student(data.student_id)
        record = await self._get_month_record(student.id, data.month.value, now.year)

        is_paid = data.new_status == PaymentStatus.paid.value
        record.status = data.new_status
        record.paid_at = now if is_paid else None
        record.marked_by_id = current_user.id
        if is_paid and data.amount:
            record.amount = data.amount
        elif not is_paid:
            record.amount = None

        await self.db.commit()
        await self.db.refresh(record)
        self.logger.info(
            "Payment record %s set to %s by user %s", record.id, record.status, current_user.id
        )
        return record

    async def update_amount(self, data: UpdateAmountRequest, now: datetime) -> PaymentRecord:
        await self._get_class(data.class_id)
        student = await self._get_student(data.student_id)
        record = await self._get_month_record(student.id, data.month.value, now.year)
        record.amount = float(data.amount)
        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def update_student(self, student_id: UUID, data: UpdateStudentRequest) -> StudentResponse:
        student = await self._get_student(student_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("class_id") is not None:
            await self._get_class(update_data["class_id"])
        for field, value in update_data.items():
            if value is None and field in ("student_name", "date_of_birth", "parent_contact_number", "class_id"):
                continue
            setattr(student, field, value)
        await self.db.commit()
        await self.db.refresh(student)
        school_class = await self.db.get(SchoolClass, student.class_id)
        return self._to_student_response(student, school_class)

    async def delete_student(self, student_id: UUID) -> None:
        """Delete the student with all payment records and their notification logs."""
        student = await self._get_student(student_id)
        await self.db.delete(student)
        await self.db.commit()
        self.logger.info("Student %s deleted", student_id)

    async def remove_from_class(self, student_id: UUID, now: datetime) -> None:
        """Mark inactive and drop unpaid records (and their logs); paid history stays."""
        student = await self._get_student(student_id)
        student.status = StudentStatus.inactive.value
        student.inactive_from = now

        unpaid_ids = select(PaymentRecord.id).where(
            PaymentRecord.student_id == student.id,
            PaymentRecord.status == PaymentStatus.not_paid.value,
        )
        await self.db.execute(
            delete(NotificationLog)
            .where(NotificationLog.payment_record_id.in_(unpaid_ids))
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(PaymentRecord)
            .where(
                PaymentRecord.student_id == student.id,
                PaymentRecord.status == PaymentStatus.not_paid.value,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        self.logger.info("Student %s removed from class", student_id)
