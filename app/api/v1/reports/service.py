import io
import logging
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.due_dates import month_index
from app.core.exceptions import AppException
from app.models.enums import MONTH_CODES, PaymentStatus, StudentStatus
from app.models.notification_log import NotificationLog
from app.models.payment_record import PaymentRecord
from app.models.school_class import SchoolClass
from app.models.student import Student

MIN_REPORT_YEAR = 2020

REPORT_HEADERS = [
    "Student Name",
    "Parent Contact Number",
    "Status",
    "Class",
    "Payment Status",
    "Joined Date",
    "Last Notification Sent",
    "Amount",
    "Payment Marked By",
]


def report_filename(class_name: str, month: str, year: int) -> str:
    safe_name = "".join(c if c.isalnum() else "_" for c in class_name)
    return f"{safe_name}-{month}-{year}.xlsx"


class ReportService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def _last_notification_at(self, payment_record_id: UUID):
        return await self.db.scalar(
            select(func.max(NotificationLog.sent_at)).where(NotificationLog.payment_record_id == payment_record_id)
        )

    async def build_payment_report(self, class_id: UUID, month: str, year: int, current_year: int) -> tuple[str, bytes]:
        """
        Payment report for every student of a class (active or not) for one month.
        Returns (filename, xlsx bytes). Ends with a summary block: totals, paid, not paid, fees collected.
        """
        month = (month or "").strip().upper()
        if month_index(month) < 0:
            AppException().raise_400("Invalid month code. Use JAN, FEB, MAR, etc.")
        if year < MIN_REPORT_YEAR or year > current_year + 1:
            AppException().raise_400("Invalid year")

        school_class = await self.db.get(SchoolClass, class_id)
        if not school_class:
            AppException().raise_404("Class not found")

        students_result = await self.db.execute(
            select(Student).where(Student.class_id == class_id).order_by(Student.student_name)
        )
        students = list(students_result.scalars().all())
        if not students:
            AppException().raise_404("No students found in this class")

        records_result = await self.db.execute(
            select(PaymentRecord)
            .where(
                PaymentRecord.student_id.in_([s.id for s in students]),
                PaymentRecord.month == month,
                PaymentRecord.year == year,
            )
            .options(selectinload(PaymentRecord.marked_by))
        )
        records = {r.student_id: r for r in records_result.scalars().all()}

        wb = Workbook()
        ws = wb.active
        ws.title = f"{month} {year}"

        for col, header in enumerate(REPORT_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True)
            cell.alignment = Alignment(horizontal="center", wrap_text=True)

        paid_students = 0
        total_fees_collected = 0.0
        row_idx = 2
        for student in students:
            record = records.get(student.id)
            status_text = "Inactive - Not in class" if student.status == StudentStatus.inactive.value else "In class"
            joined = student.joined_at
            joined_text = f"{joined.year}-{MONTH_CODES[joined.month - 1]}" if joined else "-"

            payment_status = PaymentStatus.not_paid.value
            amount = "-"
            marked_by = "-"
            last_notification = "-"
            if record:
                payment_status = record.status
                amount = record.amount if record.amount else "-"
                if record.marked_by:
                    marked_by = record.marked_by.name
                if payment_status == PaymentStatus.paid.value:
                    paid_students += 1
                    total_fees_collected += record.amount or 0.0
                else:
                    last_sent = await self._last_notification_at(record.id)
                    if last_sent:
                        last_notification = last_sent.strftime("%Y-%m-%d")

            values = [
                student.student_name,
                student.parent_contact_number,
                status_text,
                school_class.class_name,
                "Paid" if payment_status == PaymentStatus.paid.value else "Not Paid",
                joined_text,
                last_notification,
                amount,
                marked_by,
            ]
            for col, value in enumerate(values, start=1):
                ws.cell(row=row_idx, column=col, value=value)
            row_idx += 1

        summary = [
            ("Total Students in Class", len(students)),
            ("Total Students Paid", paid_students),
            ("Total Students Not Paid", len(students) - paid_students),
            ("Total Fees Collected", f"{settings.REPORT_CURRENCY} {total_fees_collected:.2f}"),
        ]
        row_idx += 1
        ws.cell(row=row_idx, column=1, value="SUMMARY").font = Font(bold=True)
        for label, value in summary:
            row_idx += 1
            ws.cell(row=row_idx, column=1, value=label)
            ws.cell(row=row_idx, column=2, value=value)

        buffer = io.BytesIO()
        wb.save(buffer)
        self.logger.info(
            "Payment report built for class %s %s %s: students=%s paid=%s",
            class_id, month, year, len(students), paid_students,
        )
        return report_filename(school_class.class_name, month, year), buffer.getvalue()
