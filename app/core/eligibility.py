"""
Which students count for a given (month, year): active students, plus inactive students
who already hold a paid record for that month. Shared by student listings, stats and reminders.
"""
from sqlalchemy import and_, or_, select
from sqlalchemy.orm import aliased

from app.models.enums import PaymentStatus, StudentStatus
from app.models.payment_record import PaymentRecord
from app.models.student import Student


def eligible_student_clause(month: str, year: int):
    """SQL condition on Student, usable in any query that joins or selects Student."""
    paid_record = aliased(PaymentRecord)
    has_paid_record = (
        select(paid_record.id)
        .where(
            and_(
                paid_record.student_id == Student.id,
                paid_record.month == month,
                paid_record.year == year,
                paid_record.status == PaymentStatus.paid.value,
            )
        )
        .exists()
    )
    return or_(Student.status == StudentStatus.active.value, has_paid_record)


def month_records_query(month: str, year: int, status: str | None = None):
    """Select PaymentRecord rows of eligible students for (month, year), joined to Student."""
    query = (
        select(PaymentRecord)
        .join(Student, PaymentRecord.student_id == Student.id)
        .where(
            PaymentRecord.month == month,
            PaymentRecord.year == year,
            eligible_student_clause(month, year),
        )
    )
    if status:
        query = query.where(PaymentRecord.status == status)
    return query
