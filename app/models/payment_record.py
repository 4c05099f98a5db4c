import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.enums import PaymentStatus


class PaymentRecord(Base):
    """One tuition payment slot per (student, month, year)."""
    __tablename__ = "payment_records"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    month = Column(String(3), nullable=False)  # JAN..DEC
    year = Column(Integer, nullable=False)
    status = Column(String(20), default=PaymentStatus.not_paid.value, nullable=False)
    amount = Column(Float, nullable=True)  # set when paid or pre-set manually
    paid_at = Column(DateTime, nullable=True)
    marked_by_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_reminder_at = Column(DateTime, nullable=True)

    student = relationship("Student", back_populates="payment_records")
    marked_by = relationship("User")
    notification_logs = relationship(
        "NotificationLog",
        back_populates="payment_record",
        cascade="all, delete-orphan",
    )

    __table_args__ = (UniqueConstraint("student_id", "month", "year", name="uq_payment_record_student_month_year"),)
