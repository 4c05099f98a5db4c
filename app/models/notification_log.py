"""Append-only log of reminder attempts, one row per dispatch."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base


class NotificationLog(Base):
    """
    One reminder attempt for a payment record.
    type: Scheduled (current month), MonthFallback (previous month), Escalation (reserved).
    """
    __tablename__ = "notification_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    payment_record_id = Column(
        Uuid, ForeignKey("payment_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sent_at = Column(DateTime, default=datetime.now, nullable=False)  # local naive, same clock as the reminder run
    type = Column(String(20), nullable=False)
    success = Column(Boolean, default=True, nullable=False)
    error_message = Column(String(500), nullable=True)

    payment_record = relationship("PaymentRecord", back_populates="notification_logs")
