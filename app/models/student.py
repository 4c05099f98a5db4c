import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.enums import StudentStatus


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    student_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    parent_contact_number = Column(String, nullable=False)
    parent_whatsapp_number = Column(String, nullable=True)
    parent_email = Column(String, nullable=True)
    status = Column(String(20), default=StudentStatus.active.value, nullable=False)
    inactive_from = Column(DateTime, nullable=True)
    class_id = Column(Uuid, ForeignKey("classes.id"), nullable=False, index=True)
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    school_class = relationship("SchoolClass", back_populates="students")
    payment_records = relationship(
        "PaymentRecord",
        back_populates="student",
        cascade="all, delete-orphan",
    )
