import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    class_name = Column(String(20), nullable=False)
    sheet_id = Column(String, nullable=True)  # opaque external spreadsheet id, never read here
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)  # owning teacher
    created_at = Column(DateTime, default=datetime.utcnow)

    teacher = relationship("User")
    students = relationship("Student", back_populates="school_class")
