"""Classes (e.g. CSE-A, 2nd year). Model named SchoolClass to avoid Python 'class' keyword."""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from campus_attendance.db.session import Base


class SchoolClass(Base):
    __tablename__ = "classes"
    __table_args__ = (
        UniqueConstraint("class_name", "section", "department", name="uq_class_name_section_department"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    class_name = Column(String(100), nullable=False)
    section = Column(String(20), nullable=True)
    year = Column(Integer, nullable=True)
    department = Column(String(100), nullable=False, default="General")
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
