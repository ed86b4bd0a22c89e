"""Attendance session opened for one timetable slot on one date."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Time, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from campus_attendance.core.enums import SessionStatus
from campus_attendance.db.session import Base


class AttendanceSession(Base):
    __tablename__ = "attendance_sessions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "session_date", name="uq_attendance_session_assignment_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    # Timetable slot the session was created from; NULL once the slot is deleted.
    assignment_id = Column(UUID(as_uuid=True), ForeignKey("teacher_subjects.id", ondelete="SET NULL"), nullable=True)
    session_code = Column(String(20), nullable=False, unique=True)
    session_date = Column(Date, nullable=False)
    session_time = Column(Time, nullable=False)
    expires_at = Column(DateTime, nullable=False)  # local wall-clock end of the slot
    day_order = Column(Integer, nullable=True)
    auto_created = Column(Boolean, nullable=False, default=True)
    status = Column(String(20), nullable=False, default=SessionStatus.active.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    teacher = relationship("User", foreign_keys=[teacher_id])
    school_class = relationship("SchoolClass", foreign_keys=[class_id])
    subject = relationship("Subject", foreign_keys=[subject_id])
