"""Teacher absence over a date range and the per-date class transfers to substitute teachers."""

import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from campus_attendance.core.enums import AbsenceStatus
from campus_attendance.db.session import Base


class TeacherAbsence(Base):
    __tablename__ = "teacher_absences"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    absence_start_date = Column(Date, nullable=False)
    absence_end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=AbsenceStatus.active.value)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    teacher = relationship("User", foreign_keys=[teacher_id])
    transfers = relationship(
        "ClassTransfer",
        back_populates="absence",
        cascade="all, delete-orphan",
        order_by="ClassTransfer.transfer_date",
    )


class ClassTransfer(Base):
    __tablename__ = "class_transfers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    absence_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teacher_absences.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    original_teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    substitute_teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    transfer_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_by_teacher_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    absence = relationship("TeacherAbsence", back_populates="transfers")
    original_teacher = relationship("User", foreign_keys=[original_teacher_id])
    substitute_teacher = relationship("User", foreign_keys=[substitute_teacher_id])
    school_class = relationship("SchoolClass", foreign_keys=[class_id])
    subject = relationship("Subject", foreign_keys=[subject_id])
