"""Day-order rotation: one config row per department plus explicit per-date overrides (day order or holiday)."""

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from campus_attendance.db.session import Base


class DayOrderConfig(Base):
    __tablename__ = "day_order_config"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    department = Column(String(100), nullable=False, unique=True)
    total_days = Column(Integer, nullable=False, default=6)
    current_day_order = Column(Integer, nullable=False, default=1)
    last_updated_date = Column(Date, nullable=False, default=date.today)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class DayOrderSetting(Base):
    __tablename__ = "day_order_settings"
    __table_args__ = (
        UniqueConstraint("department", "effective_date", name="uq_day_order_setting_department_date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    department = Column(String(100), nullable=False, index=True)
    effective_date = Column(Date, nullable=False)
    day_order = Column(Integer, nullable=True)  # NULL on holidays
    is_holiday = Column(Boolean, nullable=False, default=False)
    holiday_name = Column(String(255), nullable=True)
    reason = Column(Text, nullable=True)
    changed_by_admin_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    changed_by = relationship("User", foreign_keys=[changed_by_admin_id])
