from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, model_validator

from campus_attendance.core.schemas import CamelModel


class DayOrderStatus(CamelModel):
    """Day order (or holiday) for one department on one date."""

    success: bool = True
    department: str
    day_order: Optional[int] = None
    is_holiday: bool = False
    holiday_name: Optional[str] = None
    effective_date: date
    is_explicit_setting: bool = False


class DayOrderConfigResponse(CamelModel):
    id: UUID
    department: str
    total_days: int
    current_day_order: int
    last_updated_date: date
    updated_at: datetime


class DayOrderConfigEnvelope(CamelModel):
    success: bool = True
    config: DayOrderConfigResponse
    message: Optional[str] = None


class UpcomingDayOrders(CamelModel):
    success: bool = True
    department: str
    upcoming: List[DayOrderStatus]
    config: DayOrderConfigResponse


class DayOrderSettingCreate(CamelModel):
    """Set the day order for a date, or mark the date as a holiday. One setting per department and date."""

    department: Optional[str] = Field(None, max_length=100)
    effective_date: date
    day_order: Optional[int] = Field(None, ge=1, le=10)
    is_holiday: bool = False
    holiday_name: Optional[str] = Field(None, max_length=255)
    reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def day_order_unless_holiday(self) -> "DayOrderSettingCreate":
        if not self.is_holiday and self.day_order is None:
            raise ValueError("Day order is required")
        return self


class DayOrderSettingResponse(CamelModel):
    id: UUID
    department: str
    effective_date: date
    day_order: Optional[int] = None
    is_holiday: bool
    holiday_name: Optional[str] = None
    reason: Optional[str] = None
    changed_by_admin_id: Optional[UUID] = None
    changed_by_name: Optional[str] = None
    created_at: datetime


class DayOrderSettingEnvelope(CamelModel):
    success: bool = True
    message: str
    setting: DayOrderSettingResponse


class DayOrderHistory(CamelModel):
    success: bool = True
    history: List[DayOrderSettingResponse]


class DayOrderConfigUpdate(CamelModel):
    department: Optional[str] = Field(None, max_length=100)
    total_days: int = Field(..., ge=1, le=10, description="Length of the rotation")
    current_day_order: int = Field(1, ge=1, le=10, description="Day order in effect today")

    @model_validator(mode="after")
    def current_within_cycle(self) -> "DayOrderConfigUpdate":
        if self.current_day_order > self.total_days:
            raise ValueError("current_day_order cannot exceed total_days")
        return self
