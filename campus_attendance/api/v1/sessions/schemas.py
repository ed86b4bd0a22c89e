from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from campus_attendance.api.v1.scheduled_sessions.schemas import ScheduledSession
from campus_attendance.core.schemas import CamelModel


class AutoSessionCreate(CamelModel):
    """Scope of an auto-session run. Teachers always run for themselves."""

    department: Optional[str] = Field(None, max_length=100)
    teacher_id: Optional[UUID] = None
    class_id: Optional[UUID] = None


class PendingSession(ScheduledSession):
    already_created: bool = False


class AutoSessionPreview(BaseModel):
    success: bool = True
    date: date
    is_holiday: bool = False
    holiday_name: Optional[str] = None
    current_day_order: Optional[int] = None
    day_order_is_fallback: bool = False
    total_entries: int = 0
    pending_count: int = 0
    already_created_count: int = 0
    sessions: List[PendingSession] = Field(default_factory=list)


class AttendanceSessionResponse(BaseModel):
    id: UUID
    session_code: str
    teacher_id: UUID
    class_id: UUID
    subject_id: UUID
    assignment_id: Optional[UUID] = None
    session_date: date
    session_time: str
    display_time: str
    expires_at: datetime
    day_order: Optional[int] = None
    auto_created: bool
    status: str
    created_at: datetime
    teacher_name: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    subject_code: Optional[str] = None
    subject_name: Optional[str] = None


class AutoSessionResult(BaseModel):
    success: bool = True
    message: str
    date: date
    current_day_order: Optional[int] = None
    day_order_is_fallback: bool = False
    created: int = 0
    already_existed: int = 0
    sessions: List[AttendanceSessionResponse] = Field(default_factory=list)


class ActiveSessionsResponse(BaseModel):
    success: bool = True
    sessions: List[AttendanceSessionResponse]
    count: int
