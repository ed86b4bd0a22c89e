from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class ScheduledSession(BaseModel):
    id: UUID
    teacher_id: UUID
    class_id: UUID
    subject_id: UUID
    day_order: int
    start_time: str
    end_time: str
    auto_session_enabled: bool
    class_name: Optional[str] = None
    section: Optional[str] = None
    subject_code: Optional[str] = None
    subject_name: Optional[str] = None
    display_time: str
    start_time_24h: str


class ScheduledSessionsResponse(BaseModel):
    success: bool = True
    teacher_id: UUID
    is_holiday: bool = False
    holiday_name: Optional[str] = None
    current_day_order: Optional[int] = None
    day_order_is_fallback: bool = False
    scheduled_sessions: List[ScheduledSession]
    count: int
