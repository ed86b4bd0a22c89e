from datetime import datetime, time
from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator

from campus_attendance.core.time_format import format_time_24, parse_time_24


class TeacherSubjectCreate(BaseModel):
    teacher_id: UUID
    class_id: UUID
    subject_id: UUID
    day_order: int = Field(..., ge=1, le=10)
    start_time: Union[str, time] = Field(..., description="24-hour format, e.g. 09:00")
    end_time: Union[str, time] = Field(..., description="24-hour format, e.g. 09:50")
    auto_session_enabled: bool = False

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time(cls, v: Union[str, time]) -> time:
        return parse_time_24(v)


class TeacherSubjectUpdate(BaseModel):
    teacher_id: Optional[UUID] = None
    day_order: Optional[int] = Field(None, ge=1, le=10)
    start_time: Optional[Union[str, time]] = Field(None, description="24-hour format, e.g. 09:00")
    end_time: Optional[Union[str, time]] = Field(None, description="24-hour format, e.g. 09:50")
    auto_session_enabled: Optional[bool] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time(cls, v: Optional[Union[str, time]]) -> Optional[time]:
        if v is None:
            return None
        return parse_time_24(v)


class AutoSessionToggle(BaseModel):
    auto_session_enabled: bool


class TeacherSubjectResponse(BaseModel):
    id: UUID
    teacher_id: UUID
    class_id: UUID
    subject_id: UUID
    day_order: int
    start_time: time
    end_time: time
    auto_session_enabled: bool
    created_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("start_time", "end_time")
    def serialize_time_24(self, t: time) -> str:
        """Output as 24-hour string HH:MM (e.g. 09:00, 14:30)."""
        return format_time_24(t)
