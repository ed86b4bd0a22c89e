from datetime import date, datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from campus_attendance.core.schemas import CamelModel


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


# ----- Record absence (request body is camelCase) -----
class TransferEntry(CamelModel):
    """One class/subject handed to a substitute on the listed dates."""

    class_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None
    substitute_teacher_id: Optional[UUID] = None
    dates: List[date] = Field(default_factory=list)

    @field_validator("class_id", "subject_id", "substitute_teacher_id", mode="before")
    @classmethod
    def blank_ids(cls, v: Any) -> Any:
        return _blank_to_none(v)


class AbsenceCreate(CamelModel):
    teacher_id: Optional[UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = Field(None, max_length=2000)
    transfers: List[TransferEntry] = Field(default_factory=list)

    @field_validator("teacher_id", "start_date", "end_date", mode="before")
    @classmethod
    def blank_required(cls, v: Any) -> Any:
        return _blank_to_none(v)


class AbsenceRecorded(CamelModel):
    success: bool = True
    absence_id: UUID
    message: str
    transfers_created: int = 0
    warning: Optional[str] = None
    stage: Optional[str] = None


# ----- Read side (mirrors stored rows, snake_case) -----
class TransferDetail(BaseModel):
    id: UUID
    absence_id: UUID
    original_teacher_id: UUID
    substitute_teacher_id: UUID
    class_id: UUID
    subject_id: UUID
    transfer_date: date
    notes: Optional[str] = None
    created_at: datetime
    original_teacher_name: Optional[str] = None
    substitute_teacher_name: Optional[str] = None
    substitute_teacher_email: Optional[str] = None
    class_name: Optional[str] = None
    section: Optional[str] = None
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None


class AbsenceResponse(BaseModel):
    id: UUID
    teacher_id: UUID
    teacher_name: Optional[str] = None
    teacher_email: Optional[str] = None
    teacher_department: Optional[str] = None
    absence_start_date: date
    absence_end_date: date
    reason: Optional[str] = None
    status: str
    created_at: datetime
    class_transfers: List[TransferDetail] = Field(default_factory=list)


class AbsenceListResponse(BaseModel):
    success: bool = True
    data: List[AbsenceResponse]
    count: int
