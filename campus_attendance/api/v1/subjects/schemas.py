from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SubjectCreate(BaseModel):
    subject_code: str = Field(..., max_length=50)
    subject_name: str = Field(..., max_length=255)
    credits: Optional[int] = Field(None, ge=0)
    semester: Optional[int] = Field(None, ge=1, le=12)


class SubjectUpdate(BaseModel):
    subject_code: Optional[str] = Field(None, max_length=50)
    subject_name: Optional[str] = Field(None, max_length=255)
    credits: Optional[int] = Field(None, ge=0)
    semester: Optional[int] = Field(None, ge=1, le=12)


class SubjectResponse(BaseModel):
    id: UUID
    subject_code: str
    subject_name: str
    credits: Optional[int] = None
    semester: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
