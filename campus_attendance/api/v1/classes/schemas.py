from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ClassCreate(BaseModel):
    class_name: str = Field(..., max_length=100)
    section: Optional[str] = Field(None, max_length=20)
    year: Optional[int] = Field(None, ge=1, le=10)
    department: Optional[str] = Field(None, max_length=100, description="Defaults to the configured department")


class ClassUpdate(BaseModel):
    class_name: Optional[str] = Field(None, max_length=100)
    section: Optional[str] = Field(None, max_length=20)
    year: Optional[int] = Field(None, ge=1, le=10)
    department: Optional[str] = Field(None, max_length=100)


class ClassResponse(BaseModel):
    id: UUID
    class_name: str
    section: Optional[str] = None
    year: Optional[int] = None
    department: str
    created_at: datetime

    class Config:
        from_attributes = True
