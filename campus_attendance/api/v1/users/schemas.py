from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from campus_attendance.core.enums import UserRole


class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole
    department: Optional[str] = Field(None, max_length=100)


class UserResponse(BaseModel):
    id: UUID
    full_name: str
    email: EmailStr
    role: str
    department: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
