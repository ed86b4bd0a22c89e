from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import ensure_self_or_admin, require_roles
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import UserRole
from campus_attendance.db.session import get_db

from .resolver import DayOrderLookup, get_day_order_lookup
from .schemas import ScheduledSessionsResponse
from . import service

router = APIRouter(prefix="/api/v1/teacher", tags=["scheduled-sessions"])


@router.get("/scheduled-sessions", response_model=ScheduledSessionsResponse)
async def get_scheduled_sessions(
    teacher_id: Optional[UUID] = Query(None),
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    lookup: DayOrderLookup = Depends(get_day_order_lookup),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    """Assignments scheduled for today's day order, with 12-hour display times."""
    if teacher_id is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "teacher_id is required"},
        )
    ensure_self_or_admin(current_user, teacher_id)
    return await service.get_scheduled_sessions(db, lookup, teacher_id, department)
