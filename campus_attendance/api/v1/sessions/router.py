from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.api.v1.scheduled_sessions.resolver import DayOrderLookup, get_day_order_lookup
from campus_attendance.auth.rbac import ensure_self_or_admin, require_roles
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.db.session import get_db

from .schemas import (
    ActiveSessionsResponse,
    AttendanceSessionResponse,
    AutoSessionCreate,
    AutoSessionPreview,
    AutoSessionResult,
)
from . import service

router = APIRouter(prefix="/api/v1/sessions", tags=["attendance-sessions"])


def _scope(current_user: CurrentUser, teacher_id: Optional[UUID], department: Optional[str]):
    """Teachers always run for themselves in their own department."""
    if current_user.role != UserRole.ADMIN.value:
        if teacher_id is not None:
            ensure_self_or_admin(current_user, teacher_id)
        teacher_id = current_user.id
    return teacher_id, department or current_user.department


@router.get("/auto", response_model=AutoSessionPreview)
async def preview_auto_sessions(
    department: Optional[str] = Query(None),
    teacher_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    session_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db),
    lookup: DayOrderLookup = Depends(get_day_order_lookup),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    """Timetable slots a run would open for the date (default today)."""
    teacher_id, department = _scope(current_user, teacher_id, department)
    return await service.preview_sessions(db, lookup, department, teacher_id, class_id, session_date)


@router.post("/auto", response_model=AutoSessionResult)
async def create_auto_sessions(
    payload: AutoSessionCreate,
    db: AsyncSession = Depends(get_db),
    lookup: DayOrderLookup = Depends(get_day_order_lookup),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    """Open today's attendance sessions for the matching timetable slots."""
    teacher_id, department = _scope(current_user, payload.teacher_id, payload.department)
    try:
        return await service.create_sessions(db, lookup, department, teacher_id, payload.class_id)
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})


@router.get("/active", response_model=ActiveSessionsResponse)
async def list_active_sessions(
    class_id: Optional[UUID] = Query(None),
    teacher_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(
        require_roles(UserRole.TEACHER, UserRole.ADMIN, UserRole.STUDENT)
    ),
):
    if class_id is None and teacher_id is None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "class_id or teacher_id is required"},
        )
    sessions = await service.list_active_sessions(db, class_id=class_id, teacher_id=teacher_id)
    return ActiveSessionsResponse(sessions=sessions, count=len(sessions))


@router.post("/{session_id}/close", response_model=AttendanceSessionResponse)
async def close_session(
    session_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    owner = None if current_user.role == UserRole.ADMIN.value else current_user.id
    try:
        closed = await service.close_session(db, session_id, teacher_id=owner)
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})
    if not closed:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Session not found"},
        )
    return closed
