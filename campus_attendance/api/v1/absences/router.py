from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import ensure_self_or_admin, require_roles
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import AbsenceWriteError, ServiceError
from campus_attendance.db.session import get_db

from .schemas import AbsenceCreate, AbsenceListResponse, AbsenceRecorded
from . import service

router = APIRouter(prefix="/api/v1/teacher/absences", tags=["absences"])
admin_router = APIRouter(prefix="/api/v1/admin/teacher-absences", tags=["absences"])


@router.post("", response_model=AbsenceRecorded, status_code=status.HTTP_201_CREATED)
async def record_absence(
    payload: AbsenceCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    """Mark a teacher absent for a date range and hand classes to substitutes, one transfer per date."""
    if payload.teacher_id is not None:
        ensure_self_or_admin(current_user, payload.teacher_id)
    try:
        return await service.record_absence(db, payload, created_by=current_user.id)
    except AbsenceWriteError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.message, "stage": e.stage},
        )
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})


@router.get("", response_model=AbsenceListResponse)
async def list_absences(
    teacher_id: Optional[UUID] = Query(None, alias="teacherId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    if current_user.role != UserRole.ADMIN.value:
        teacher_id = teacher_id or current_user.id
        ensure_self_or_admin(current_user, teacher_id)
    data = await service.list_absences(db, teacher_id=teacher_id, start_date=start_date, end_date=end_date)
    return AbsenceListResponse(data=data, count=len(data))


@admin_router.get(
    "",
    response_model=AbsenceListResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def list_absence_log(
    department: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    """All absences with their transfers, optionally limited to one department's teachers."""
    data = await service.list_absences(db, start_date=start_date, end_date=end_date, department=department)
    return AbsenceListResponse(data=data, count=len(data))
