from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import require_roles
from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.db.session import get_db

from .schemas import AutoSessionToggle, TeacherSubjectCreate, TeacherSubjectResponse, TeacherSubjectUpdate
from . import service

router = APIRouter(
    prefix="/api/v1/admin/teacher-subjects",
    tags=["teacher-subjects"],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)


@router.post("", response_model=TeacherSubjectResponse, status_code=status.HTTP_201_CREATED)
async def create_teacher_subject(
    payload: TeacherSubjectCreate,
    db: AsyncSession = Depends(get_db),
):
    """Bind a teacher to a class and subject for one day order and time slot."""
    try:
        return await service.create_teacher_subject(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("", response_model=List[TeacherSubjectResponse])
async def list_teacher_subjects(
    teacher_id: Optional[UUID] = Query(None),
    class_id: Optional[UUID] = Query(None),
    day_order: Optional[int] = Query(None, ge=1, le=10),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_teacher_subjects(db, teacher_id=teacher_id, class_id=class_id, day_order=day_order)


@router.put("/{assignment_id}", response_model=TeacherSubjectResponse)
async def update_teacher_subject(
    assignment_id: UUID,
    payload: TeacherSubjectUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        obj = await service.update_teacher_subject(db, assignment_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/{assignment_id}/auto-session", response_model=TeacherSubjectResponse)
async def toggle_auto_session(
    assignment_id: UUID,
    payload: AutoSessionToggle,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.set_auto_session(db, assignment_id, payload.auto_session_enabled)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
    return obj


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher_subject(
    assignment_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    deleted = await service.delete_teacher_subject(db, assignment_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")
