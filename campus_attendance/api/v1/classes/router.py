from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import ensure_self_or_admin, require_roles
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.db.session import get_db

from .schemas import ClassCreate, ClassResponse, ClassUpdate
from . import service

router = APIRouter(prefix="/api/v1/admin/classes", tags=["classes"])
teacher_router = APIRouter(prefix="/api/v1/teacher/classes", tags=["classes"])


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def create_class(
    payload: ClassCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await service.create_class(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[ClassResponse],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def list_classes(
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_classes(db, department=department)


@router.get(
    "/{class_id}",
    response_model=ClassResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def get_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    obj = await service.get_class(db, class_id)
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return obj


@router.put(
    "/{class_id}",
    response_model=ClassResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def update_class(
    class_id: UUID,
    payload: ClassUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        obj = await service.update_class(db, class_id, payload)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
        return obj
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{class_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def delete_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Delete a class. Its timetable assignments and transfers go with it."""
    deleted = await service.delete_class(db, class_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")


@teacher_router.get("", response_model=List[ClassResponse])
async def list_my_classes(
    teacher_id: Optional[UUID] = Query(None, description="Admins may pass a teacher; teachers get their own"),
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.TEACHER, UserRole.ADMIN)),
):
    target = teacher_id or current_user.id
    ensure_self_or_admin(current_user, target)
    return await service.list_teacher_classes(db, target)
