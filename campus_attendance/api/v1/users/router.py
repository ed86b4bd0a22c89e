from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import require_roles
from campus_attendance.core.enums import UserRole
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.db.session import get_db

from .schemas import UserCreate, UserResponse
from . import service

router = APIRouter(prefix="/api/v1/admin/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a teacher, student, security or admin account."""
    try:
        return await service.create_user(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[UserResponse],
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def list_users(
    role: Optional[UserRole] = Query(None),
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_users(db, role=role.value if role else None, department=department)
