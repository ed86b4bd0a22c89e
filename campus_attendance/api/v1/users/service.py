from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.models import User
from campus_attendance.auth.security import hash_password
from campus_attendance.core.exceptions import ServiceError

from .schemas import UserCreate, UserResponse


def _to_response(u: User) -> UserResponse:
    return UserResponse(
        id=u.id,
        full_name=u.full_name,
        email=u.email,
        role=u.role,
        department=u.department,
        status=u.status,
        created_at=u.created_at,
    )


async def create_user(db: AsyncSession, payload: UserCreate) -> UserResponse:
    existing = (
        await db.execute(select(User.id).where(User.email == payload.email))
    ).scalar_one_or_none()
    if existing:
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT)
    try:
        user = User(
            full_name=payload.full_name.strip(),
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role.value,
            department=payload.department.strip() if payload.department else None,
            status="ACTIVE",
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return _to_response(user)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Email is already in use", status.HTTP_409_CONFLICT)


async def list_users(
    db: AsyncSession,
    role: Optional[str] = None,
    department: Optional[str] = None,
) -> List[UserResponse]:
    stmt = select(User)
    if role is not None:
        stmt = stmt.where(User.role == role)
    if department is not None:
        stmt = stmt.where(User.department == department)
    stmt = stmt.order_by(User.full_name)
    result = await db.execute(stmt)
    return [_to_response(u) for u in result.scalars().all()]


async def get_teacher(db: AsyncSession, teacher_id) -> Optional[User]:
    """Return the user if it exists and is a teacher."""
    user = await db.get(User, teacher_id)
    if not user or user.role != "TEACHER":
        return None
    return user
