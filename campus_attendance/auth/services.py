from datetime import datetime, timezone

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.models import User
from campus_attendance.auth.schemas import LoginRequest, LoginResponse, UserInfo
from campus_attendance.auth.security import create_access_token, verify_password
from campus_attendance.core.exceptions import ServiceError


async def login_user(db: AsyncSession, payload: LoginRequest) -> LoginResponse:
    result = await db.execute(select(User).where(User.email == payload.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        raise ServiceError("Invalid email or password", status.HTTP_401_UNAUTHORIZED)
    if user.status != "ACTIVE":
        raise ServiceError("User account is not active", status.HTTP_403_FORBIDDEN)

    access_token = create_access_token(
        subject={"sub": str(user.id), "user_id": str(user.id), "role": user.role}
    )
    return LoginResponse(
        access_token=access_token,
        user=UserInfo(
            id=user.id,
            name=user.full_name,
            email=user.email,
            role=user.role,
            department=user.department,
        ),
        issued_at=datetime.now(timezone.utc),
    )
