from uuid import UUID

from fastapi import Depends, HTTPException, status

from campus_attendance.auth.dependencies import get_current_user
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import UserRole


def require_roles(*roles: UserRole):
    """
    Dependency factory to enforce that the caller holds one of the given roles.

    Example:
        Depends(require_roles(UserRole.ADMIN))
    """
    allowed = {r.value for r in roles}

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _checker


def ensure_self_or_admin(current_user: CurrentUser, teacher_id: UUID) -> None:
    """Teachers may only act on their own records; admins may act for anyone."""
    if current_user.role == UserRole.ADMIN.value:
        return
    if current_user.id != teacher_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Teachers can only access their own records",
        )
