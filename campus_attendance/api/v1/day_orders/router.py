from datetime import date
from typing import Optional, Union
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.rbac import require_roles
from campus_attendance.auth.schemas import CurrentUser
from campus_attendance.core.enums import DayOrderAction, UserRole
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.db.session import get_db

from .schemas import (
    DayOrderConfigEnvelope,
    DayOrderConfigUpdate,
    DayOrderHistory,
    DayOrderSettingCreate,
    DayOrderSettingEnvelope,
    DayOrderStatus,
    UpcomingDayOrders,
)
from . import service

router = APIRouter(prefix="/api/v1/day-order", tags=["day-order"])
admin_router = APIRouter(
    prefix="/api/v1/admin/day-order",
    tags=["day-order"],
)


@router.get("", response_model=Union[DayOrderStatus, UpcomingDayOrders])
async def get_day_order(
    action: DayOrderAction = Query(DayOrderAction.current),
    department: Optional[str] = Query(None),
    target_date: Optional[date] = Query(None, alias="date", description="Defaults to today"),
    days: int = Query(7, ge=1, le=31),
    db: AsyncSession = Depends(get_db),
):
    """Current day order (action=current) or the schedule for the next days (action=upcoming)."""
    if action == DayOrderAction.upcoming:
        upcoming = await service.list_upcoming(db, department, start_date=target_date, days=days)
        config = await service.get_config(db, department)
        return UpcomingDayOrders(department=config.department, upcoming=upcoming, config=config)
    return await service.compute_day_order(db, department, target_date)


@admin_router.get("/config", response_model=DayOrderConfigEnvelope, dependencies=[Depends(require_roles(UserRole.ADMIN))])
async def get_config(
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return DayOrderConfigEnvelope(config=await service.get_config(db, department))


@admin_router.put("/config", response_model=DayOrderConfigEnvelope, dependencies=[Depends(require_roles(UserRole.ADMIN))])
async def update_config(
    payload: DayOrderConfigUpdate,
    db: AsyncSession = Depends(get_db),
):
    config = await service.update_config(db, payload)
    return DayOrderConfigEnvelope(config=config, message="Configuration updated")


@admin_router.get("/history", response_model=DayOrderHistory, dependencies=[Depends(require_roles(UserRole.ADMIN))])
async def get_history(
    department: Optional[str] = Query(None),
    limit: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
):
    return DayOrderHistory(history=await service.list_history(db, department, limit=limit))


@admin_router.post("/settings", response_model=DayOrderSettingEnvelope)
async def set_day_order(
    payload: DayOrderSettingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(UserRole.ADMIN)),
):
    """Set the day order for a date or declare it a holiday. Replaces any existing setting for that date."""
    try:
        setting, created = await service.set_day_order(db, payload, current_user.id)
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})
    message = "Day order set successfully" if created else "Day order updated successfully"
    return DayOrderSettingEnvelope(message=message, setting=setting)


@admin_router.delete(
    "/settings/{setting_id}",
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def delete_setting(
    setting_id: UUID,
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    deleted = await service.delete_setting(db, setting_id, department)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Day order setting not found")
    return {"success": True, "message": "Day order setting deleted"}
