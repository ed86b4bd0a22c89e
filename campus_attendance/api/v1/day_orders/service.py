"""
Day-order rotation per department.

For a date the answer is, in order of precedence:
1. an explicit setting for that date (a day order or a named holiday),
2. Sunday, which is always a holiday,
3. rotation from the most recent non-holiday setting before the date,
4. rotation from the department config (created with defaults on first use).
Rotation counts calendar days: ((base - 1 + days_between) % total_days) + 1.
"""

from datetime import date, timedelta
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.core.config import settings
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.core.models import DayOrderConfig, DayOrderSetting

from .schemas import (
    DayOrderConfigResponse,
    DayOrderConfigUpdate,
    DayOrderSettingCreate,
    DayOrderSettingResponse,
    DayOrderStatus,
)

SUNDAY = 6  # date.weekday()


def _department(department: Optional[str]) -> str:
    return (department or "").strip() or settings.default_department


def rotate(base_day_order: int, base_date: date, target_date: date, total_days: int) -> int:
    days_passed = (target_date - base_date).days
    return ((base_day_order - 1 + days_passed) % total_days) + 1


def _config_to_response(c: DayOrderConfig) -> DayOrderConfigResponse:
    return DayOrderConfigResponse(
        id=c.id,
        department=c.department,
        total_days=c.total_days,
        current_day_order=c.current_day_order,
        last_updated_date=c.last_updated_date,
        updated_at=c.updated_at,
    )


def _setting_to_response(s: DayOrderSetting) -> DayOrderSettingResponse:
    return DayOrderSettingResponse(
        id=s.id,
        department=s.department,
        effective_date=s.effective_date,
        day_order=s.day_order,
        is_holiday=s.is_holiday,
        holiday_name=s.holiday_name,
        reason=s.reason,
        changed_by_admin_id=s.changed_by_admin_id,
        changed_by_name=s.changed_by.full_name if s.changed_by else None,
        created_at=s.created_at,
    )


async def get_or_create_config(db: AsyncSession, department: Optional[str]) -> DayOrderConfig:
    department = _department(department)
    result = await db.execute(select(DayOrderConfig).where(DayOrderConfig.department == department))
    config = result.scalar_one_or_none()
    if config:
        return config
    config = DayOrderConfig(
        department=department,
        total_days=settings.default_cycle_days,
        current_day_order=1,
        last_updated_date=date.today(),
    )
    db.add(config)
    try:
        await db.commit()
    except IntegrityError:
        # Created concurrently by another request.
        await db.rollback()
        result = await db.execute(select(DayOrderConfig).where(DayOrderConfig.department == department))
        return result.scalar_one()
    await db.refresh(config)
    return config


async def _setting_for_date(db: AsyncSession, department: str, target_date: date) -> Optional[DayOrderSetting]:
    result = await db.execute(
        select(DayOrderSetting).where(
            DayOrderSetting.department == department,
            DayOrderSetting.effective_date == target_date,
        )
    )
    return result.scalar_one_or_none()


async def compute_day_order(
    db: AsyncSession,
    department: Optional[str],
    target_date: Optional[date] = None,
) -> DayOrderStatus:
    department = _department(department)
    target_date = target_date or date.today()

    explicit = await _setting_for_date(db, department, target_date)
    if explicit:
        return DayOrderStatus(
            department=department,
            day_order=None if explicit.is_holiday else explicit.day_order,
            is_holiday=explicit.is_holiday,
            holiday_name=explicit.holiday_name if explicit.is_holiday else None,
            effective_date=target_date,
            is_explicit_setting=True,
        )

    if target_date.weekday() == SUNDAY:
        return DayOrderStatus(
            department=department,
            is_holiday=True,
            holiday_name="Sunday",
            effective_date=target_date,
        )

    config = await get_or_create_config(db, department)
    result = await db.execute(
        select(DayOrderSetting)
        .where(
            DayOrderSetting.department == department,
            DayOrderSetting.effective_date < target_date,
            DayOrderSetting.is_holiday.is_(False),
            DayOrderSetting.day_order.is_not(None),
        )
        .order_by(DayOrderSetting.effective_date.desc())
        .limit(1)
    )
    last_setting = result.scalar_one_or_none()
    if last_setting:
        day_order = rotate(last_setting.day_order, last_setting.effective_date, target_date, config.total_days)
    else:
        day_order = rotate(config.current_day_order, config.last_updated_date, target_date, config.total_days)

    return DayOrderStatus(
        department=department,
        day_order=day_order,
        effective_date=target_date,
    )


async def list_upcoming(
    db: AsyncSession,
    department: Optional[str],
    start_date: Optional[date] = None,
    days: int = 7,
) -> List[DayOrderStatus]:
    start_date = start_date or date.today()
    return [
        await compute_day_order(db, department, start_date + timedelta(days=i))
        for i in range(days)
    ]


async def list_history(
    db: AsyncSession,
    department: Optional[str],
    limit: int = 30,
) -> List[DayOrderSettingResponse]:
    result = await db.execute(
        select(DayOrderSetting)
        .options(selectinload(DayOrderSetting.changed_by))
        .where(DayOrderSetting.department == _department(department))
        .order_by(DayOrderSetting.effective_date.desc())
        .limit(limit)
        .execution_options(populate_existing=True)
    )
    return [_setting_to_response(s) for s in result.scalars().all()]


async def set_day_order(
    db: AsyncSession,
    payload: DayOrderSettingCreate,
    admin_id: UUID,
) -> Tuple[DayOrderSettingResponse, bool]:
    """Create or replace the setting for (department, date). Returns (setting, created)."""
    department = _department(payload.department)
    setting = await _setting_for_date(db, department, payload.effective_date)
    created = setting is None
    if created:
        setting = DayOrderSetting(department=department, effective_date=payload.effective_date)
        db.add(setting)
    setting.day_order = None if payload.is_holiday else payload.day_order
    setting.is_holiday = payload.is_holiday
    setting.holiday_name = payload.holiday_name if payload.is_holiday else None
    setting.reason = payload.reason
    setting.changed_by_admin_id = admin_id
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A day order setting already exists for this date", status.HTTP_409_CONFLICT)
    result = await db.execute(
        select(DayOrderSetting)
        .options(selectinload(DayOrderSetting.changed_by))
        .where(DayOrderSetting.id == setting.id)
        .execution_options(populate_existing=True)
    )
    return _setting_to_response(result.scalar_one()), created


async def update_config(db: AsyncSession, payload: DayOrderConfigUpdate) -> DayOrderConfigResponse:
    """Reset the rotation: `current_day_order` applies from today."""
    config = await get_or_create_config(db, payload.department)
    config.total_days = payload.total_days
    config.current_day_order = payload.current_day_order
    config.last_updated_date = date.today()
    await db.commit()
    await db.refresh(config)
    return _config_to_response(config)


async def get_config(db: AsyncSession, department: Optional[str]) -> DayOrderConfigResponse:
    return _config_to_response(await get_or_create_config(db, department))


async def delete_setting(db: AsyncSession, setting_id: UUID, department: Optional[str] = None) -> bool:
    setting = await db.get(DayOrderSetting, setting_id)
    if not setting:
        return False
    if department is not None and setting.department != _department(department):
        return False
    await db.delete(setting)
    await db.commit()
    return True
