from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.api.v1.day_orders import service
from campus_attendance.auth.models import User
from campus_attendance.core.models import DayOrderConfig, DayOrderSetting

from .conftest import auth_headers

MONDAY = date(2024, 1, 1)


async def _config(db: AsyncSession, department: str = "CSE", total_days: int = 6, current: int = 1) -> None:
    db.add(
        DayOrderConfig(
            department=department,
            total_days=total_days,
            current_day_order=current,
            last_updated_date=MONDAY,
        )
    )
    await db.commit()


@pytest.mark.parametrize(
    "base, days, total, expected",
    [
        (1, 0, 6, 1),
        (1, 2, 6, 3),
        (6, 1, 6, 1),
        (1, 7, 6, 2),
        (3, 10, 5, 3),
    ],
)
def test_rotate(base: int, days: int, total: int, expected: int) -> None:
    assert service.rotate(base, MONDAY, MONDAY + timedelta(days=days), total) == expected


@pytest.mark.asyncio
async def test_rotation_from_config(db_session: AsyncSession) -> None:
    await _config(db_session)
    status = await service.compute_day_order(db_session, "CSE", date(2024, 1, 3))
    assert status.day_order == 3
    assert status.is_holiday is False
    assert status.is_explicit_setting is False


@pytest.mark.asyncio
async def test_sunday_is_holiday(db_session: AsyncSession) -> None:
    await _config(db_session)
    status = await service.compute_day_order(db_session, "CSE", date(2024, 1, 7))
    assert status.is_holiday is True
    assert status.holiday_name == "Sunday"
    assert status.day_order is None


@pytest.mark.asyncio
async def test_rotation_counts_calendar_days(db_session: AsyncSession) -> None:
    await _config(db_session)
    status = await service.compute_day_order(db_session, "CSE", date(2024, 1, 8))
    assert status.day_order == 2


@pytest.mark.asyncio
async def test_explicit_setting_wins_and_seeds_rotation(db_session: AsyncSession) -> None:
    await _config(db_session)
    db_session.add(DayOrderSetting(department="CSE", effective_date=date(2024, 1, 3), day_order=5))
    await db_session.commit()

    explicit = await service.compute_day_order(db_session, "CSE", date(2024, 1, 3))
    assert explicit.day_order == 5
    assert explicit.is_explicit_setting is True

    following = await service.compute_day_order(db_session, "CSE", date(2024, 1, 4))
    assert following.day_order == 6
    assert following.is_explicit_setting is False


@pytest.mark.asyncio
async def test_explicit_holiday(db_session: AsyncSession) -> None:
    await _config(db_session)
    db_session.add(
        DayOrderSetting(
            department="CSE",
            effective_date=date(2024, 1, 5),
            is_holiday=True,
            holiday_name="Founders Day",
        )
    )
    await db_session.commit()
    status = await service.compute_day_order(db_session, "CSE", date(2024, 1, 5))
    assert status.is_holiday is True
    assert status.holiday_name == "Founders Day"
    # Holidays do not reset the rotation.
    after = await service.compute_day_order(db_session, "CSE", date(2024, 1, 6))
    assert after.day_order == 6


@pytest.mark.asyncio
async def test_explicit_setting_overrides_sunday(db_session: AsyncSession) -> None:
    await _config(db_session)
    db_session.add(DayOrderSetting(department="CSE", effective_date=date(2024, 1, 7), day_order=2))
    await db_session.commit()
    status = await service.compute_day_order(db_session, "CSE", date(2024, 1, 7))
    assert status.is_holiday is False
    assert status.day_order == 2


@pytest.mark.asyncio
async def test_departments_are_independent(db_session: AsyncSession) -> None:
    await _config(db_session, "CSE")
    await _config(db_session, "ECE", total_days=5, current=4)
    cse = await service.compute_day_order(db_session, "CSE", date(2024, 1, 2))
    ece = await service.compute_day_order(db_session, "ECE", date(2024, 1, 2))
    assert (cse.day_order, ece.day_order) == (2, 5)


@pytest.mark.asyncio
async def test_config_created_on_first_use(db_session: AsyncSession) -> None:
    target = date.today() if date.today().weekday() != 6 else date.today() + timedelta(days=1)
    status = await service.compute_day_order(db_session, None, target)
    assert status.department == "General"
    result = await db_session.execute(select(DayOrderConfig).where(DayOrderConfig.department == "General"))
    config = result.scalar_one()
    assert config.total_days == 6
    assert config.current_day_order == 1
    assert config.last_updated_date == date.today()


@pytest.mark.asyncio
async def test_public_endpoint_current(client: AsyncClient, db_session: AsyncSession) -> None:
    await _config(db_session)
    response = await client.get("/api/v1/day-order", params={"department": "CSE", "date": "2024-01-03"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["dayOrder"] == 3
    assert data["isHoliday"] is False
    assert data["effectiveDate"] == "2024-01-03"
    assert data["isExplicitSetting"] is False


@pytest.mark.asyncio
async def test_public_endpoint_upcoming(client: AsyncClient, db_session: AsyncSession) -> None:
    await _config(db_session)
    response = await client.get(
        "/api/v1/day-order",
        params={"action": "upcoming", "department": "CSE", "date": "2024-01-05", "days": 3},
    )
    assert response.status_code == 200
    upcoming = response.json()["upcoming"]
    assert [d["effectiveDate"] for d in upcoming] == ["2024-01-05", "2024-01-06", "2024-01-07"]
    assert [d["dayOrder"] for d in upcoming] == [5, 6, None]
    assert upcoming[2]["holidayName"] == "Sunday"


@pytest.mark.asyncio
async def test_admin_sets_and_updates_day_order(client: AsyncClient, admin: User) -> None:
    body = {"department": "CSE", "effectiveDate": "2024-02-05", "dayOrder": 4, "reason": "Exam shuffle"}
    response = await client.post("/api/v1/admin/day-order/settings", json=body, headers=auth_headers(admin))
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Day order set successfully"
    assert data["setting"]["dayOrder"] == 4
    assert data["setting"]["changedByName"] == "Asha Admin"

    body.update({"isHoliday": True, "holidayName": "Rain holiday"})
    response = await client.post("/api/v1/admin/day-order/settings", json=body, headers=auth_headers(admin))
    data = response.json()
    assert data["message"] == "Day order updated successfully"
    assert data["setting"]["isHoliday"] is True
    assert data["setting"]["dayOrder"] is None

    history = await client.get(
        "/api/v1/admin/day-order/history", params={"department": "CSE"}, headers=auth_headers(admin)
    )
    assert len(history.json()["history"]) == 1

    current = await client.get("/api/v1/day-order", params={"department": "CSE", "date": "2024-02-05"})
    assert current.json()["holidayName"] == "Rain holiday"


@pytest.mark.asyncio
async def test_setting_without_day_order_rejected(client: AsyncClient, admin: User) -> None:
    response = await client.post(
        "/api/v1/admin/day-order/settings",
        json={"department": "CSE", "effectiveDate": "2024-02-05"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_teacher_cannot_set_day_order(client: AsyncClient, teacher: User) -> None:
    response = await client.post(
        "/api/v1/admin/day-order/settings",
        json={"department": "CSE", "effectiveDate": "2024-02-05", "dayOrder": 1},
        headers=auth_headers(teacher),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_config(client: AsyncClient, admin: User) -> None:
    response = await client.put(
        "/api/v1/admin/day-order/config",
        json={"department": "CSE", "totalDays": 5, "currentDayOrder": 4},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    config = response.json()["config"]
    assert config["totalDays"] == 5
    assert config["currentDayOrder"] == 4
    assert config["lastUpdatedDate"] == date.today().isoformat()

    bad = await client.put(
        "/api/v1/admin/day-order/config",
        json={"department": "CSE", "totalDays": 3, "currentDayOrder": 4},
        headers=auth_headers(admin),
    )
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_delete_setting(client: AsyncClient, db_session: AsyncSession, admin: User) -> None:
    setting = DayOrderSetting(department="CSE", effective_date=date(2024, 2, 6), day_order=2)
    db_session.add(setting)
    await db_session.commit()

    response = await client.delete(f"/api/v1/admin/day-order/settings/{setting.id}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["success"] is True

    again = await client.delete(f"/api/v1/admin/day-order/settings/{setting.id}", headers=auth_headers(admin))
    assert again.status_code == 404
