from datetime import date, time
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.api.v1.scheduled_sessions import matcher, service
from campus_attendance.api.v1.scheduled_sessions.resolver import DayOrderState
from campus_attendance.auth.models import User
from campus_attendance.core.models import DayOrderSetting, SchoolClass, Subject

from .conftest import auth_headers, make_assignment, make_user


class StubLookup:
    def __init__(self, **state) -> None:
        self.state = state

    async def current(self, department: str, target_date: date) -> DayOrderState:
        return DayOrderState(department=department, target_date=target_date, **self.state)


@pytest.fixture()
async def timetable(db_session: AsyncSession, teacher: User, school_class: SchoolClass, subject: Subject):
    other = await make_user(db_session, "other@campus.edu")
    afternoon = await make_assignment(db_session, teacher, school_class, subject, 2, time(14, 30), time(15, 20))
    section_b = SchoolClass(class_name="II B.Sc CS", section="B", year=2, department="CSE")
    db_session.add(section_b)
    await db_session.commit()
    morning = await make_assignment(db_session, teacher, section_b, subject, 2, time(9, 0), time(9, 50))
    lab = Subject(subject_code="CS201L", subject_name="Data Structures Lab")
    db_session.add(lab)
    await db_session.commit()
    await make_assignment(db_session, teacher, school_class, lab, 2, time(11, 0), time(12, 40), auto_session_enabled=False)
    await make_assignment(db_session, teacher, school_class, subject, 3, time(10, 0), time(10, 50))
    await make_assignment(db_session, other, school_class, subject, 2, time(10, 0), time(10, 50))
    return {"morning": morning, "afternoon": afternoon}


@pytest.mark.asyncio
async def test_match_filters_and_orders(db_session: AsyncSession, teacher: User, timetable) -> None:
    sessions = await matcher.match(db_session, teacher.id, 2)
    assert [s.id for s in sessions] == [timetable["morning"].id, timetable["afternoon"].id]
    assert [s.display_time for s in sessions] == ["9:00 AM", "2:30 PM"]
    assert sessions[1].start_time_24h == "14:30"
    assert sessions[1].class_name == "II B.Sc CS"
    assert sessions[1].section == "A"
    assert sessions[1].subject_code == "CS201"
    assert sessions[1].subject_name == "Data Structures"
    assert all(s.auto_session_enabled for s in sessions)


@pytest.mark.asyncio
async def test_match_is_exact_on_day_order(db_session: AsyncSession, teacher: User, timetable) -> None:
    assert len(await matcher.match(db_session, teacher.id, 3)) == 1
    assert await matcher.match(db_session, teacher.id, 4) == []


@pytest.mark.asyncio
async def test_service_uses_resolved_day_order(db_session: AsyncSession, teacher: User, timetable) -> None:
    result = await service.get_scheduled_sessions(db_session, StubLookup(day_order=2), teacher.id, "CSE")
    assert result.current_day_order == 2
    assert result.is_holiday is False
    assert result.count == 2


@pytest.mark.asyncio
async def test_holiday_skips_assignment_query() -> None:
    db = AsyncMock()
    teacher_id = "5f0c6a9e-2d1b-4c7e-9a55-0b7f1e0d2c11"
    result = await service.get_scheduled_sessions(
        db, StubLookup(holiday=True, holiday_name="Republic Day"), teacher_id
    )
    assert result.is_holiday is True
    assert result.holiday_name == "Republic Day"
    assert result.scheduled_sessions == []
    assert result.count == 0
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_endpoint_returns_todays_sessions(
    client: AsyncClient, db_session: AsyncSession, teacher: User, timetable
) -> None:
    db_session.add(DayOrderSetting(department="General", effective_date=date.today(), day_order=2))
    await db_session.commit()

    response = await client.get(
        "/api/v1/teacher/scheduled-sessions",
        params={"teacher_id": str(teacher.id)},
        headers=auth_headers(teacher),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["teacher_id"] == str(teacher.id)
    assert data["current_day_order"] == 2
    assert data["count"] == 2
    assert data["scheduled_sessions"][1]["display_time"] == "2:30 PM"


@pytest.mark.asyncio
async def test_endpoint_holiday(client: AsyncClient, db_session: AsyncSession, teacher: User, timetable) -> None:
    db_session.add(
        DayOrderSetting(
            department="CSE",
            effective_date=date.today(),
            is_holiday=True,
            holiday_name="Pongal",
        )
    )
    await db_session.commit()

    response = await client.get(
        "/api/v1/teacher/scheduled-sessions",
        params={"teacher_id": str(teacher.id), "department": "CSE"},
        headers=auth_headers(teacher),
    )
    data = response.json()
    assert data["is_holiday"] is True
    assert data["holiday_name"] == "Pongal"
    assert data["scheduled_sessions"] == []
    assert data["count"] == 0


@pytest.mark.asyncio
async def test_endpoint_requires_teacher_id(client: AsyncClient, teacher: User) -> None:
    response = await client.get("/api/v1/teacher/scheduled-sessions", headers=auth_headers(teacher))
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "teacher_id is required"}


@pytest.mark.asyncio
async def test_teacher_cannot_read_another_schedule(
    client: AsyncClient, db_session: AsyncSession, teacher: User
) -> None:
    other = await make_user(db_session, "other@campus.edu")
    response = await client.get(
        "/api/v1/teacher/scheduled-sessions",
        params={"teacher_id": str(other.id)},
        headers=auth_headers(teacher),
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_read_any_schedule(
    client: AsyncClient, db_session: AsyncSession, admin: User, teacher: User, timetable
) -> None:
    db_session.add(DayOrderSetting(department="General", effective_date=date.today(), day_order=3))
    await db_session.commit()
    response = await client.get(
        "/api/v1/teacher/scheduled-sessions",
        params={"teacher_id": str(teacher.id)},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["count"] == 1
