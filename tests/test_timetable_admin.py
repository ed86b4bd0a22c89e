import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.models import User
from campus_attendance.core.models import SchoolClass, Subject

from .conftest import auth_headers


@pytest.mark.asyncio
async def test_admin_creates_and_lists_users(client: AsyncClient, admin: User) -> None:
    payload = {
        "full_name": "Lakshmi Narayanan",
        "email": "lakshmi@campus.edu",
        "password": "StrongPass123",
        "role": "TEACHER",
        "department": "Maths",
    }
    response = await client.post("/api/v1/admin/users", json=payload, headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["role"] == "TEACHER"

    duplicate = await client.post("/api/v1/admin/users", json=payload, headers=auth_headers(admin))
    assert duplicate.status_code == 409

    listed = await client.get(
        "/api/v1/admin/users", params={"role": "TEACHER", "department": "Maths"}, headers=auth_headers(admin)
    )
    assert [u["email"] for u in listed.json()] == ["lakshmi@campus.edu"]


@pytest.mark.asyncio
async def test_class_crud(client: AsyncClient, admin: User) -> None:
    headers = auth_headers(admin)
    created = await client.post(
        "/api/v1/admin/classes",
        json={"class_name": "I B.Com", "section": "C", "year": 1, "department": "Commerce"},
        headers=headers,
    )
    assert created.status_code == 201
    class_id = created.json()["id"]

    clash = await client.post(
        "/api/v1/admin/classes",
        json={"class_name": "I B.Com", "section": "C", "department": "Commerce"},
        headers=headers,
    )
    assert clash.status_code == 409

    updated = await client.put(f"/api/v1/admin/classes/{class_id}", json={"section": "D"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["section"] == "D"

    deleted = await client.delete(f"/api/v1/admin/classes/{class_id}", headers=headers)
    assert deleted.status_code == 204
    missing = await client.get(f"/api/v1/admin/classes/{class_id}", headers=headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_subject_code_uppercased_and_unique(client: AsyncClient, admin: User) -> None:
    headers = auth_headers(admin)
    created = await client.post(
        "/api/v1/admin/subjects",
        json={"subject_code": "ma101", "subject_name": "Calculus", "credits": 4},
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["subject_code"] == "MA101"

    again = await client.post(
        "/api/v1/admin/subjects",
        json={"subject_code": "MA101", "subject_name": "Calculus II"},
        headers=headers,
    )
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_assignment_lifecycle(
    client: AsyncClient,
    admin: User,
    teacher: User,
    school_class: SchoolClass,
    subject: Subject,
) -> None:
    headers = auth_headers(admin)
    payload = {
        "teacher_id": str(teacher.id),
        "class_id": str(school_class.id),
        "subject_id": str(subject.id),
        "day_order": 2,
        "start_time": "14:30",
        "end_time": "15:20",
    }
    created = await client.post("/api/v1/admin/teacher-subjects", json=payload, headers=headers)
    assert created.status_code == 201
    data = created.json()
    assert data["start_time"] == "14:30"
    assert data["end_time"] == "15:20"
    assert data["auto_session_enabled"] is False

    toggled = await client.patch(
        f"/api/v1/admin/teacher-subjects/{data['id']}/auto-session",
        json={"auto_session_enabled": True},
        headers=headers,
    )
    assert toggled.status_code == 200
    assert toggled.json()["auto_session_enabled"] is True

    listed = await client.get(
        "/api/v1/admin/teacher-subjects", params={"teacher_id": str(teacher.id)}, headers=headers
    )
    assert len(listed.json()) == 1

    mine = await client.get("/api/v1/teacher/classes", headers=auth_headers(teacher))
    assert mine.status_code == 200
    assert [c["id"] for c in mine.json()] == [str(school_class.id)]


@pytest.mark.asyncio
async def test_assignment_rejects_bad_slot(
    client: AsyncClient,
    admin: User,
    teacher: User,
    school_class: SchoolClass,
    subject: Subject,
) -> None:
    payload = {
        "teacher_id": str(teacher.id),
        "class_id": str(school_class.id),
        "subject_id": str(subject.id),
        "day_order": 1,
        "start_time": "10:00",
        "end_time": "09:00",
    }
    response = await client.post("/api/v1/admin/teacher-subjects", json=payload, headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "end_time must be after start_time"


@pytest.mark.asyncio
async def test_assignment_requires_teacher_role(
    client: AsyncClient,
    admin: User,
    school_class: SchoolClass,
    subject: Subject,
) -> None:
    payload = {
        "teacher_id": str(admin.id),
        "class_id": str(school_class.id),
        "subject_id": str(subject.id),
        "day_order": 1,
        "start_time": "09:00",
        "end_time": "09:50",
    }
    response = await client.post("/api/v1/admin/teacher-subjects", json=payload, headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid teacher"
