import pytest
from httpx import AsyncClient

from campus_attendance.auth.models import User

from .conftest import TEST_PASSWORD, auth_headers


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, teacher: User) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ravi@campus.edu", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["id"] == str(teacher.id)
    assert data["user"]["role"] == "TEACHER"
    assert data["user"]["department"] == "CSE"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, teacher: User) -> None:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ravi@campus.edu", "password": "not-the-password"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_oauth_form(client: AsyncClient, admin: User) -> None:
    response = await client.post(
        "/api/v1/auth/login-oauth",
        data={"username": "admin@campus.edu", "password": TEST_PASSWORD},
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client: AsyncClient, db_session, teacher: User) -> None:
    teacher.status = "INACTIVE"
    await db_session.commit()
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "ravi@campus.edu", "password": TEST_PASSWORD},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_protected_route_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/admin/users")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_garbage_token_rejected(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/admin/users",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_teacher_cannot_use_admin_routes(client: AsyncClient, teacher: User) -> None:
    response = await client.get("/api/v1/admin/users", headers=auth_headers(teacher))
    assert response.status_code == 403
    assert response.json()["detail"] == "Insufficient permissions"
