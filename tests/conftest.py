import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import time
from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import campus_attendance.core.models  # noqa: F401  register mappers
from campus_attendance.auth.models import User
from campus_attendance.auth.security import create_access_token, hash_password
from campus_attendance.core.models import SchoolClass, Subject, TeacherSubject
from campus_attendance.db.session import Base, get_db
from campus_attendance.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "StrongPass123"


@pytest.fixture()
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """One in-memory SQLite database per test, shared by every connection of the test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for a test and override FastAPI dependency."""
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def make_user(
    db: AsyncSession,
    email: str,
    role: str = "TEACHER",
    full_name: str = "Test User",
    department: str = "General",
) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        department=department,
        status="ACTIVE",
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(
        subject={"sub": str(user.id), "user_id": str(user.id), "role": user.role}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, "admin@campus.edu", role="ADMIN", full_name="Asha Admin")


@pytest.fixture()
async def teacher(db_session: AsyncSession) -> User:
    return await make_user(db_session, "ravi@campus.edu", full_name="Ravi Kumar", department="CSE")


@pytest.fixture()
async def substitute(db_session: AsyncSession) -> User:
    return await make_user(db_session, "meena@campus.edu", full_name="Meena Iyer", department="CSE")


@pytest.fixture()
async def school_class(db_session: AsyncSession) -> SchoolClass:
    obj = SchoolClass(class_name="II B.Sc CS", section="A", year=2, department="CSE")
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest.fixture()
async def subject(db_session: AsyncSession) -> Subject:
    obj = Subject(subject_code="CS201", subject_name="Data Structures", credits=4, semester=3)
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


async def make_assignment(
    db: AsyncSession,
    teacher: User,
    school_class: SchoolClass,
    subject: Subject,
    day_order: int,
    start: time,
    end: time,
    auto_session_enabled: bool = True,
) -> TeacherSubject:
    obj = TeacherSubject(
        teacher_id=teacher.id,
        class_id=school_class.id,
        subject_id=subject.id,
        day_order=day_order,
        start_time=start,
        end_time=end,
        auto_session_enabled=auto_session_enabled,
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj
