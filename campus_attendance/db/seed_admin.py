"""
Seed script to create the tables and the first ADMIN user.

Run once with env set:
  ADMIN_EMAIL=admin@campus.edu
  ADMIN_PASSWORD=YourSecurePassword

  python -m campus_attendance.db.seed_admin
"""
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.auth.models import User
from campus_attendance.auth.security import hash_password
from campus_attendance.core.config import settings
from campus_attendance.core.enums import UserRole
from campus_attendance.db.session import AsyncSessionLocal, init_models

DEFAULT_ADMIN_FULL_NAME = "Campus Admin"


async def seed_admin(db: AsyncSession) -> None:
    email = settings.admin_email
    password = settings.admin_password
    if not email or not password:
        print("No ADMIN_EMAIL/ADMIN_PASSWORD; skipping admin user.")
        return

    result = await db.execute(select(User).where(User.email == email))
    admin = result.scalar_one_or_none()
    if not admin:
        db.add(
            User(
                full_name=DEFAULT_ADMIN_FULL_NAME,
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN.value,
                department=settings.default_department,
                status="ACTIVE",
            )
        )
        print("Created ADMIN user:", email)
    else:
        admin.role = UserRole.ADMIN.value
        admin.password_hash = hash_password(password)
        admin.status = "ACTIVE"
        print("Updated existing user to ADMIN:", email)

    await db.commit()
    print("Admin seed done.")


async def main() -> None:
    await init_models()
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise


if __name__ == "__main__":
    asyncio.run(main())
