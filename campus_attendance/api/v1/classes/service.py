from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.core.config import settings
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.core.models import SchoolClass, TeacherSubject

from .schemas import ClassCreate, ClassResponse, ClassUpdate


def _to_response(c: SchoolClass) -> ClassResponse:
    return ClassResponse(
        id=c.id,
        class_name=c.class_name,
        section=c.section,
        year=c.year,
        department=c.department,
        created_at=c.created_at,
    )


async def create_class(db: AsyncSession, payload: ClassCreate) -> ClassResponse:
    try:
        obj = SchoolClass(
            class_name=payload.class_name.strip(),
            section=payload.section.strip().upper() if payload.section else None,
            year=payload.year,
            department=(payload.department or settings.default_department).strip(),
        )
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Class with this name and section already exists in the department", status.HTTP_409_CONFLICT)


async def list_classes(db: AsyncSession, department: Optional[str] = None) -> List[ClassResponse]:
    stmt = select(SchoolClass)
    if department is not None:
        stmt = stmt.where(SchoolClass.department == department)
    stmt = stmt.order_by(SchoolClass.class_name, SchoolClass.section)
    result = await db.execute(stmt)
    return [_to_response(c) for c in result.scalars().all()]


async def get_class(db: AsyncSession, class_id: UUID) -> Optional[ClassResponse]:
    obj = await db.get(SchoolClass, class_id)
    return _to_response(obj) if obj else None


async def update_class(db: AsyncSession, class_id: UUID, payload: ClassUpdate) -> Optional[ClassResponse]:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        return None
    if payload.class_name is not None:
        obj.class_name = payload.class_name.strip()
    if payload.section is not None:
        obj.section = payload.section.strip().upper()
    if payload.year is not None:
        obj.year = payload.year
    if payload.department is not None:
        obj.department = payload.department.strip()
    try:
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Class with this name and section already exists in the department", status.HTTP_409_CONFLICT)


async def delete_class(db: AsyncSession, class_id: UUID) -> bool:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True


async def list_teacher_classes(db: AsyncSession, teacher_id: UUID) -> List[ClassResponse]:
    """Unique classes a teacher is assigned to (a teacher may have several subjects per class)."""
    result = await db.execute(
        select(SchoolClass)
        .join(TeacherSubject, TeacherSubject.class_id == SchoolClass.id)
        .where(TeacherSubject.teacher_id == teacher_id)
        .distinct()
        .order_by(SchoolClass.class_name, SchoolClass.section)
    )
    return [_to_response(c) for c in result.scalars().all()]
