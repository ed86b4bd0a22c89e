from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.core.exceptions import ServiceError
from campus_attendance.core.models import SchoolClass, Subject, TeacherSubject

from campus_attendance.api.v1.users import service as users_service

from .schemas import TeacherSubjectCreate, TeacherSubjectResponse, TeacherSubjectUpdate


def _to_response(t: TeacherSubject) -> TeacherSubjectResponse:
    return TeacherSubjectResponse(
        id=t.id,
        teacher_id=t.teacher_id,
        class_id=t.class_id,
        subject_id=t.subject_id,
        day_order=t.day_order,
        start_time=t.start_time,
        end_time=t.end_time,
        auto_session_enabled=t.auto_session_enabled,
        created_at=t.created_at,
    )


async def create_teacher_subject(
    db: AsyncSession,
    payload: TeacherSubjectCreate,
) -> TeacherSubjectResponse:
    if not await users_service.get_teacher(db, payload.teacher_id):
        raise ServiceError("Invalid teacher", status.HTTP_400_BAD_REQUEST)
    if not await db.get(SchoolClass, payload.class_id):
        raise ServiceError("Invalid class", status.HTTP_400_BAD_REQUEST)
    if not await db.get(Subject, payload.subject_id):
        raise ServiceError("Invalid subject", status.HTTP_400_BAD_REQUEST)
    if payload.end_time <= payload.start_time:
        raise ServiceError("end_time must be after start_time", status.HTTP_400_BAD_REQUEST)
    try:
        obj = TeacherSubject(
            teacher_id=payload.teacher_id,
            class_id=payload.class_id,
            subject_id=payload.subject_id,
            day_order=payload.day_order,
            start_time=payload.start_time,
            end_time=payload.end_time,
            auto_session_enabled=payload.auto_session_enabled,
        )
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("This assignment already exists for that day order", status.HTTP_409_CONFLICT)


async def list_teacher_subjects(
    db: AsyncSession,
    teacher_id: Optional[UUID] = None,
    class_id: Optional[UUID] = None,
    day_order: Optional[int] = None,
) -> List[TeacherSubjectResponse]:
    stmt = select(TeacherSubject)
    if teacher_id is not None:
        stmt = stmt.where(TeacherSubject.teacher_id == teacher_id)
    if class_id is not None:
        stmt = stmt.where(TeacherSubject.class_id == class_id)
    if day_order is not None:
        stmt = stmt.where(TeacherSubject.day_order == day_order)
    stmt = stmt.order_by(TeacherSubject.day_order, TeacherSubject.start_time)
    result = await db.execute(stmt)
    return [_to_response(t) for t in result.scalars().all()]


async def update_teacher_subject(
    db: AsyncSession,
    assignment_id: UUID,
    payload: TeacherSubjectUpdate,
) -> Optional[TeacherSubjectResponse]:
    obj = await db.get(TeacherSubject, assignment_id)
    if not obj:
        return None
    if payload.teacher_id is not None:
        if not await users_service.get_teacher(db, payload.teacher_id):
            raise ServiceError("Invalid teacher", status.HTTP_400_BAD_REQUEST)
        obj.teacher_id = payload.teacher_id
    if payload.day_order is not None:
        obj.day_order = payload.day_order
    if payload.start_time is not None:
        obj.start_time = payload.start_time
    if payload.end_time is not None:
        obj.end_time = payload.end_time
    if payload.auto_session_enabled is not None:
        obj.auto_session_enabled = payload.auto_session_enabled
    if obj.end_time <= obj.start_time:
        await db.rollback()
        raise ServiceError("end_time must be after start_time", status.HTTP_400_BAD_REQUEST)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ServiceError("This assignment already exists for that day order", status.HTTP_409_CONFLICT)
    await db.refresh(obj)
    return _to_response(obj)


async def set_auto_session(
    db: AsyncSession,
    assignment_id: UUID,
    enabled: bool,
) -> Optional[TeacherSubjectResponse]:
    obj = await db.get(TeacherSubject, assignment_id)
    if not obj:
        return None
    obj.auto_session_enabled = enabled
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def delete_teacher_subject(db: AsyncSession, assignment_id: UUID) -> bool:
    obj = await db.get(TeacherSubject, assignment_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True
