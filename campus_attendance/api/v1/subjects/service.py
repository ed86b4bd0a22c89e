from typing import List, Optional
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.core.exceptions import ServiceError
from campus_attendance.core.models import Subject

from .schemas import SubjectCreate, SubjectResponse, SubjectUpdate


def _to_response(s: Subject) -> SubjectResponse:
    return SubjectResponse(
        id=s.id,
        subject_code=s.subject_code,
        subject_name=s.subject_name,
        credits=s.credits,
        semester=s.semester,
        created_at=s.created_at,
    )


async def _existing_by_code(
    db: AsyncSession,
    code: str,
    exclude_subject_id: Optional[UUID] = None,
) -> Optional[Subject]:
    stmt = select(Subject).where(Subject.subject_code == code)
    if exclude_subject_id is not None:
        stmt = stmt.where(Subject.id != exclude_subject_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def create_subject(db: AsyncSession, payload: SubjectCreate) -> SubjectResponse:
    code = payload.subject_code.strip().upper()
    if await _existing_by_code(db, code):
        raise ServiceError(f"Subject code '{code}' already exists", status.HTTP_409_CONFLICT)
    try:
        obj = Subject(
            subject_code=code,
            subject_name=payload.subject_name.strip(),
            credits=payload.credits,
            semester=payload.semester,
        )
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
        return _to_response(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError(f"Subject code '{code}' already exists", status.HTTP_409_CONFLICT)


async def list_subjects(db: AsyncSession) -> List[SubjectResponse]:
    result = await db.execute(select(Subject).order_by(Subject.subject_code))
    return [_to_response(s) for s in result.scalars().all()]


async def get_subject(db: AsyncSession, subject_id: UUID) -> Optional[SubjectResponse]:
    obj = await db.get(Subject, subject_id)
    return _to_response(obj) if obj else None


async def update_subject(
    db: AsyncSession,
    subject_id: UUID,
    payload: SubjectUpdate,
) -> Optional[SubjectResponse]:
    obj = await db.get(Subject, subject_id)
    if not obj:
        return None
    if payload.subject_code is not None:
        code = payload.subject_code.strip().upper()
        if await _existing_by_code(db, code, exclude_subject_id=subject_id):
            raise ServiceError(f"Subject code '{code}' already exists", status.HTTP_409_CONFLICT)
        obj.subject_code = code
    if payload.subject_name is not None:
        obj.subject_name = payload.subject_name.strip()
    if payload.credits is not None:
        obj.credits = payload.credits
    if payload.semester is not None:
        obj.semester = payload.semester
    await db.commit()
    await db.refresh(obj)
    return _to_response(obj)


async def delete_subject(db: AsyncSession, subject_id: UUID) -> bool:
    obj = await db.get(Subject, subject_id)
    if not obj:
        return False
    await db.delete(obj)
    await db.commit()
    return True
