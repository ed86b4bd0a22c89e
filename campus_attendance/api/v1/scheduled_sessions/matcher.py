"""Select auto-session assignments for a day order."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.core.models import SchoolClass, TeacherSubject
from campus_attendance.core.time_format import format_display_time, format_time_24

from .schemas import ScheduledSession


def _to_scheduled(a: TeacherSubject) -> ScheduledSession:
    start_24h = format_time_24(a.start_time)
    return ScheduledSession(
        id=a.id,
        teacher_id=a.teacher_id,
        class_id=a.class_id,
        subject_id=a.subject_id,
        day_order=a.day_order,
        start_time=start_24h,
        end_time=format_time_24(a.end_time),
        auto_session_enabled=a.auto_session_enabled,
        class_name=a.school_class.class_name if a.school_class else None,
        section=a.school_class.section if a.school_class else None,
        subject_code=a.subject.subject_code if a.subject else None,
        subject_name=a.subject.subject_name if a.subject else None,
        display_time=format_display_time(start_24h),
        start_time_24h=start_24h,
    )


def _auto_session_slots(day_order: int) -> Select:
    return (
        select(TeacherSubject)
        .options(selectinload(TeacherSubject.school_class), selectinload(TeacherSubject.subject))
        .where(
            TeacherSubject.day_order == day_order,
            TeacherSubject.auto_session_enabled.is_(True),
        )
        .execution_options(populate_existing=True)
    )


async def match(db: AsyncSession, teacher_id: UUID, day_order: int) -> List[ScheduledSession]:
    """Exact match on teacher and day order; only assignments with auto sessions enabled. Earliest first."""
    result = await db.execute(
        _auto_session_slots(day_order)
        .where(TeacherSubject.teacher_id == teacher_id)
        .order_by(TeacherSubject.start_time)
    )
    return [_to_scheduled(a) for a in result.scalars().all()]


async def match_department(
    db: AsyncSession,
    day_order: int,
    department: str,
    class_id: Optional[UUID] = None,
) -> List[ScheduledSession]:
    """Same filter as `match` across every teacher of a department's classes."""
    stmt = (
        _auto_session_slots(day_order)
        .join(SchoolClass, SchoolClass.id == TeacherSubject.class_id)
        .where(SchoolClass.department == department)
    )
    if class_id is not None:
        stmt = stmt.where(TeacherSubject.class_id == class_id)
    result = await db.execute(stmt.order_by(TeacherSubject.start_time, SchoolClass.class_name, SchoolClass.section))
    return [_to_scheduled(a) for a in result.scalars().all()]
