"""
Attendance sessions opened from the timetable.

A run resolves the day order for the department, takes the auto-session slots
that match it and opens one session per slot for the date, skipping slots that
already have one. Holidays open nothing. A day-order lookup failure does not
block the run: the resolver's fallback day order is used and reported.
"""

import logging
import secrets
import string
from datetime import date, datetime
from typing import List, Optional, Set, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.api.v1.scheduled_sessions import matcher
from campus_attendance.api.v1.scheduled_sessions.resolver import DayOrderLookup, DayOrderState, resolve
from campus_attendance.api.v1.scheduled_sessions.schemas import ScheduledSession
from campus_attendance.core.enums import SessionStatus
from campus_attendance.core.exceptions import ServiceError
from campus_attendance.core.models import AttendanceSession
from campus_attendance.core.time_format import format_display_time, format_time_24, parse_time_24

from .schemas import AttendanceSessionResponse, AutoSessionPreview, AutoSessionResult, PendingSession

logger = logging.getLogger(__name__)

SESSION_CODE_PREFIX = "AUTO-"
SESSION_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_session_code() -> str:
    return SESSION_CODE_PREFIX + "".join(secrets.choice(SESSION_CODE_ALPHABET) for _ in range(6))


def _to_response(s: AttendanceSession) -> AttendanceSessionResponse:
    session_time = format_time_24(s.session_time)
    return AttendanceSessionResponse(
        id=s.id,
        session_code=s.session_code,
        teacher_id=s.teacher_id,
        class_id=s.class_id,
        subject_id=s.subject_id,
        assignment_id=s.assignment_id,
        session_date=s.session_date,
        session_time=session_time,
        display_time=format_display_time(session_time),
        expires_at=s.expires_at,
        day_order=s.day_order,
        auto_created=s.auto_created,
        status=s.status,
        created_at=s.created_at,
        teacher_name=s.teacher.full_name if s.teacher else None,
        class_name=s.school_class.class_name if s.school_class else None,
        section=s.school_class.section if s.school_class else None,
        subject_code=s.subject.subject_code if s.subject else None,
        subject_name=s.subject.subject_name if s.subject else None,
    )


def _with_details():
    return select(AttendanceSession).options(
        selectinload(AttendanceSession.teacher),
        selectinload(AttendanceSession.school_class),
        selectinload(AttendanceSession.subject),
    )


async def _slots_for_day(
    db: AsyncSession,
    lookup: DayOrderLookup,
    department: Optional[str],
    teacher_id: Optional[UUID],
    class_id: Optional[UUID],
    session_date: date,
) -> Tuple[DayOrderState, List[ScheduledSession]]:
    state = await resolve(lookup, department, session_date)
    if state.holiday:
        return state, []
    if teacher_id is not None:
        slots = await matcher.match(db, teacher_id, state.day_order)
        if class_id is not None:
            slots = [s for s in slots if s.class_id == class_id]
    else:
        slots = await matcher.match_department(db, state.day_order, state.department, class_id)
    return state, slots


async def _opened_slot_ids(db: AsyncSession, session_date: date, slots: List[ScheduledSession]) -> Set[UUID]:
    if not slots:
        return set()
    result = await db.execute(
        select(AttendanceSession.assignment_id).where(
            AttendanceSession.session_date == session_date,
            AttendanceSession.assignment_id.in_([s.id for s in slots]),
        )
    )
    return {row[0] for row in result.all()}


async def preview_sessions(
    db: AsyncSession,
    lookup: DayOrderLookup,
    department: Optional[str] = None,
    teacher_id: Optional[UUID] = None,
    class_id: Optional[UUID] = None,
    session_date: Optional[date] = None,
) -> AutoSessionPreview:
    """What a run would open for the date, marking slots that already have a session."""
    session_date = session_date or date.today()
    state, slots = await _slots_for_day(db, lookup, department, teacher_id, class_id, session_date)
    if state.holiday:
        return AutoSessionPreview(date=session_date, is_holiday=True, holiday_name=state.holiday_name)

    opened = await _opened_slot_ids(db, session_date, slots)
    pending = [PendingSession(**s.model_dump(), already_created=s.id in opened) for s in slots]
    return AutoSessionPreview(
        date=session_date,
        current_day_order=state.day_order,
        day_order_is_fallback=state.is_fallback,
        total_entries=len(pending),
        pending_count=sum(1 for p in pending if not p.already_created),
        already_created_count=sum(1 for p in pending if p.already_created),
        sessions=pending,
    )


async def create_sessions(
    db: AsyncSession,
    lookup: DayOrderLookup,
    department: Optional[str] = None,
    teacher_id: Optional[UUID] = None,
    class_id: Optional[UUID] = None,
    session_date: Optional[date] = None,
) -> AutoSessionResult:
    session_date = session_date or date.today()
    state, slots = await _slots_for_day(db, lookup, department, teacher_id, class_id, session_date)
    if state.holiday:
        raise ServiceError("Cannot create sessions on a holiday", status.HTTP_400_BAD_REQUEST)

    if not slots:
        return AutoSessionResult(
            message="No timetable entries found to create sessions",
            date=session_date,
            current_day_order=state.day_order,
            day_order_is_fallback=state.is_fallback,
        )

    opened = await _opened_slot_ids(db, session_date, slots)
    to_open = [s for s in slots if s.id not in opened]
    if not to_open:
        return AutoSessionResult(
            message="All sessions already created for today",
            date=session_date,
            current_day_order=state.day_order,
            day_order_is_fallback=state.is_fallback,
            already_existed=len(slots),
        )

    sessions = [
        AttendanceSession(
            teacher_id=s.teacher_id,
            class_id=s.class_id,
            subject_id=s.subject_id,
            assignment_id=s.id,
            session_code=generate_session_code(),
            session_date=session_date,
            session_time=parse_time_24(s.start_time),
            expires_at=datetime.combine(session_date, parse_time_24(s.end_time)),
            day_order=state.day_order,
            auto_created=True,
            status=SessionStatus.active.value,
        )
        for s in to_open
    ]
    db.add_all(sessions)
    try:
        await db.flush()
        ids = [s.id for s in sessions]
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Auto-session run for %s on %s collided with existing sessions", state.department, session_date)
        raise ServiceError("Sessions were created concurrently; try again", status.HTTP_409_CONFLICT)

    result = await db.execute(
        _with_details()
        .where(AttendanceSession.id.in_(ids))
        .order_by(AttendanceSession.session_time)
        .execution_options(populate_existing=True)
    )
    created = [_to_response(s) for s in result.scalars().all()]
    logger.info(
        "Opened %d attendance session(s) for %s on %s (day order %d%s)",
        len(created), state.department, session_date, state.day_order,
        ", fallback" if state.is_fallback else "",
    )
    return AutoSessionResult(
        message=f"Created {len(created)} session(s)",
        date=session_date,
        current_day_order=state.day_order,
        day_order_is_fallback=state.is_fallback,
        created=len(created),
        already_existed=len(opened),
        sessions=created,
    )


async def list_active_sessions(
    db: AsyncSession,
    class_id: Optional[UUID] = None,
    teacher_id: Optional[UUID] = None,
    now: Optional[datetime] = None,
) -> List[AttendanceSessionResponse]:
    """Active sessions that have not expired yet, newest first."""
    now = now or datetime.now()
    stmt = _with_details().where(
        AttendanceSession.status == SessionStatus.active.value,
        AttendanceSession.expires_at >= now,
    )
    if class_id is not None:
        stmt = stmt.where(AttendanceSession.class_id == class_id)
    if teacher_id is not None:
        stmt = stmt.where(AttendanceSession.teacher_id == teacher_id)
    stmt = stmt.order_by(AttendanceSession.created_at.desc()).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return [_to_response(s) for s in result.scalars().all()]


async def close_session(
    db: AsyncSession, session_id: UUID, teacher_id: Optional[UUID] = None
) -> Optional[AttendanceSessionResponse]:
    """Close a session. With `teacher_id`, only that teacher's session may be closed."""
    obj = await db.get(AttendanceSession, session_id)
    if not obj:
        return None
    if teacher_id is not None and obj.teacher_id != teacher_id:
        raise ServiceError("Teachers can only close their own sessions", status.HTTP_403_FORBIDDEN)
    obj.status = SessionStatus.closed.value
    await db.commit()
    logger.info("Closed attendance session %s", obj.session_code)
    result = await db.execute(
        _with_details().where(AttendanceSession.id == session_id).execution_options(populate_existing=True)
    )
    return _to_response(result.scalar_one())
