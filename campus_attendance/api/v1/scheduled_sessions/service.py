from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from . import matcher
from .resolver import DayOrderLookup, resolve
from .schemas import ScheduledSessionsResponse


async def get_scheduled_sessions(
    db: AsyncSession,
    lookup: DayOrderLookup,
    teacher_id: UUID,
    department: Optional[str] = None,
    target_date: Optional[date] = None,
) -> ScheduledSessionsResponse:
    """Today's auto-session assignments for a teacher. Holidays return nothing without querying assignments."""
    state = await resolve(lookup, department, target_date)
    if state.holiday:
        return ScheduledSessionsResponse(
            teacher_id=teacher_id,
            is_holiday=True,
            holiday_name=state.holiday_name,
            scheduled_sessions=[],
            count=0,
        )
    sessions = await matcher.match(db, teacher_id, state.day_order)
    return ScheduledSessionsResponse(
        teacher_id=teacher_id,
        current_day_order=state.day_order,
        day_order_is_fallback=state.is_fallback,
        scheduled_sessions=sessions,
        count=len(sessions),
    )
