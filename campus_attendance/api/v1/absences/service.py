"""
Teacher absences and substitute transfers.

An absence is written first; its transfers follow as one batch insert, one row per
(entry, date). If the batch fails the absence stays recorded and the caller gets a
warning instead of an error. Nothing is written when validation fails.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Set, Tuple
from uuid import UUID

from fastapi import status
from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from campus_attendance.api.v1.users import service as users_service
from campus_attendance.auth.models import User
from campus_attendance.core.config import settings
from campus_attendance.core.enums import AbsenceStatus
from campus_attendance.core.exceptions import AbsenceWriteError, ServiceError
from campus_attendance.core.models import ClassTransfer, TeacherAbsence

from .schemas import AbsenceCreate, AbsenceRecorded, AbsenceResponse, TransferDetail, TransferEntry

logger = logging.getLogger(__name__)

TransferKey = Tuple[UUID, UUID, date]


def expand_transfers(
    absence_id: UUID,
    teacher_id: UUID,
    transfers: Sequence[TransferEntry],
    created_by: Optional[UUID] = None,
) -> List[Dict]:
    """One class_transfers row per date of every entry, in submission order."""
    return [
        {
            "absence_id": absence_id,
            "original_teacher_id": teacher_id,
            "substitute_teacher_id": entry.substitute_teacher_id,
            "class_id": entry.class_id,
            "subject_id": entry.subject_id,
            "transfer_date": transfer_date,
            "created_by_teacher_id": created_by or teacher_id,
        }
        for entry in transfers
        for transfer_date in entry.dates
    ]


def _validate(payload: AbsenceCreate) -> Tuple[UUID, date, date]:
    if not payload.teacher_id or not payload.start_date or not payload.end_date:
        raise ServiceError("Missing required fields", status.HTTP_400_BAD_REQUEST)
    teacher_id, start, end = payload.teacher_id, payload.start_date, payload.end_date
    if end < start:
        raise ServiceError("endDate must be on or after startDate", status.HTTP_400_BAD_REQUEST)
    for i, entry in enumerate(payload.transfers, start=1):
        if not entry.class_id or not entry.subject_id or not entry.substitute_teacher_id:
            raise ServiceError(
                f"Transfer {i} needs classId, subjectId and substituteTeacherId",
                status.HTTP_400_BAD_REQUEST,
            )
        if entry.substitute_teacher_id == teacher_id:
            raise ServiceError("A teacher cannot substitute for their own absence", status.HTTP_400_BAD_REQUEST)
        for d in entry.dates:
            if not start <= d <= end:
                raise ServiceError(
                    f"Transfer date {d.isoformat()} is outside the absence period",
                    status.HTTP_400_BAD_REQUEST,
                )
    return teacher_id, start, end


async def _check_teachers(db: AsyncSession, teacher_id: UUID, transfers: Sequence[TransferEntry]) -> None:
    if not await users_service.get_teacher(db, teacher_id):
        raise ServiceError("Invalid teacher", status.HTTP_400_BAD_REQUEST)
    for substitute_id in {t.substitute_teacher_id for t in transfers}:
        if not await users_service.get_teacher(db, substitute_id):
            raise ServiceError("Invalid substitute teacher", status.HTTP_400_BAD_REQUEST)


async def _reject_duplicates(db: AsyncSession, teacher_id: UUID, transfers: Sequence[TransferEntry]) -> None:
    keys: List[TransferKey] = [
        (entry.class_id, entry.subject_id, d) for entry in transfers for d in entry.dates
    ]
    if not keys:
        return
    if len(set(keys)) != len(keys):
        raise ServiceError("The same class and subject is transferred twice on one date", status.HTTP_409_CONFLICT)
    result = await db.execute(
        select(ClassTransfer.class_id, ClassTransfer.subject_id, ClassTransfer.transfer_date)
        .join(TeacherAbsence, TeacherAbsence.id == ClassTransfer.absence_id)
        .where(
            TeacherAbsence.teacher_id == teacher_id,
            TeacherAbsence.status == AbsenceStatus.active.value,
            ClassTransfer.transfer_date.in_(sorted({k[2] for k in keys})),
        )
    )
    existing: Set[TransferKey] = {tuple(row) for row in result.all()}
    clash = existing.intersection(keys)
    if clash:
        _, _, clash_date = sorted(clash, key=lambda k: k[2])[0]
        raise ServiceError(
            f"A transfer for this class and subject already exists on {clash_date.isoformat()}",
            status.HTTP_409_CONFLICT,
        )


async def _insert_transfers(db: AsyncSession, rows: List[Dict]) -> None:
    await db.execute(insert(ClassTransfer), rows)
    await db.commit()


async def record_absence(
    db: AsyncSession,
    payload: AbsenceCreate,
    created_by: Optional[UUID] = None,
) -> AbsenceRecorded:
    teacher_id, start, end = _validate(payload)
    await _check_teachers(db, teacher_id, payload.transfers)
    if settings.transfer_duplicate_policy == "reject":
        await _reject_duplicates(db, teacher_id, payload.transfers)

    absence = TeacherAbsence(
        teacher_id=teacher_id,
        absence_start_date=start,
        absence_end_date=end,
        reason=payload.reason.strip() if payload.reason and payload.reason.strip() else None,
        status=AbsenceStatus.active.value,
    )
    try:
        db.add(absence)
        await db.flush()
        absence_id = absence.id
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to create absence for teacher %s", teacher_id)
        raise AbsenceWriteError("Failed to create absence record", stage="absence") from e

    rows = expand_transfers(absence_id, teacher_id, payload.transfers, created_by)
    if not rows:
        logger.info("Absence %s recorded for teacher %s without transfers", absence_id, teacher_id)
        return AbsenceRecorded(absence_id=absence_id, message="Absence recorded successfully")

    try:
        await _insert_transfers(db, rows)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception(
            "Absence %s recorded but %d class transfer(s) could not be saved", absence_id, len(rows)
        )
        return AbsenceRecorded(
            absence_id=absence_id,
            message="Absence recorded, but class transfers could not be saved",
            warning="Failed to create class transfers",
            stage="transfers",
        )

    logger.info("Absence %s recorded for teacher %s with %d transfer(s)", absence_id, teacher_id, len(rows))
    return AbsenceRecorded(
        absence_id=absence_id,
        message="Absence recorded and classes transferred successfully",
        transfers_created=len(rows),
    )


def _transfer_to_detail(t: ClassTransfer) -> TransferDetail:
    return TransferDetail(
        id=t.id,
        absence_id=t.absence_id,
        original_teacher_id=t.original_teacher_id,
        substitute_teacher_id=t.substitute_teacher_id,
        class_id=t.class_id,
        subject_id=t.subject_id,
        transfer_date=t.transfer_date,
        notes=t.notes,
        created_at=t.created_at,
        original_teacher_name=t.original_teacher.full_name if t.original_teacher else None,
        substitute_teacher_name=t.substitute_teacher.full_name if t.substitute_teacher else None,
        substitute_teacher_email=t.substitute_teacher.email if t.substitute_teacher else None,
        class_name=t.school_class.class_name if t.school_class else None,
        section=t.school_class.section if t.school_class else None,
        subject_name=t.subject.subject_name if t.subject else None,
        subject_code=t.subject.subject_code if t.subject else None,
    )


def _absence_to_response(a: TeacherAbsence) -> AbsenceResponse:
    return AbsenceResponse(
        id=a.id,
        teacher_id=a.teacher_id,
        teacher_name=a.teacher.full_name if a.teacher else None,
        teacher_email=a.teacher.email if a.teacher else None,
        teacher_department=a.teacher.department if a.teacher else None,
        absence_start_date=a.absence_start_date,
        absence_end_date=a.absence_end_date,
        reason=a.reason,
        status=a.status,
        created_at=a.created_at,
        class_transfers=[_transfer_to_detail(t) for t in a.transfers],
    )


async def list_absences(
    db: AsyncSession,
    teacher_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    department: Optional[str] = None,
) -> List[AbsenceResponse]:
    """Absences starting on/after start_date and ending on/before end_date, newest first, with transfers."""
    stmt = select(TeacherAbsence).options(
        selectinload(TeacherAbsence.teacher),
        selectinload(TeacherAbsence.transfers).options(
            selectinload(ClassTransfer.original_teacher),
            selectinload(ClassTransfer.substitute_teacher),
            selectinload(ClassTransfer.school_class),
            selectinload(ClassTransfer.subject),
        ),
    )
    if teacher_id is not None:
        stmt = stmt.where(TeacherAbsence.teacher_id == teacher_id)
    if start_date is not None:
        stmt = stmt.where(TeacherAbsence.absence_start_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(TeacherAbsence.absence_end_date <= end_date)
    if department is not None:
        stmt = stmt.join(User, User.id == TeacherAbsence.teacher_id).where(User.department == department)
    stmt = stmt.order_by(TeacherAbsence.created_at.desc()).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return [_absence_to_response(a) for a in result.scalars().all()]
