"""
Resolve the active day order for a department and date.

The answer comes from a day-order lookup: the local day-order tables, or a remote
day-order service when DAY_ORDER_SERVICE_URL is set. Lookup failures never reach
the caller. A failed, timed-out or malformed lookup resolves to FALLBACK_DAY_ORDER
on a teaching day, and the state is flagged `is_fallback`.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Optional, Protocol

import httpx
from fastapi import Depends
from pydantic import BaseModel, ValidationError, model_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_attendance.api.v1.day_orders import service as day_order_service
from campus_attendance.core.config import settings
from campus_attendance.core.exceptions import DayOrderLookupError
from campus_attendance.db.session import get_db

logger = logging.getLogger(__name__)

FALLBACK_DAY_ORDER = 1


class DayOrderState(BaseModel):
    """Either a holiday (with a name) or a teaching day with a day order, never both."""

    department: str
    target_date: date
    holiday: bool = False
    holiday_name: Optional[str] = None
    day_order: Optional[int] = None
    is_fallback: bool = False

    @model_validator(mode="after")
    def holiday_excludes_day_order(self) -> "DayOrderState":
        if self.holiday and self.day_order is not None:
            raise ValueError("a holiday has no day order")
        if not self.holiday and self.day_order is None:
            raise ValueError("a teaching day needs a day order")
        return self


class DayOrderLookup(Protocol):
    async def current(self, department: str, target_date: date) -> DayOrderState:
        ...

    async def abandon(self) -> None:
        """Called after `current` was cancelled by the timeout."""
        ...


class LocalDayOrderLookup:
    """Reads the day-order tables through the request's session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def current(self, department: str, target_date: date) -> DayOrderState:
        try:
            status = await day_order_service.compute_day_order(self.db, department, target_date)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DayOrderLookupError("day-order tables could not be read", e) from e
        try:
            if status.is_holiday:
                return DayOrderState(
                    department=department,
                    target_date=target_date,
                    holiday=True,
                    holiday_name=status.holiday_name or "Holiday",
                )
            return DayOrderState(department=department, target_date=target_date, day_order=status.day_order)
        except ValidationError as e:
            raise DayOrderLookupError(f"stored day order for {department} on {target_date} is unusable", e) from e

    async def abandon(self) -> None:
        # The cancelled query or commit may have left the shared session mid-transaction.
        try:
            await self.db.rollback()
        except SQLAlchemyError:
            logger.exception("Rolling back the session after a day-order timeout failed")


def parse_day_order_payload(department: str, target_date: date, data: Any) -> DayOrderState:
    """Interpret `{success, isHoliday, holidayName}` / `{success, dayOrder}` from the day-order service."""
    if not isinstance(data, dict) or not data.get("success"):
        raise DayOrderLookupError("day-order service did not report success")
    if data.get("isHoliday"):
        return DayOrderState(
            department=department,
            target_date=target_date,
            holiday=True,
            holiday_name=data.get("holidayName") or "Holiday",
        )
    day_order = data.get("dayOrder")
    if isinstance(day_order, bool) or not isinstance(day_order, int) or day_order < 1:
        raise DayOrderLookupError(f"day-order service returned an invalid day order: {day_order!r}")
    return DayOrderState(department=department, target_date=target_date, day_order=day_order)


class HttpDayOrderLookup:
    """Queries a day-order service: GET <url>?action=current&department=<d>&date=<YYYY-MM-DD>."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    async def _get(self, client: httpx.AsyncClient, params: dict) -> httpx.Response:
        response = await client.get(self.base_url, params=params)
        response.raise_for_status()
        return response

    async def current(self, department: str, target_date: date) -> DayOrderState:
        params = {"action": "current", "department": department, "date": target_date.isoformat()}
        try:
            if self._client is not None:
                response = await self._get(self._client, params)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                    response = await self._get(client, params)
            data = response.json()
        except httpx.HTTPError as e:
            raise DayOrderLookupError(f"day-order service request failed: {e}", e) from e
        except ValueError as e:
            raise DayOrderLookupError("day-order service returned invalid JSON", e) from e
        return parse_day_order_payload(department, target_date, data)

    async def abandon(self) -> None:
        pass


def fallback_state(department: str, target_date: date) -> DayOrderState:
    return DayOrderState(
        department=department,
        target_date=target_date,
        day_order=FALLBACK_DAY_ORDER,
        is_fallback=True,
    )


async def resolve(
    lookup: DayOrderLookup,
    department: Optional[str] = None,
    target_date: Optional[date] = None,
    timeout: Optional[float] = None,
) -> DayOrderState:
    department = (department or "").strip() or settings.default_department
    target_date = target_date or date.today()
    timeout = settings.day_order_lookup_timeout_seconds if timeout is None else timeout

    try:
        return await asyncio.wait_for(lookup.current(department, target_date), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "Day-order lookup for %s on %s timed out after %.1fs; using day order %d",
            department, target_date, timeout, FALLBACK_DAY_ORDER,
        )
        await lookup.abandon()
    except DayOrderLookupError as e:
        logger.warning(
            "Day-order lookup for %s on %s failed (%s); using day order %d",
            department, target_date, e, FALLBACK_DAY_ORDER,
        )
    return fallback_state(department, target_date)


def get_day_order_lookup(db: AsyncSession = Depends(get_db)) -> DayOrderLookup:
    if settings.day_order_service_url:
        return HttpDayOrderLookup(settings.day_order_service_url, timeout=settings.day_order_lookup_timeout_seconds)
    return LocalDayOrderLookup(db)
