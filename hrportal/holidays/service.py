"""Holiday calendar service."""

from __future__ import annotations

import calendar
import logging
import uuid
from datetime import date
from typing import Optional

from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import HolidayStatus, HolidayType
from hrportal.common.exceptions import DuplicateRecordConflict, NotFoundException
from hrportal.common.pagination import paginate
from hrportal.holidays.models import Holiday
from hrportal.holidays.schemas import (
    HolidayCreate,
    HolidayListResponse,
    HolidayOut,
    HolidayStatsOut,
    HolidayUpdate,
)
from hrportal.storage import Store

logger = logging.getLogger(__name__)


async def _get_holiday(store: Store, holiday_id: uuid.UUID) -> Holiday:
    holiday = await store.holidays.get(holiday_id)
    if holiday is None:
        raise NotFoundException("Holiday", holiday_id)
    return holiday


async def _ensure_date_free(
    store: Store, day: date, exclude_id: Optional[uuid.UUID] = None,
) -> None:
    """At most one active holiday per calendar date."""
    for other in await store.holidays.list(
        from_date=day, to_date=day, status=HolidayStatus.active,
    ):
        if other.id != exclude_id:
            raise DuplicateRecordConflict("Holiday", day)


class HolidayService:

    @staticmethod
    async def create_holiday(
        store: Store, actor: Actor, clock: Clock, data: HolidayCreate,
    ) -> HolidayOut:
        await _ensure_date_free(store, data.date)

        now = clock.now()
        holiday = Holiday(
            id=uuid.uuid4(),
            name=data.name.strip(),
            description=data.description,
            date=data.date,
            type=data.type,
            is_recurring=data.is_recurring,
            is_office_closed=data.is_office_closed,
            status=HolidayStatus.active,
            added_by=actor.employee_id,
            created_at=now,
            updated_at=now,
        )
        await store.holidays.add(holiday)
        logger.info("Holiday %r on %s added by %s", holiday.name, holiday.date, actor.employee_id)
        return HolidayOut.model_validate(holiday)

    @staticmethod
    async def get_holiday(store: Store, holiday_id: uuid.UUID) -> HolidayOut:
        return HolidayOut.model_validate(await _get_holiday(store, holiday_id))

    @staticmethod
    async def list_holidays(
        store: Store,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        holiday_type: Optional[HolidayType] = None,
        include_cancelled: bool = False,
        page: int = 1,
        page_size: int = 50,
    ) -> HolidayListResponse:
        from_date = to_date = None
        if year is not None and month is not None:
            from_date = date(year, month, 1)
            to_date = date(year, month, calendar.monthrange(year, month)[1])
        elif year is not None:
            from_date, to_date = date(year, 1, 1), date(year, 12, 31)

        items, meta = await paginate(
            store.holidays,
            page,
            page_size,
            from_date=from_date,
            to_date=to_date,
            status=None if include_cancelled else HolidayStatus.active,
            holiday_type=holiday_type,
        )
        return HolidayListResponse(
            data=[HolidayOut.model_validate(h) for h in items],
            meta=meta,
        )

    @staticmethod
    async def upcoming(store: Store, clock: Clock, limit: int = 10) -> list[HolidayOut]:
        """Active holidays on or after today, soonest first."""
        page = await store.holidays.list_page(
            limit=limit, from_date=clock.today(), status=HolidayStatus.active,
        )
        return [HolidayOut.model_validate(h) for h in page.items]

    @staticmethod
    async def update_holiday(
        store: Store,
        clock: Clock,
        holiday_id: uuid.UUID,
        data: HolidayUpdate,
    ) -> HolidayOut:
        holiday = await _get_holiday(store, holiday_id)
        changes = data.model_dump(exclude_unset=True)

        new_date = changes.pop("holiday_date", None) or holiday.date
        new_status = changes.get("status") or holiday.status
        if new_status == HolidayStatus.active:
            await _ensure_date_free(store, new_date, exclude_id=holiday.id)

        holiday.date = new_date
        for field, value in changes.items():
            if value is not None:
                setattr(holiday, field, value)
        holiday.updated_at = clock.now()
        await store.holidays.save(holiday)

        logger.info("Holiday %s updated", holiday_id)
        return HolidayOut.model_validate(holiday)

    @staticmethod
    async def cancel_holiday(
        store: Store, clock: Clock, holiday_id: uuid.UUID,
    ) -> HolidayOut:
        """Soft delete: the holiday stays on record as cancelled."""
        holiday = await _get_holiday(store, holiday_id)
        holiday.status = HolidayStatus.cancelled
        holiday.updated_at = clock.now()
        await store.holidays.save(holiday)

        logger.info("Holiday %s cancelled", holiday_id)
        return HolidayOut.model_validate(holiday)

    @staticmethod
    async def get_stats(store: Store, clock: Clock) -> HolidayStatsOut:
        today = clock.today()
        this_year = await store.holidays.list(
            from_date=date(today.year, 1, 1),
            to_date=date(today.year, 12, 31),
            status=HolidayStatus.active,
        )
        upcoming = await store.holidays.list(from_date=today, status=HolidayStatus.active)

        by_type: dict[HolidayType, int] = {}
        for h in this_year:
            by_type[h.type] = by_type.get(h.type, 0) + 1

        return HolidayStatsOut(
            year=today.year,
            total_holidays=len(this_year),
            upcoming_holidays=len(upcoming),
            by_type=by_type,
        )
