"""Holiday calendar router. Reads are open to every employee; writes are admin only."""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrportal.auth.dependencies import get_current_actor, require_admin
from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import HolidayType
from hrportal.common.pagination import PaginationParams
from hrportal.dependencies import get_clock, get_store
from hrportal.holidays.schemas import (
    HolidayCreate,
    HolidayListResponse,
    HolidayOut,
    HolidayStatsOut,
    HolidayUpdate,
)
from hrportal.holidays.service import HolidayService
from hrportal.storage import Store

router = APIRouter()


@router.get("/", response_model=HolidayListResponse)
async def list_holidays(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    holiday_type: Optional[HolidayType] = Query(None, alias="type"),
    include_cancelled: bool = Query(False),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await HolidayService.list_holidays(
        store,
        year=year,
        month=month,
        holiday_type=holiday_type,
        include_cancelled=include_cancelled,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/upcoming", response_model=list[HolidayOut])
async def upcoming_holidays(
    limit: int = Query(10, ge=1, le=50),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await HolidayService.upcoming(store, clock, limit=limit)


@router.get("/stats", response_model=HolidayStatsOut)
async def holiday_stats(
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await HolidayService.get_stats(store, clock)


@router.post("/", response_model=HolidayOut, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await HolidayService.create_holiday(store, actor, clock, body)


@router.get("/{holiday_id}", response_model=HolidayOut)
async def get_holiday(
    holiday_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await HolidayService.get_holiday(store, holiday_id)


@router.put("/{holiday_id}", response_model=HolidayOut)
async def update_holiday(
    holiday_id: uuid.UUID,
    body: HolidayUpdate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await HolidayService.update_holiday(store, clock, holiday_id, body)


@router.delete("/{holiday_id}", response_model=HolidayOut)
async def cancel_holiday(
    holiday_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await HolidayService.cancel_holiday(store, clock, holiday_id)
