"""Call-tracking router — daily upsert, own/all lists, performance stats."""


import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrportal.auth.dependencies import get_current_actor, require_admin
from hrportal.auth.schemas import Actor
from hrportal.calls.schemas import (
    CallDataListResponse,
    CallDataOut,
    CallDataUpdate,
    CallDataUpsert,
    CallDataUpsertResponse,
    PerformanceStatsOut,
)
from hrportal.calls.service import CallDataService
from hrportal.common.clock import Clock
from hrportal.common.pagination import PaginationParams
from hrportal.dependencies import get_clock, get_store
from hrportal.storage import Store

router = APIRouter()


@router.post("/", response_model=CallDataUpsertResponse, status_code=201)
async def upsert_call_data(
    body: CallDataUpsert,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Add or replace the day's counters (admins may target another employee)."""
    return await CallDataService.upsert_daily(store, actor, clock, body)


@router.get("/my", response_model=CallDataListResponse)
async def my_call_data(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await CallDataService.list_my(
        store,
        actor,
        year=year,
        month=month,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/today", response_model=Optional[CallDataOut])
async def today_call_data(
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await CallDataService.get_today(store, actor, clock)


@router.get("/all", response_model=CallDataListResponse)
async def all_call_data(
    employee_id: Optional[uuid.UUID] = Query(None),
    on_date: Optional[date] = Query(None, alias="date"),
    department: Optional[str] = Query(None),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await CallDataService.list_all(
        store,
        employee_id=employee_id,
        on_date=on_date,
        department=department,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/performance/stats", response_model=PerformanceStatsOut)
async def performance_stats(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    department: Optional[str] = Query(None),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await CallDataService.get_performance_stats(
        store, year=year, month=month, department=department,
    )


@router.get("/{record_id}", response_model=CallDataOut)
async def get_call_data(
    record_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await CallDataService.get_record(store, actor, record_id)


@router.put("/{record_id}", response_model=CallDataOut)
async def update_call_data(
    record_id: uuid.UUID,
    body: CallDataUpdate,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await CallDataService.update_record(store, actor, clock, record_id, body)


@router.delete("/{record_id}", status_code=204)
async def delete_call_data(
    record_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    await CallDataService.delete_record(store, actor, clock, record_id)
