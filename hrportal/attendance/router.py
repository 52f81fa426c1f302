"""Attendance router — clock in/out, daily records, admin entry and reports.

All endpoints require authentication. Admin-specific endpoints enforce role checks.
"""


import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrportal.attendance.schemas import (
    AttendanceListResponse,
    AttendanceRecordResponse,
    AttendanceStats,
    AttendanceUpdate,
    ClockInRequest,
    ClockResponse,
    ManualAttendanceCreate,
    MonthlySummary,
    TodayResponse,
)
from hrportal.attendance.service import AttendanceService
from hrportal.auth.dependencies import get_current_actor, require_admin
from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import AttendanceStatus
from hrportal.common.exceptions import AuthorizationError
from hrportal.common.pagination import PaginationParams
from hrportal.dependencies import get_clock, get_store
from hrportal.storage import Store

router = APIRouter(prefix="", tags=["attendance"])


# ── POST /clock-in ──────────────────────────────────────────────────

@router.post("/clock-in", response_model=ClockResponse, status_code=201)
async def clock_in(
    body: Optional[ClockInRequest] = None,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Record a clock-in for the current user."""
    body = body or ClockInRequest()
    return await AttendanceService.clock_in(
        store, actor, clock, location=body.location, notes=body.notes,
    )


# ── POST /clock-out ─────────────────────────────────────────────────

@router.post("/clock-out", response_model=ClockResponse)
async def clock_out(
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Record a clock-out for the current user."""
    return await AttendanceService.clock_out(store, actor, clock)


# ── GET /today ──────────────────────────────────────────────────────

@router.get("/today", response_model=TodayResponse)
async def today_attendance(
    on_date: Optional[date] = Query(None, alias="date"),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Current user's record for today (or the given date)."""
    return await AttendanceService.get_today(store, actor, clock, on_date=on_date)


# ── GET /my ─────────────────────────────────────────────────────────

@router.get("/my", response_model=AttendanceListResponse)
async def my_attendance(
    from_date: Optional[date] = Query(None, description="Start date (inclusive)"),
    to_date: Optional[date] = Query(None, description="End date (inclusive)"),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await AttendanceService.list_my(
        store,
        actor,
        from_date,
        to_date,
        page=pagination.page,
        page_size=pagination.page_size,
    )


# ── GET /all ────────────────────────────────────────────────────────

@router.get("/all", response_model=AttendanceListResponse)
async def all_attendance(
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    employee_id: Optional[uuid.UUID] = Query(None),
    status: Optional[AttendanceStatus] = Query(None),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    """All employees' records (admin view)."""
    return await AttendanceService.list_all(
        store,
        from_date,
        to_date,
        employee_id=employee_id,
        status=status,
        page=pagination.page,
        page_size=pagination.page_size,
    )


# ── GET /stats ──────────────────────────────────────────────────────

@router.get("/stats", response_model=AttendanceStats)
async def attendance_stats(
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await AttendanceService.get_stats(store, clock)


# ── GET /summary ────────────────────────────────────────────────────

@router.get("/summary", response_model=MonthlySummary)
async def monthly_summary(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    employee_id: Optional[uuid.UUID] = Query(None),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    """Monthly totals; employees may only read their own."""
    target = employee_id or actor.employee_id
    if target != actor.employee_id and not actor.is_admin:
        raise AuthorizationError()
    return await AttendanceService.get_monthly_summary(store, target, year, month)


# ── POST /manual ────────────────────────────────────────────────────

@router.post("/manual", response_model=AttendanceRecordResponse, status_code=201)
async def manual_entry(
    body: ManualAttendanceCreate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await AttendanceService.create_manual(store, actor, clock, body)


# ── PUT /{record_id} ────────────────────────────────────────────────

@router.put("/{record_id}", response_model=AttendanceRecordResponse)
async def update_attendance(
    record_id: uuid.UUID,
    body: AttendanceUpdate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await AttendanceService.update_record(store, actor, clock, record_id, body)


# ── DELETE /{record_id} ─────────────────────────────────────────────

@router.delete("/{record_id}", status_code=204)
async def delete_attendance(
    record_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    await AttendanceService.delete_record(store, record_id)
