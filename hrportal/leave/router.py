"""Leave router — apply, edit, review, cancel, usage and stats."""


import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrportal.auth.dependencies import get_current_actor, require_admin
from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import LeaveStatus, LeaveType
from hrportal.common.exceptions import AuthorizationError
from hrportal.common.pagination import PaginationParams
from hrportal.dependencies import get_clock, get_store
from hrportal.leave.schemas import (
    LeaveApplyRequest,
    LeaveApproveRequest,
    LeaveListResponse,
    LeaveRejectRequest,
    LeaveRequestOut,
    LeaveStatsOut,
    LeaveUpdateRequest,
    LeaveUsageOut,
)
from hrportal.leave.service import LeaveService
from hrportal.storage import Store

router = APIRouter()


# ── Apply ────────────────────────────────────────────────────────────

@router.post("/", response_model=LeaveRequestOut, status_code=201)
async def apply_leave(
    body: LeaveApplyRequest,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.apply_leave(store, actor, clock, body)


# ── Lists / aggregates ───────────────────────────────────────────────

@router.get("/my", response_model=LeaveListResponse)
async def my_leaves(
    status: Optional[LeaveStatus] = Query(None),
    leave_type: Optional[LeaveType] = Query(None, alias="type"),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await LeaveService.list_my(
        store,
        actor,
        status=status,
        leave_type=leave_type,
        from_date=from_date,
        to_date=to_date,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/all", response_model=LeaveListResponse)
async def all_leaves(
    employee_id: Optional[uuid.UUID] = Query(None),
    status: Optional[LeaveStatus] = Query(None),
    leave_type: Optional[LeaveType] = Query(None, alias="type"),
    from_date: Optional[date] = Query(None),
    to_date: Optional[date] = Query(None),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await LeaveService.list_all(
        store,
        employee_id=employee_id,
        status=status,
        leave_type=leave_type,
        from_date=from_date,
        to_date=to_date,
        page=pagination.page,
        page_size=pagination.page_size,
    )


@router.get("/stats", response_model=LeaveStatsOut)
async def leave_stats(
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.get_stats(store, clock)


@router.get("/usage", response_model=LeaveUsageOut)
async def leave_usage(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    employee_id: Optional[uuid.UUID] = Query(None),
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    """Approved days per leave type; employees may only read their own."""
    target = employee_id or actor.employee_id
    if target != actor.employee_id and not actor.is_admin:
        raise AuthorizationError()
    return await LeaveService.get_usage(store, target, year or clock.today().year)


# ── Single request ───────────────────────────────────────────────────

@router.get("/{request_id}", response_model=LeaveRequestOut)
async def get_leave(
    request_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await LeaveService.get_leave(store, actor, request_id)


@router.put("/{request_id}", response_model=LeaveRequestOut)
async def update_leave(
    request_id: uuid.UUID,
    body: LeaveUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.update_leave(store, actor, clock, request_id, body)


@router.delete("/{request_id}", response_model=LeaveRequestOut)
async def cancel_leave(
    request_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.cancel_leave(store, actor, clock, request_id)


# ── Review (admin) ───────────────────────────────────────────────────

@router.put("/{request_id}/approve", response_model=LeaveRequestOut)
async def approve_leave(
    request_id: uuid.UUID,
    body: Optional[LeaveApproveRequest] = None,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.approve_leave(
        store,
        actor,
        clock,
        request_id,
        handover_notes=body.handover_notes if body else None,
    )


@router.put("/{request_id}/reject", response_model=LeaveRequestOut)
async def reject_leave(
    request_id: uuid.UUID,
    body: LeaveRejectRequest,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await LeaveService.reject_leave(
        store, actor, clock, request_id, reason=body.reason,
    )
