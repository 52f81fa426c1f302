"""Leave service — apply, edit, approve/reject, cancel, usage and stats.

Every write validates fully before touching the record, so a refused
operation leaves the stored request unchanged.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import LeaveStatus, LeaveType
from hrportal.common.exceptions import (
    AuthorizationError,
    NotFoundException,
    OverlappingLeaveError,
    StateTransitionError,
    ValidationError,
)
from hrportal.common.pagination import paginate
from hrportal.leave.calculator import (
    BLOCKING_STATUSES,
    apply_transition,
    check_overlap,
    compute_duration,
    ensure_not_past,
    validate_reason,
)
from hrportal.leave.models import LeaveRequest
from hrportal.leave.schemas import (
    LeaveApplyRequest,
    LeaveListResponse,
    LeaveRequestOut,
    LeaveStatsOut,
    LeaveUpdateRequest,
    LeaveUsageOut,
)
from hrportal.storage import Store

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════

async def _get_request(store: Store, request_id: uuid.UUID) -> LeaveRequest:
    leave = await store.leave.get(request_id)
    if leave is None:
        raise NotFoundException("LeaveRequest", request_id)
    return leave


def _ensure_owner_or_admin(leave: LeaveRequest, actor: Actor) -> None:
    if leave.employee_id != actor.employee_id and not actor.is_admin:
        raise AuthorizationError("You can only access your own leave requests.")


async def _ensure_no_overlap(
    store: Store,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    existing = await store.leave.list(
        employee_id=employee_id,
        statuses=BLOCKING_STATUSES,
    )
    if check_overlap(employee_id, start_date, end_date, existing, exclude_id=exclude_id):
        logger.warning(
            "Overlapping leave for %s between %s and %s", employee_id, start_date, end_date,
        )
        raise OverlappingLeaveError()


def _local_date(value: datetime, clock: Clock) -> date:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(clock.tz).date()


# ═══════════════════════════════════════════════════════════════════
# LeaveService
# ═══════════════════════════════════════════════════════════════════

class LeaveService:

    # ── Apply / edit ─────────────────────────────────────────────────

    @staticmethod
    async def apply_leave(
        store: Store,
        actor: Actor,
        clock: Clock,
        data: LeaveApplyRequest,
    ) -> LeaveRequestOut:
        reason = validate_reason(data.reason)
        total_days = compute_duration(data.start_date, data.end_date, data.is_half_day)
        ensure_not_past(data.start_date, clock.now(), clock.tz)
        await _ensure_no_overlap(store, actor.employee_id, data.start_date, data.end_date)

        now = clock.now()
        leave = LeaveRequest(
            id=uuid.uuid4(),
            employee_id=actor.employee_id,
            type=data.type,
            start_date=data.start_date,
            end_date=data.end_date,
            total_days=total_days,
            reason=reason,
            is_half_day=data.is_half_day,
            half_day_period=data.half_day_period if data.is_half_day else None,
            status=LeaveStatus.pending,
            created_at=now,
            updated_at=now,
        )
        await store.leave.add(leave)

        logger.info(
            "Leave %s applied by %s: %s %s..%s (%s days)",
            leave.id, actor.employee_id, data.type.value,
            data.start_date, data.end_date, total_days,
        )
        return LeaveRequestOut.model_validate(leave)

    @staticmethod
    async def update_leave(
        store: Store,
        actor: Actor,
        clock: Clock,
        request_id: uuid.UUID,
        data: LeaveUpdateRequest,
    ) -> LeaveRequestOut:
        """Owner edits while pending; an admin may edit at any status."""
        leave = await _get_request(store, request_id)
        _ensure_owner_or_admin(leave, actor)
        if leave.status != LeaveStatus.pending and not actor.is_admin:
            raise StateTransitionError("Only pending leave requests can be updated.")

        changes = data.model_dump(exclude_unset=True)
        if ("start_date" in changes) != ("end_date" in changes):
            raise ValidationError(
                {"dates": ["start_date and end_date must be changed together."]},
                detail="start_date and end_date must be changed together.",
            )

        start_date = data.start_date or leave.start_date
        end_date = data.end_date or leave.end_date
        is_half_day = leave.is_half_day if data.is_half_day is None else data.is_half_day
        reason = validate_reason(data.reason) if "reason" in changes else leave.reason

        total_days = compute_duration(start_date, end_date, is_half_day)
        if "start_date" in changes and not actor.is_admin:
            ensure_not_past(start_date, clock.now(), clock.tz)
        if leave.status in BLOCKING_STATUSES:
            await _ensure_no_overlap(
                store, leave.employee_id, start_date, end_date, exclude_id=leave.id,
            )

        if data.type is not None:
            leave.type = data.type
        leave.start_date = start_date
        leave.end_date = end_date
        leave.is_half_day = is_half_day
        if is_half_day:
            leave.half_day_period = data.half_day_period or leave.half_day_period
        else:
            leave.half_day_period = None
        leave.reason = reason
        leave.total_days = total_days
        leave.updated_at = clock.now()
        await store.leave.save(leave)

        logger.info("Leave %s updated by %s", leave.id, actor.employee_id)
        return LeaveRequestOut.model_validate(leave)

    # ── Review ───────────────────────────────────────────────────────

    @staticmethod
    async def approve_leave(
        store: Store,
        actor: Actor,
        clock: Clock,
        request_id: uuid.UUID,
        handover_notes: Optional[str] = None,
    ) -> LeaveRequestOut:
        if not actor.is_admin:
            raise AuthorizationError("Only an admin can approve leave requests.")
        leave = await _get_request(store, request_id)

        apply_transition(leave, LeaveStatus.approved, actor.employee_id, clock.now())
        if handover_notes:
            leave.handover_notes = handover_notes
        await store.leave.save(leave)

        logger.info("Leave %s approved by %s", leave.id, actor.employee_id)
        return LeaveRequestOut.model_validate(leave)

    @staticmethod
    async def reject_leave(
        store: Store,
        actor: Actor,
        clock: Clock,
        request_id: uuid.UUID,
        reason: str,
    ) -> LeaveRequestOut:
        if not actor.is_admin:
            raise AuthorizationError("Only an admin can reject leave requests.")
        leave = await _get_request(store, request_id)

        apply_transition(leave, LeaveStatus.rejected, actor.employee_id, clock.now())
        leave.rejection_reason = reason
        await store.leave.save(leave)

        logger.info("Leave %s rejected by %s", leave.id, actor.employee_id)
        return LeaveRequestOut.model_validate(leave)

    @staticmethod
    async def cancel_leave(
        store: Store,
        actor: Actor,
        clock: Clock,
        request_id: uuid.UUID,
    ) -> LeaveRequestOut:
        """Owner cancels while pending; an admin may cancel at any status."""
        leave = await _get_request(store, request_id)
        _ensure_owner_or_admin(leave, actor)
        if leave.status == LeaveStatus.cancelled:
            raise StateTransitionError("Leave request is already cancelled.")
        if leave.status != LeaveStatus.pending and not actor.is_admin:
            raise StateTransitionError("Only pending leave requests can be cancelled.")

        now = clock.now()
        leave.status = LeaveStatus.cancelled
        leave.cancelled_at = now
        leave.updated_at = now
        await store.leave.save(leave)

        logger.info("Leave %s cancelled by %s", leave.id, actor.employee_id)
        return LeaveRequestOut.model_validate(leave)

    # ── Reads ────────────────────────────────────────────────────────

    @staticmethod
    async def get_leave(
        store: Store, actor: Actor, request_id: uuid.UUID,
    ) -> LeaveRequestOut:
        leave = await _get_request(store, request_id)
        _ensure_owner_or_admin(leave, actor)
        return LeaveRequestOut.model_validate(leave)

    @staticmethod
    async def list_my(
        store: Store,
        actor: Actor,
        *,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> LeaveListResponse:
        return await LeaveService.list_all(
            store,
            employee_id=actor.employee_id,
            status=status,
            leave_type=leave_type,
            from_date=from_date,
            to_date=to_date,
            page=page,
            page_size=page_size,
        )

    @staticmethod
    async def list_all(
        store: Store,
        *,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> LeaveListResponse:
        items, meta = await paginate(
            store.leave,
            page,
            page_size,
            employee_id=employee_id,
            statuses=[status] if status is not None else None,
            leave_type=leave_type,
            from_date=from_date,
            to_date=to_date,
        )
        return LeaveListResponse(
            data=[LeaveRequestOut.model_validate(r) for r in items],
            meta=meta,
        )

    @staticmethod
    async def get_usage(
        store: Store, employee_id: uuid.UUID, year: int,
    ) -> LeaveUsageOut:
        """Approved days per type for requests starting in ``year``."""
        rows = await store.leave.list(
            employee_id=employee_id,
            statuses=[LeaveStatus.approved],
        )
        usage: dict[LeaveType, Decimal] = {}
        for r in rows:
            if r.start_date.year != year:
                continue
            usage[r.type] = usage.get(r.type, Decimal("0")) + Decimal(r.total_days)

        return LeaveUsageOut(
            employee_id=employee_id,
            year=year,
            usage=usage,
            total_days=sum(usage.values(), Decimal("0")),
        )

    @staticmethod
    async def get_stats(store: Store, clock: Clock) -> LeaveStatsOut:
        rows = await store.leave.list()
        today = clock.today()
        counts = {s: 0 for s in LeaveStatus}
        this_month = 0
        for r in rows:
            counts[r.status] += 1
            if r.created_at is not None:
                created = _local_date(r.created_at, clock)
                if (created.year, created.month) == (today.year, today.month):
                    this_month += 1

        return LeaveStatsOut(
            total=len(rows),
            pending=counts[LeaveStatus.pending],
            approved=counts[LeaveStatus.approved],
            rejected=counts[LeaveStatus.rejected],
            cancelled=counts[LeaveStatus.cancelled],
            this_month=this_month,
        )
