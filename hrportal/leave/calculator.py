"""Leave day-counting, overlap detection and status transitions."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone, tzinfo
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from hrportal.common.constants import LeaveStatus
from hrportal.common.exceptions import (
    InvalidRangeError,
    InvalidTransitionError,
    PastDateError,
    ValidationError,
)

MAX_REASON_LENGTH = 500
HALF_DAY = Decimal("0.5")

# Statuses that block another request over the same dates.
BLOCKING_STATUSES = frozenset({LeaveStatus.pending, LeaveStatus.approved})

LEAVE_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.pending: frozenset({LeaveStatus.approved, LeaveStatus.rejected}),
}


class LeaveInterval(Protocol):
    id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    status: LeaveStatus


def _to_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


# ── Duration ────────────────────────────────────────────────────────

def compute_duration(
    start_date: date | datetime,
    end_date: date | datetime,
    is_half_day: bool = False,
) -> Decimal:
    """Inclusive day count between two dates, or 0.5 for a half day."""
    start = _to_date(start_date)
    end = _to_date(end_date)
    if end < start:
        raise InvalidRangeError()
    if is_half_day:
        return HALF_DAY
    return Decimal((end - start).days + 1)


def check_overlap(
    employee_id: uuid.UUID,
    start_date: date | datetime,
    end_date: date | datetime,
    existing: Iterable[LeaveInterval],
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    """True if any pending/approved request of the employee shares a day."""
    start = _to_date(start_date)
    end = _to_date(end_date)
    for other in existing:
        if other.employee_id != employee_id:
            continue
        if exclude_id is not None and other.id == exclude_id:
            continue
        if other.status not in BLOCKING_STATUSES:
            continue
        if _to_date(other.start_date) <= end and _to_date(other.end_date) >= start:
            return True
    return False


# ── Validation ──────────────────────────────────────────────────────

def validate_reason(reason: Optional[str]) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError(
            {"reason": ["Reason is required."]},
            detail="Reason is required.",
        )
    if len(cleaned) > MAX_REASON_LENGTH:
        raise ValidationError(
            {"reason": [f"Reason cannot exceed {MAX_REASON_LENGTH} characters."]},
            detail=f"Reason cannot exceed {MAX_REASON_LENGTH} characters.",
        )
    return cleaned


def ensure_not_past(start_date: date | datetime, now: datetime, tz: tzinfo) -> None:
    """Reject a start whose local midnight has already passed.

    A leave starting today is rejected once the local day has begun.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    starts_at = datetime.combine(_to_date(start_date), time.min, tzinfo=tz)
    if starts_at < now:
        raise PastDateError()


# ── Status transitions ──────────────────────────────────────────────

def ensure_transition(current: LeaveStatus, target: LeaveStatus) -> None:
    if target not in LEAVE_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current.value, target.value)


def apply_transition(
    request,
    target: LeaveStatus,
    actor_id: uuid.UUID,
    now: datetime,
) -> None:
    """Move ``request`` to ``target`` and stamp the reviewer."""
    ensure_transition(request.status, target)
    request.status = target
    request.reviewed_by = actor_id
    request.reviewed_at = now
    request.updated_at = now
