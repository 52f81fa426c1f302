"""Attendance hour / overtime / status derivation.

Pure functions, invoked by AttendanceService before every persist of a
record that carries both clock timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from hrportal.common.constants import AttendanceStatus

# ── Constants ───────────────────────────────────────────────────────

FULL_DAY_HOURS = 8.0
HALF_DAY_HOURS = 4.0
SECONDS_PER_HOUR = 3600


@dataclass(frozen=True)
class AttendanceMetrics:
    total_hours: float
    overtime_hours: float
    status: AttendanceStatus


def _as_aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip; stored values are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def status_for_hours(
    total_hours: float,
    current_status: AttendanceStatus = AttendanceStatus.absent,
) -> AttendanceStatus:
    """Map worked hours to a status; zero hours keeps ``current_status``."""
    if total_hours >= FULL_DAY_HOURS:
        return AttendanceStatus.present
    if total_hours >= HALF_DAY_HOURS:
        return AttendanceStatus.half_day
    if total_hours > 0:
        return AttendanceStatus.late
    return current_status


def derive_attendance(
    clock_in: Optional[datetime],
    clock_out: Optional[datetime],
    break_start: Optional[datetime] = None,
    break_end: Optional[datetime] = None,
    current_status: AttendanceStatus = AttendanceStatus.absent,
) -> AttendanceMetrics:
    """Compute total hours, overtime and status for one attendance day.

    Both clock times are required for anything to be derived; otherwise the
    metrics are zero and the status is passed through. A break is only
    deducted when both of its sides are present.
    """
    if clock_in is None or clock_out is None:
        return AttendanceMetrics(0.0, 0.0, current_status)

    worked = _as_aware(clock_out) - _as_aware(clock_in)
    if break_start is not None and break_end is not None:
        worked -= _as_aware(break_end) - _as_aware(break_start)

    total_hours = max(0.0, worked.total_seconds()) / SECONDS_PER_HOUR
    overtime_hours = max(0.0, total_hours - FULL_DAY_HOURS)

    return AttendanceMetrics(
        total_hours=total_hours,
        overtime_hours=overtime_hours,
        status=status_for_hours(total_hours, current_status),
    )


def round_hours(hours: float) -> float:
    """Round half-up to 2 decimals, for clock-out display."""
    cents = (Decimal(str(hours)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(cents / 100)
