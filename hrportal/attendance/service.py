"""Attendance service layer — clock in/out, admin entry, reporting.

Business logic:
  - One record per employee per calendar day (clock-in creates it)
  - Hours / overtime / status derived on every write that has both clock times
  - Admin manual entry, edit and delete
  - Read operations for self and admin views, daily stats, monthly summary
"""

from __future__ import annotations

import calendar
import logging
import uuid
from datetime import date
from typing import Any, Optional

from hrportal.attendance.calculator import derive_attendance, round_hours
from hrportal.attendance.models import AttendanceRecord
from hrportal.attendance.schemas import (
    AttendanceListResponse,
    AttendanceRecordResponse,
    AttendanceStats,
    AttendanceUpdate,
    ClockResponse,
    ManualAttendanceCreate,
    MonthlySummary,
    TodayResponse,
)
from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import AttendanceStatus, WorkLocation
from hrportal.common.exceptions import (
    AlreadyClockedOutError,
    DuplicateClockInError,
    DuplicateRecordConflict,
    DuplicateRecordError,
    InvalidRangeError,
    NotClockedInError,
    NotFoundException,
)
from hrportal.common.pagination import paginate
from hrportal.storage import Store

logger = logging.getLogger(__name__)


def _existing_record_detail(record: AttendanceRecord) -> dict[str, Any]:
    """Enough of the existing record for the client to show its state."""
    return {
        "id": str(record.id),
        "clock_in": record.clock_in.isoformat() if record.clock_in else None,
        "clock_out": record.clock_out.isoformat() if record.clock_out else None,
        "status": record.status.value,
        "can_clock_out": record.clock_out is None,
    }


def _apply_metrics(record: AttendanceRecord) -> None:
    metrics = derive_attendance(
        record.clock_in,
        record.clock_out,
        record.break_start,
        record.break_end,
        current_status=record.status,
    )
    record.total_hours = metrics.total_hours
    record.overtime_hours = metrics.overtime_hours
    record.status = metrics.status


# ═════════════════════════════════════════════════════════════════════
# AttendanceService
# ═════════════════════════════════════════════════════════════════════


class AttendanceService:
    """Async attendance operations over a Store."""

    # ── Clock in / out ──────────────────────────────────────────────

    @staticmethod
    async def clock_in(
        store: Store,
        actor: Actor,
        clock: Clock,
        location: WorkLocation = WorkLocation.office,
        notes: Optional[str] = None,
    ) -> ClockResponse:
        """Open today's record for the actor."""
        now = clock.now()
        today = clock.today()

        existing = await store.attendance.get_for_day(actor.employee_id, today)
        if existing is not None:
            logger.warning("Duplicate clock-in by %s on %s", actor.employee_id, today)
            raise DuplicateClockInError(_existing_record_detail(existing))

        record = AttendanceRecord(
            id=uuid.uuid4(),
            employee_id=actor.employee_id,
            date=today,
            clock_in=now,
            total_hours=0.0,
            overtime_hours=0.0,
            status=AttendanceStatus.present,
            location=location,
            notes=notes,
            is_manual_entry=False,
            created_at=now,
            updated_at=now,
        )
        try:
            await store.attendance.add(record)
        except DuplicateRecordError:
            # Lost a race with a concurrent clock-in.
            existing = await store.attendance.get_for_day(actor.employee_id, today)
            detail = _existing_record_detail(existing) if existing else {}
            raise DuplicateClockInError(detail)

        logger.info("Employee %s clocked in at %s", actor.employee_id, now.isoformat())
        return ClockResponse(
            message="Clocked in successfully",
            attendance=AttendanceRecordResponse.model_validate(record),
        )

    @staticmethod
    async def clock_out(store: Store, actor: Actor, clock: Clock) -> ClockResponse:
        """Close today's record and derive its hours."""
        record = await store.attendance.get_for_day(actor.employee_id, clock.today())
        if record is None:
            raise NotClockedInError()
        if record.clock_out is not None:
            raise AlreadyClockedOutError()

        now = clock.now()
        record.clock_out = now
        record.updated_at = now
        _apply_metrics(record)
        await store.attendance.save(record)

        logger.info(
            "Employee %s clocked out: %.2fh (%s)",
            actor.employee_id, record.total_hours, record.status.value,
        )
        return ClockResponse(
            message="Clocked out successfully",
            attendance=AttendanceRecordResponse.model_validate(record),
            total_hours=round_hours(record.total_hours),
            overtime_hours=round_hours(record.overtime_hours),
        )

    # ── Reads ───────────────────────────────────────────────────────

    @staticmethod
    async def get_today(
        store: Store,
        actor: Actor,
        clock: Clock,
        on_date: Optional[date] = None,
    ) -> TodayResponse:
        record = await store.attendance.get_for_day(
            actor.employee_id, on_date or clock.today(),
        )
        if record is None:
            return TodayResponse(clocked_in=False, can_clock_out=False)
        return TodayResponse(
            clocked_in=record.clock_in is not None,
            can_clock_out=record.clock_in is not None and record.clock_out is None,
            attendance=AttendanceRecordResponse.model_validate(record),
        )

    @staticmethod
    async def list_my(
        store: Store,
        actor: Actor,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        *,
        page: int = 1,
        page_size: int = 50,
    ) -> AttendanceListResponse:
        return await AttendanceService.list_all(
            store,
            from_date,
            to_date,
            employee_id=actor.employee_id,
            page=page,
            page_size=page_size,
        )

    @staticmethod
    async def list_all(
        store: Store,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        *,
        employee_id: Optional[uuid.UUID] = None,
        status: Optional[AttendanceStatus] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> AttendanceListResponse:
        if from_date and to_date and to_date < from_date:
            raise InvalidRangeError(field="to_date")

        items, meta = await paginate(
            store.attendance,
            page,
            page_size,
            employee_id=employee_id,
            from_date=from_date,
            to_date=to_date,
            status=status,
        )
        return AttendanceListResponse(
            data=[AttendanceRecordResponse.model_validate(r) for r in items],
            meta=meta,
        )

    @staticmethod
    async def get_stats(store: Store, clock: Clock) -> AttendanceStats:
        """Counts for today's admin dashboard."""
        today = clock.today()
        records = await store.attendance.list(from_date=today, to_date=today)
        total_employees = await store.employees.count_active()

        return AttendanceStats(
            total_employees=total_employees,
            today_attendance=len(records),
            present_today=sum(1 for r in records if r.status == AttendanceStatus.present),
            late_today=sum(1 for r in records if r.status == AttendanceStatus.late),
            absent_today=total_employees - len(records),
        )

    @staticmethod
    async def get_monthly_summary(
        store: Store,
        employee_id: uuid.UUID,
        year: int,
        month: int,
    ) -> MonthlySummary:
        last_day = calendar.monthrange(year, month)[1]
        records = await store.attendance.list(
            employee_id=employee_id,
            from_date=date(year, month, 1),
            to_date=date(year, month, last_day),
        )

        total_days = len(records)
        total_hours = sum(r.total_hours or 0.0 for r in records)
        return MonthlySummary(
            employee_id=employee_id,
            year=year,
            month=month,
            total_days=total_days,
            present_days=sum(1 for r in records if r.status == AttendanceStatus.present),
            total_hours=round(total_hours, 2),
            overtime_hours=round(sum(r.overtime_hours or 0.0 for r in records), 2),
            avg_hours_per_day=round(total_hours / total_days, 2) if total_days else 0.0,
        )

    # ── Admin writes ────────────────────────────────────────────────

    @staticmethod
    async def create_manual(
        store: Store,
        actor: Actor,
        clock: Clock,
        data: ManualAttendanceCreate,
    ) -> AttendanceRecordResponse:
        """Admin entry for any employee and day; still one record per day."""
        if await store.employees.get(data.employee_id) is None:
            raise NotFoundException("Employee", data.employee_id)

        existing = await store.attendance.get_for_day(data.employee_id, data.date)
        if existing is not None:
            raise DuplicateRecordConflict("Attendance record", data.date)

        now = clock.now()
        record = AttendanceRecord(
            id=uuid.uuid4(),
            employee_id=data.employee_id,
            date=data.date,
            clock_in=data.clock_in,
            clock_out=data.clock_out,
            break_start=data.break_start,
            break_end=data.break_end,
            total_hours=0.0,
            overtime_hours=0.0,
            status=data.status,
            location=data.location,
            notes=data.notes,
            is_manual_entry=True,
            added_by=actor.employee_id,
            created_at=now,
            updated_at=now,
        )
        _apply_metrics(record)
        try:
            await store.attendance.add(record)
        except DuplicateRecordError:
            raise DuplicateRecordConflict("Attendance record", data.date)

        logger.info(
            "Manual attendance for %s on %s added by %s",
            data.employee_id, data.date, actor.employee_id,
        )
        return AttendanceRecordResponse.model_validate(record)

    @staticmethod
    async def update_record(
        store: Store,
        actor: Actor,
        clock: Clock,
        record_id: uuid.UUID,
        data: AttendanceUpdate,
    ) -> AttendanceRecordResponse:
        record = await store.attendance.get(record_id)
        if record is None:
            raise NotFoundException("AttendanceRecord", record_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if field in ("status", "location") and value is None:
                continue
            setattr(record, field, value)

        record.updated_by = actor.employee_id
        record.updated_at = clock.now()
        _apply_metrics(record)
        await store.attendance.save(record)

        logger.info("Attendance %s updated by %s", record_id, actor.employee_id)
        return AttendanceRecordResponse.model_validate(record)

    @staticmethod
    async def delete_record(store: Store, record_id: uuid.UUID) -> None:
        record = await store.attendance.get(record_id)
        if record is None:
            raise NotFoundException("AttendanceRecord", record_id)
        await store.attendance.delete(record)
        logger.info("Attendance %s deleted", record_id)
