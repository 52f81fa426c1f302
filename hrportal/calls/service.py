"""Call-data service — daily upsert, checkout edit lock, performance stats."""

from __future__ import annotations

import calendar
import logging
import uuid
from datetime import date
from typing import Optional

from hrportal.auth.schemas import Actor
from hrportal.calls.models import CallDataRecord
from hrportal.calls.schemas import (
    CallDataListResponse,
    CallDataOut,
    CallDataUpdate,
    CallDataUpsert,
    CallDataUpsertResponse,
    EmployeePerformance,
    OverallPerformance,
    PerformanceStatsOut,
)
from hrportal.calls.scorer import compute_score
from hrportal.common.clock import Clock
from hrportal.common.exceptions import (
    AuthorizationError,
    CheckedOutError,
    DuplicateRecordConflict,
    DuplicateRecordError,
    NotFoundException,
)
from hrportal.common.pagination import paginate
from hrportal.storage import Store

logger = logging.getLogger(__name__)


def _month_window(year: Optional[int], month: Optional[int]):
    if year is None or month is None:
        return None, None
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _rescore(record: CallDataRecord) -> None:
    record.performance_score = compute_score(
        record.visited_today,
        record.interested_students,
        record.total_call_time,
        record.total_calls,
    )


# ═══════════════════════════════════════════════════════════════════
# CallDataService
# ═══════════════════════════════════════════════════════════════════

class CallDataService:

    # ── Edit lock ────────────────────────────────────────────────────

    @staticmethod
    async def ensure_editable(
        store: Store,
        actor: Actor,
        clock: Clock,
        record_date: date,
        action: str = "edit",
    ) -> None:
        """Non-admins cannot touch today's call data once they clocked out."""
        if actor.is_admin:
            return
        today = clock.today()
        if record_date != today:
            return
        attendance = await store.attendance.get_for_day(actor.employee_id, today)
        if attendance is not None and attendance.clock_out is not None:
            logger.warning(
                "Call data %s refused for %s after checkout", action, actor.employee_id,
            )
            raise CheckedOutError(action)

    # ── Writes ───────────────────────────────────────────────────────

    @staticmethod
    async def upsert_daily(
        store: Store,
        actor: Actor,
        clock: Clock,
        data: CallDataUpsert,
    ) -> CallDataUpsertResponse:
        """Find-or-create the (employee, date) record and store the counters."""
        employee_id = actor.employee_id
        if data.employee_id is not None and data.employee_id != actor.employee_id:
            if not actor.is_admin:
                raise AuthorizationError("Only admins can add data for other employees.")
            if await store.employees.get(data.employee_id) is None:
                raise NotFoundException("Employee", data.employee_id)
            employee_id = data.employee_id

        record_date = data.record_date or clock.today()
        await CallDataService.ensure_editable(store, actor, clock, record_date, "add/edit")

        now = clock.now()
        record = await store.calls.get_for_day(employee_id, record_date)
        created = record is None
        if created:
            record = CallDataRecord(
                id=uuid.uuid4(),
                employee_id=employee_id,
                date=record_date,
                notes=data.notes or "",
                created_at=now,
            )
        else:
            record.updated_by = actor.employee_id
            if data.notes:
                record.notes = data.notes

        record.total_calls = data.total_calls
        record.total_call_time = data.total_call_time
        record.interested_students = data.interested_students
        record.visited_today = data.visited_today
        record.updated_at = now
        _rescore(record)

        try:
            if created:
                await store.calls.add(record)
            else:
                await store.calls.save(record)
        except DuplicateRecordError:
            raise DuplicateRecordConflict("Call data", record_date)

        logger.info(
            "Call data %s for %s on %s (score %.1f)",
            "added" if created else "updated", employee_id, record_date,
            record.performance_score,
        )
        return CallDataUpsertResponse(
            message="Call data added successfully" if created else "Call data updated successfully",
            created=created,
            call_data=CallDataOut.model_validate(record),
        )

    @staticmethod
    async def update_record(
        store: Store,
        actor: Actor,
        clock: Clock,
        record_id: uuid.UUID,
        data: CallDataUpdate,
    ) -> CallDataOut:
        record = await CallDataService._get_owned(store, actor, record_id)
        await CallDataService.ensure_editable(store, actor, clock, record.date)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(record, field, value)
        record.updated_by = actor.employee_id
        record.updated_at = clock.now()
        _rescore(record)
        await store.calls.save(record)

        logger.info("Call data %s updated by %s", record_id, actor.employee_id)
        return CallDataOut.model_validate(record)

    @staticmethod
    async def delete_record(
        store: Store,
        actor: Actor,
        clock: Clock,
        record_id: uuid.UUID,
    ) -> None:
        record = await CallDataService._get_owned(store, actor, record_id)
        await CallDataService.ensure_editable(store, actor, clock, record.date, "delete")
        await store.calls.delete(record)
        logger.info("Call data %s deleted by %s", record_id, actor.employee_id)

    # ── Reads ────────────────────────────────────────────────────────

    @staticmethod
    async def _get_owned(
        store: Store, actor: Actor, record_id: uuid.UUID,
    ) -> CallDataRecord:
        record = await store.calls.get(record_id)
        if record is None:
            raise NotFoundException("CallData", record_id)
        if record.employee_id != actor.employee_id and not actor.is_admin:
            raise AuthorizationError("You can only access your own call data.")
        return record

    @staticmethod
    async def get_record(
        store: Store, actor: Actor, record_id: uuid.UUID,
    ) -> CallDataOut:
        return CallDataOut.model_validate(
            await CallDataService._get_owned(store, actor, record_id)
        )

    @staticmethod
    async def get_today(
        store: Store, actor: Actor, clock: Clock,
    ) -> Optional[CallDataOut]:
        record = await store.calls.get_for_day(actor.employee_id, clock.today())
        return CallDataOut.model_validate(record) if record else None

    @staticmethod
    async def list_my(
        store: Store,
        actor: Actor,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> CallDataListResponse:
        from_date, to_date = _month_window(year, month)
        items, meta = await paginate(
            store.calls,
            page,
            page_size,
            employee_id=actor.employee_id,
            from_date=from_date,
            to_date=to_date,
        )
        return CallDataListResponse(
            data=[CallDataOut.model_validate(r) for r in items],
            meta=meta,
        )

    @staticmethod
    async def list_all(
        store: Store,
        *,
        employee_id: Optional[uuid.UUID] = None,
        on_date: Optional[date] = None,
        department: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> CallDataListResponse:
        """Admin view, highest score first."""
        items, meta = await paginate(
            store.calls,
            page,
            page_size,
            employee_id=employee_id,
            from_date=on_date,
            to_date=on_date,
            department=department,
            by_score=True,
        )
        return CallDataListResponse(
            data=[CallDataOut.model_validate(r) for r in items],
            meta=meta,
        )

    @staticmethod
    async def get_performance_stats(
        store: Store,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        department: Optional[str] = None,
    ) -> PerformanceStatsOut:
        """Per-employee totals for active employees, best score first."""
        employees = await store.employees.list(active_only=True, department=department)
        from_date, to_date = _month_window(year, month)

        per_employee: dict[uuid.UUID, EmployeePerformance] = {}
        for emp in employees:
            rows = await store.calls.list(
                employee_id=emp.id, from_date=from_date, to_date=to_date,
            )
            if not rows:
                continue
            perf = EmployeePerformance(
                employee_id=emp.id,
                name=emp.name,
                employee_code=emp.employee_code,
                department=emp.department,
            )
            for r in rows:
                perf.total_calls += r.total_calls
                perf.total_call_time += r.total_call_time
                perf.total_interested_students += r.interested_students
                perf.total_visited += r.visited_today
                perf.performance_score += r.performance_score
                perf.record_count += 1
            per_employee[emp.id] = perf

        ranked = sorted(
            per_employee.values(), key=lambda p: p.performance_score, reverse=True,
        )
        overall = OverallPerformance(
            total_employees_tracked=len(ranked),
            total_calls=sum(p.total_calls for p in ranked),
            total_call_time=sum(p.total_call_time for p in ranked),
            total_interested_students=sum(p.total_interested_students for p in ranked),
            total_visited=sum(p.total_visited for p in ranked),
            average_performance_score=(
                round(sum(p.performance_score for p in ranked) / len(ranked), 2)
                if ranked else 0.0
            ),
        )
        return PerformanceStatsOut(
            top_performer=ranked[0] if ranked else None,
            performance_data=ranked,
            overall_stats=overall,
        )
