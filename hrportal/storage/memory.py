"""Dict-backed store with the same uniqueness contract as the SQL store."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Any, AsyncIterator, Iterable, Optional, Sequence

from hrportal.attendance.models import AttendanceRecord
from hrportal.calls.models import CallDataRecord
from hrportal.common.constants import (
    DEFAULT_PAGE_SIZE,
    AttendanceStatus,
    EmploymentStatus,
    HolidayStatus,
    HolidayType,
    LeaveStatus,
    LeaveType,
)
from hrportal.common.exceptions import DuplicateRecordError
from hrportal.core_hr.models import Employee
from hrportal.holidays.models import Holiday
from hrportal.leave.models import LeaveRequest
from hrportal.storage.base import (
    AttendanceRepository,
    CallDataRepository,
    EmployeeRepository,
    HolidayRepository,
    LeaveRepository,
    Page,
    Store,
    StoreProvider,
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _in_window(day: date, from_date: Optional[date], to_date: Optional[date]) -> bool:
    if from_date is not None and day < from_date:
        return False
    if to_date is not None and day > to_date:
        return False
    return True


def _created(record) -> datetime:
    value = record.created_at or _EPOCH
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class _Paged:
    """``list_page`` over an in-process ``list``."""

    async def list_page(
        self,
        *,
        offset: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        **filters: Any,
    ) -> Page:
        rows = await self.list(**filters)
        return Page(list(rows[offset:offset + limit]), len(rows))


class _DailyRecords(_Paged):
    """Records keyed by id with a unique (employee_id, date) index."""

    entity_type = "Record"

    def __init__(self) -> None:
        self._by_id: dict[uuid.UUID, object] = {}

    def _ensure_unique(self, record) -> None:
        for other in self._by_id.values():
            if (
                other.id != record.id
                and other.employee_id == record.employee_id
                and other.date == record.date
            ):
                raise DuplicateRecordError(
                    self.entity_type,
                    {"employee_id": record.employee_id, "date": record.date},
                )

    async def get(self, record_id: uuid.UUID):
        return self._by_id.get(record_id)

    async def get_for_day(self, employee_id: uuid.UUID, day: date):
        for record in self._by_id.values():
            if record.employee_id == employee_id and record.date == day:
                return record
        return None

    async def add(self, record):
        if record.id is None:
            record.id = uuid.uuid4()
        self._ensure_unique(record)
        self._by_id[record.id] = record
        return record

    async def save(self, record):
        self._ensure_unique(record)
        self._by_id[record.id] = record
        return record

    async def delete(self, record) -> None:
        self._by_id.pop(record.id, None)

    def _filter(self, employee_id, from_date, to_date):
        rows = [
            r for r in self._by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and _in_window(r.date, from_date, to_date)
        ]
        rows.sort(key=lambda r: (r.date, _created(r)), reverse=True)
        return rows


# ── Repositories ────────────────────────────────────────────────────

class InMemoryEmployeeRepository(_Paged, EmployeeRepository):
    def __init__(self) -> None:
        self._by_id: dict[uuid.UUID, Employee] = {}

    def _ensure_unique(self, employee: Employee) -> None:
        for other in self._by_id.values():
            if other.id == employee.id:
                continue
            if other.email == employee.email:
                raise DuplicateRecordError("Employee", {"email": employee.email})
            if other.employee_code == employee.employee_code:
                raise DuplicateRecordError(
                    "Employee", {"employee_code": employee.employee_code},
                )

    async def get(self, employee_id: uuid.UUID) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    async def get_by_email(self, email: str) -> Optional[Employee]:
        wanted = email.lower()
        for e in self._by_id.values():
            if e.email.lower() == wanted:
                return e
        return None

    async def add(self, employee: Employee) -> Employee:
        if employee.id is None:
            employee.id = uuid.uuid4()
        self._ensure_unique(employee)
        self._by_id[employee.id] = employee
        return employee

    async def save(self, employee: Employee) -> Employee:
        self._ensure_unique(employee)
        self._by_id[employee.id] = employee
        return employee

    async def list(
        self,
        *,
        active_only: bool = False,
        status: Optional[EmploymentStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        needle = search.lower() if search else None
        rows = [
            e for e in self._by_id.values()
            if (not active_only or e.status == EmploymentStatus.active)
            and (status is None or e.status == status)
            and (department is None or e.department == department)
            and (
                needle is None
                or needle in e.name.lower()
                or needle in e.email.lower()
                or needle in e.employee_code.lower()
            )
        ]
        return sorted(rows, key=lambda e: e.name)

    async def count_active(self) -> int:
        return len(await self.list(active_only=True))

    async def count_all(self) -> int:
        return len(self._by_id)

    async def count_by_department(self) -> dict[Optional[str], int]:
        counts: dict[Optional[str], int] = {}
        for e in await self.list(active_only=True):
            counts[e.department] = counts.get(e.department, 0) + 1
        return counts


class InMemoryAttendanceRepository(_DailyRecords, AttendanceRepository):
    entity_type = "AttendanceRecord"

    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        rows = self._filter(employee_id, from_date, to_date)
        if status is not None:
            rows = [r for r in rows if r.status == status]
        return rows


class InMemoryCallDataRepository(_DailyRecords, CallDataRepository):
    entity_type = "CallDataRecord"

    def __init__(self, employees: InMemoryEmployeeRepository) -> None:
        super().__init__()
        self._employees = employees

    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        department: Optional[str] = None,
        by_score: bool = False,
    ) -> Sequence[CallDataRecord]:
        rows = self._filter(employee_id, from_date, to_date)
        if department is not None:
            members = {
                e.id for e in await self._employees.list(department=department)
            }
            rows = [r for r in rows if r.employee_id in members]
        if by_score:
            rows.sort(key=lambda r: r.performance_score, reverse=True)
        return rows


class InMemoryLeaveRepository(_Paged, LeaveRepository):
    def __init__(self) -> None:
        self._by_id: dict[uuid.UUID, LeaveRequest] = {}

    async def get(self, request_id: uuid.UUID) -> Optional[LeaveRequest]:
        return self._by_id.get(request_id)

    async def add(self, request: LeaveRequest) -> LeaveRequest:
        if request.id is None:
            request.id = uuid.uuid4()
        self._by_id[request.id] = request
        return request

    async def save(self, request: LeaveRequest) -> LeaveRequest:
        self._by_id[request.id] = request
        return request

    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        statuses: Optional[Iterable[LeaveStatus]] = None,
        leave_type: Optional[LeaveType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        wanted = set(statuses) if statuses is not None else None
        rows = [
            r for r in self._by_id.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (wanted is None or r.status in wanted)
            and (leave_type is None or r.type == leave_type)
            and (to_date is None or r.start_date <= to_date)
            and (from_date is None or r.end_date >= from_date)
        ]
        rows.sort(key=_created, reverse=True)
        return rows


class InMemoryHolidayRepository(_Paged, HolidayRepository):
    def __init__(self) -> None:
        self._by_id: dict[uuid.UUID, Holiday] = {}

    async def get(self, holiday_id: uuid.UUID) -> Optional[Holiday]:
        return self._by_id.get(holiday_id)

    async def add(self, holiday: Holiday) -> Holiday:
        if holiday.id is None:
            holiday.id = uuid.uuid4()
        self._by_id[holiday.id] = holiday
        return holiday

    async def save(self, holiday: Holiday) -> Holiday:
        self._by_id[holiday.id] = holiday
        return holiday

    async def list(
        self,
        *,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[HolidayStatus] = None,
        holiday_type: Optional[HolidayType] = None,
    ) -> Sequence[Holiday]:
        rows = [
            h for h in self._by_id.values()
            if _in_window(h.date, from_date, to_date)
            and (status is None or h.status == status)
            and (holiday_type is None or h.type == holiday_type)
        ]
        rows.sort(key=lambda h: h.date)
        return rows


# ── Store / provider ────────────────────────────────────────────────

class InMemoryStore(Store):
    def __init__(self) -> None:
        employees = InMemoryEmployeeRepository()
        super().__init__(
            employees=employees,
            attendance=InMemoryAttendanceRepository(),
            leave=InMemoryLeaveRepository(),
            calls=InMemoryCallDataRepository(employees),
            holidays=InMemoryHolidayRepository(),
        )


class MemoryStoreProvider(StoreProvider):
    """Hands every request the same process-wide InMemoryStore."""

    def __init__(self, store: Optional[InMemoryStore] = None) -> None:
        self.store = store or InMemoryStore()

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Store]:
        yield self.store
