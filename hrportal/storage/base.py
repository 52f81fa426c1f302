"""Persistence contracts shared by the SQL and in-memory stores.

Records are the ORM model instances in both implementations. A repository
raises ``DuplicateRecordError`` when a write would break a unique key:
(employee, date) for attendance and call data, email and employee code for
the directory.

Every ``list`` has a ``list_page`` twin taking the same filters plus
``offset``/``limit``; it returns one window of rows and the unwindowed total
so list endpoints never load a whole table.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import date
from typing import Any, Iterable, NamedTuple, Optional, Sequence

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
from hrportal.core_hr.models import Employee
from hrportal.holidays.models import Holiday
from hrportal.leave.models import LeaveRequest


class Page(NamedTuple):
    items: Sequence[Any]
    total: int


class _Listing(ABC):
    @abstractmethod
    async def list_page(
        self,
        *,
        offset: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        **filters: Any,
    ) -> Page:
        """One ``limit``-sized window of ``list(**filters)`` and its total."""
        raise NotImplementedError


class EmployeeRepository(_Listing):
    @abstractmethod
    async def get(self, employee_id: uuid.UUID) -> Optional[Employee]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Employee]:
        """Case-insensitive lookup."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, employee: Employee) -> Employee:
        raise NotImplementedError

    @abstractmethod
    async def save(self, employee: Employee) -> Employee:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        *,
        active_only: bool = False,
        status: Optional[EmploymentStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        """Ordered by name; ``search`` matches name, email or employee code."""
        raise NotImplementedError

    @abstractmethod
    async def count_active(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def count_all(self) -> int:
        raise NotImplementedError

    @abstractmethod
    async def count_by_department(self) -> dict[Optional[str], int]:
        """Active head-count per department."""
        raise NotImplementedError


class AttendanceRepository(_Listing):
    @abstractmethod
    async def get(self, record_id: uuid.UUID) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    @abstractmethod
    async def get_for_day(
        self, employee_id: uuid.UUID, day: date,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    @abstractmethod
    async def save(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest date first."""
        raise NotImplementedError


class LeaveRepository(_Listing):
    @abstractmethod
    async def get(self, request_id: uuid.UUID) -> Optional[LeaveRequest]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, request: LeaveRequest) -> LeaveRequest:
        raise NotImplementedError

    @abstractmethod
    async def save(self, request: LeaveRequest) -> LeaveRequest:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        statuses: Optional[Iterable[LeaveStatus]] = None,
        leave_type: Optional[LeaveType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Most recently created first; the date window matches any overlap."""
        raise NotImplementedError


class CallDataRepository(_Listing):
    @abstractmethod
    async def get(self, record_id: uuid.UUID) -> Optional[CallDataRecord]:
        raise NotImplementedError

    @abstractmethod
    async def get_for_day(
        self, employee_id: uuid.UUID, day: date,
    ) -> Optional[CallDataRecord]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, record: CallDataRecord) -> CallDataRecord:
        raise NotImplementedError

    @abstractmethod
    async def save(self, record: CallDataRecord) -> CallDataRecord:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, record: CallDataRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        department: Optional[str] = None,
        by_score: bool = False,
    ) -> Sequence[CallDataRecord]:
        """Newest date first, or highest score first when ``by_score``."""
        raise NotImplementedError


class HolidayRepository(_Listing):
    @abstractmethod
    async def get(self, holiday_id: uuid.UUID) -> Optional[Holiday]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, holiday: Holiday) -> Holiday:
        raise NotImplementedError

    @abstractmethod
    async def save(self, holiday: Holiday) -> Holiday:
        raise NotImplementedError

    @abstractmethod
    async def list(
        self,
        *,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[HolidayStatus] = None,
        holiday_type: Optional[HolidayType] = None,
    ) -> Sequence[Holiday]:
        """Earliest date first."""
        raise NotImplementedError


class Store:
    """One unit of work: every repository a request may touch."""

    def __init__(
        self,
        *,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leave: LeaveRepository,
        calls: CallDataRepository,
        holidays: HolidayRepository,
    ) -> None:
        self.employees = employees
        self.attendance = attendance
        self.leave = leave
        self.calls = calls
        self.holidays = holidays


class StoreProvider(ABC):
    """Chosen once at process start; hands out a Store per request."""

    @abstractmethod
    def open(self) -> AbstractAsyncContextManager[Store]:
        raise NotImplementedError

    async def close(self) -> None:
        return None
