"""SQLAlchemy-backed store; one AsyncSession per unit of work."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncIterator, Iterable, Optional

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

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
from hrportal.database import build_session_factory
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

logger = logging.getLogger(__name__)


def _is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg: "duplicate key value violates unique constraint"
    # sqlite:  "UNIQUE constraint failed"
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


class _SqlRepository:
    """Shared CRUD; subclasses describe their listing in ``_select``."""

    model: type
    entity_type = "Record"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _key(self, record, message: str) -> dict:
        return {"id": record.id}

    def _select(self, **filters: Any) -> Select:
        raise NotImplementedError

    async def get(self, record_id: uuid.UUID):
        return await self.session.get(self.model, record_id)

    async def _flush(self, record) -> None:
        """Flush pending writes, translating unique-key violations."""
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            if _is_unique_violation(exc):
                key = self._key(record, str(exc.orig))
                logger.info("Unique key taken for %s %s", self.entity_type, key)
                raise DuplicateRecordError(self.entity_type, key) from exc
            raise

    async def add(self, record):
        self.session.add(record)
        await self._flush(record)
        return record

    async def save(self, record):
        await self._flush(record)
        return record

    async def delete(self, record) -> None:
        await self.session.delete(record)
        await self.session.flush()

    async def list(self, **filters: Any):
        result = await self.session.execute(self._select(**filters))
        return result.scalars().all()

    async def list_page(
        self,
        *,
        offset: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
        **filters: Any,
    ) -> Page:
        query = self._select(**filters)

        # ── total count (strip ORDER BY for efficiency) ─────────────
        count_q = select(func.count()).select_from(query.order_by(None).subquery())
        total: int = (await self.session.execute(count_q)).scalar_one()

        rows = (
            await self.session.execute(query.offset(offset).limit(limit))
        ).scalars().all()
        return Page(rows, total)


class _SqlDailyRepository(_SqlRepository):
    def _key(self, record, message: str) -> dict:
        return {"employee_id": record.employee_id, "date": record.date}

    async def get_for_day(self, employee_id: uuid.UUID, day: date):
        result = await self.session.execute(
            select(self.model).where(
                self.model.employee_id == employee_id,
                self.model.date == day,
            )
        )
        return result.scalars().first()

    def _filtered(self, employee_id, from_date, to_date) -> Select:
        stmt = select(self.model)
        if employee_id is not None:
            stmt = stmt.where(self.model.employee_id == employee_id)
        if from_date is not None:
            stmt = stmt.where(self.model.date >= from_date)
        if to_date is not None:
            stmt = stmt.where(self.model.date <= to_date)
        return stmt


# ── Repositories ────────────────────────────────────────────────────

class SqlEmployeeRepository(_SqlRepository, EmployeeRepository):
    model = Employee
    entity_type = "Employee"

    def _key(self, record, message: str) -> dict:
        if "employee_code" in message:
            return {"employee_code": record.employee_code}
        return {"email": record.email}

    async def get_by_email(self, email: str) -> Optional[Employee]:
        result = await self.session.execute(
            select(Employee).where(func.lower(Employee.email) == email.lower())
        )
        return result.scalars().first()

    def _select(
        self,
        *,
        active_only: bool = False,
        status: Optional[EmploymentStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Select:
        stmt = select(Employee)
        if active_only:
            stmt = stmt.where(Employee.status == EmploymentStatus.active)
        if status is not None:
            stmt = stmt.where(Employee.status == status)
        if department is not None:
            stmt = stmt.where(Employee.department == department)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                Employee.name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.employee_code.ilike(pattern),
            ))
        return stmt.order_by(Employee.name)

    async def count_active(self) -> int:
        result = await self.session.execute(
            select(func.count(Employee.id)).where(
                Employee.status == EmploymentStatus.active,
            )
        )
        return result.scalar_one()

    async def count_all(self) -> int:
        result = await self.session.execute(select(func.count(Employee.id)))
        return result.scalar_one()

    async def count_by_department(self) -> dict[Optional[str], int]:
        result = await self.session.execute(
            select(Employee.department, func.count(Employee.id))
            .where(Employee.status == EmploymentStatus.active)
            .group_by(Employee.department)
        )
        return {row[0]: row[1] for row in result.all()}


class SqlAttendanceRepository(_SqlDailyRepository, AttendanceRepository):
    model = AttendanceRecord
    entity_type = "AttendanceRecord"

    def _select(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Select:
        stmt = self._filtered(employee_id, from_date, to_date)
        if status is not None:
            stmt = stmt.where(AttendanceRecord.status == status)
        return stmt.order_by(
            AttendanceRecord.date.desc(), AttendanceRecord.created_at.desc(),
        )


class SqlCallDataRepository(_SqlDailyRepository, CallDataRepository):
    model = CallDataRecord
    entity_type = "CallDataRecord"

    def _select(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        department: Optional[str] = None,
        by_score: bool = False,
    ) -> Select:
        stmt = self._filtered(employee_id, from_date, to_date)
        if department is not None:
            stmt = stmt.where(CallDataRecord.employee_id.in_(
                select(Employee.id).where(Employee.department == department)
            ))
        order = [CallDataRecord.date.desc(), CallDataRecord.created_at.desc()]
        if by_score:
            order.insert(0, CallDataRecord.performance_score.desc())
        return stmt.order_by(*order)


class SqlLeaveRepository(_SqlRepository, LeaveRepository):
    model = LeaveRequest
    entity_type = "LeaveRequest"

    def _select(
        self,
        *,
        employee_id: Optional[uuid.UUID] = None,
        statuses: Optional[Iterable[LeaveStatus]] = None,
        leave_type: Optional[LeaveType] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Select:
        stmt = select(LeaveRequest)
        if employee_id is not None:
            stmt = stmt.where(LeaveRequest.employee_id == employee_id)
        if statuses is not None:
            stmt = stmt.where(LeaveRequest.status.in_(list(statuses)))
        if leave_type is not None:
            stmt = stmt.where(LeaveRequest.type == leave_type)
        if to_date is not None:
            stmt = stmt.where(LeaveRequest.start_date <= to_date)
        if from_date is not None:
            stmt = stmt.where(LeaveRequest.end_date >= from_date)
        return stmt.order_by(LeaveRequest.created_at.desc())


class SqlHolidayRepository(_SqlRepository, HolidayRepository):
    model = Holiday
    entity_type = "Holiday"

    def _select(
        self,
        *,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        status: Optional[HolidayStatus] = None,
        holiday_type: Optional[HolidayType] = None,
    ) -> Select:
        stmt = select(Holiday)
        if from_date is not None:
            stmt = stmt.where(Holiday.date >= from_date)
        if to_date is not None:
            stmt = stmt.where(Holiday.date <= to_date)
        if status is not None:
            stmt = stmt.where(Holiday.status == status)
        if holiday_type is not None:
            stmt = stmt.where(Holiday.type == holiday_type)
        return stmt.order_by(Holiday.date)


# ── Store / provider ────────────────────────────────────────────────

class SqlStore(Store):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        super().__init__(
            employees=SqlEmployeeRepository(session),
            attendance=SqlAttendanceRepository(session),
            leave=SqlLeaveRepository(session),
            calls=SqlCallDataRepository(session),
            holidays=SqlHolidayRepository(session),
        )


class SqlStoreProvider(StoreProvider):
    """Opens a session per unit of work; commits on success, rolls back on error."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def open(self) -> AsyncIterator[Store]:
        async with self.session_factory() as session:
            try:
                yield SqlStore(session)
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        await self.engine.dispose()
