"""Employee directory service layer — async CRUD + search.

Business logic:
  - Email and employee code are unique; the store is authoritative
  - Codes default to ``EMP`` plus a zero-padded running number
  - Removal is a status change to terminated, never a hard delete
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import EmploymentStatus
from hrportal.common.exceptions import (
    AuthorizationError,
    DuplicateEmployeeError,
    DuplicateRecordError,
    NotFoundException,
    ValidationError,
)
from hrportal.common.pagination import paginate
from hrportal.core_hr.models import Employee
from hrportal.core_hr.schemas import (
    DepartmentStat,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeOut,
    EmployeeSummary,
    EmployeeUpdate,
)
from hrportal.storage import Store

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10


def _conflict(exc: DuplicateRecordError) -> DuplicateEmployeeError:
    field, value = next(iter(exc.key.items()))
    return DuplicateEmployeeError(field, value)


async def _get_employee(store: Store, employee_id: uuid.UUID) -> Employee:
    employee = await store.employees.get(employee_id)
    if employee is None:
        raise NotFoundException("Employee", employee_id)
    return employee


async def _ensure_email_free(
    store: Store, email: str, exclude_id: Optional[uuid.UUID] = None,
) -> None:
    other = await store.employees.get_by_email(email)
    if other is not None and other.id != exclude_id:
        raise DuplicateEmployeeError("email", email)


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Async CRUD operations for employees."""

    # ── List / search ───────────────────────────────────────────────

    @staticmethod
    async def list_employees(
        store: Store,
        *,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> EmployeeListResponse:
        """Return a paginated, filtered, searchable employee list."""
        items, meta = await paginate(
            store.employees,
            page,
            page_size,
            search=search.strip() if search else None,
            department=department,
            status=status,
        )
        return EmployeeListResponse(
            data=[EmployeeOut.model_validate(e) for e in items],
            meta=meta,
        )

    @staticmethod
    async def search_employees(
        store: Store, query: Optional[str], limit: int = SEARCH_LIMIT,
    ) -> list[EmployeeSummary]:
        """Active employees whose name, email or code contains ``query``."""
        needle = (query or "").strip()
        if len(needle) < MIN_SEARCH_LENGTH:
            raise ValidationError(
                {"q": [f"Search query must be at least {MIN_SEARCH_LENGTH} characters long."]},
                detail=f"Search query must be at least {MIN_SEARCH_LENGTH} characters long.",
            )
        page = await store.employees.list_page(limit=limit, active_only=True, search=needle)
        return [EmployeeSummary.model_validate(e) for e in page.items]

    # ── Get single ──────────────────────────────────────────────────

    @staticmethod
    async def get_me(store: Store, actor: Actor) -> EmployeeOut:
        return EmployeeOut.model_validate(await _get_employee(store, actor.employee_id))

    @staticmethod
    async def get_employee(
        store: Store, actor: Actor, employee_id: uuid.UUID,
    ) -> EmployeeOut:
        """Own profile for employees; any profile for admins."""
        employee = await _get_employee(store, employee_id)
        if not actor.is_admin and actor.employee_id != employee_id:
            raise AuthorizationError(detail="You can only view your own profile.")
        return EmployeeOut.model_validate(employee)

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_employee(
        store: Store, actor: Actor, clock: Clock, data: EmployeeCreate,
    ) -> EmployeeOut:
        email = data.email.lower()
        await _ensure_email_free(store, email)

        code = data.employee_code
        if not code:
            code = f"EMP{await store.employees.count_all() + 1:04d}"

        employee = Employee(
            id=uuid.uuid4(),
            employee_code=code.strip(),
            name=data.name.strip(),
            email=email,
            department=data.department.strip(),
            position=data.position.strip(),
            role=data.role,
            status=EmploymentStatus.active,
            start_date=data.start_date or clock.today(),
            created_at=clock.now(),
        )
        try:
            await store.employees.add(employee)
        except DuplicateRecordError as exc:
            raise _conflict(exc) from exc

        logger.info(
            "Employee %s (%s) added by %s", employee.employee_code, employee.id, actor.employee_id,
        )
        return EmployeeOut.model_validate(employee)

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_employee(
        store: Store, actor: Actor, employee_id: uuid.UUID, data: EmployeeUpdate,
    ) -> EmployeeOut:
        """Partial-update an existing employee."""
        employee = await _get_employee(store, employee_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return EmployeeOut.model_validate(employee)

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            await _ensure_email_free(store, changes["email"], exclude_id=employee.id)

        for field, value in changes.items():
            if isinstance(value, str):
                value = value.strip()
            setattr(employee, field, value)

        try:
            await store.employees.save(employee)
        except DuplicateRecordError as exc:
            raise _conflict(exc) from exc

        logger.info(
            "Employee %s updated by %s: %s", employee.id, actor.employee_id, sorted(changes),
        )
        return EmployeeOut.model_validate(employee)

    # ── Deactivate ──────────────────────────────────────────────────

    @staticmethod
    async def deactivate_employee(
        store: Store, actor: Actor, employee_id: uuid.UUID,
    ) -> EmployeeOut:
        """Soft delete: the record stays so attendance and leave history survive."""
        employee = await _get_employee(store, employee_id)
        employee.status = EmploymentStatus.terminated
        await store.employees.save(employee)

        logger.info("Employee %s terminated by %s", employee.id, actor.employee_id)
        return EmployeeOut.model_validate(employee)

    # ── Department stats ────────────────────────────────────────────

    @staticmethod
    async def department_stats(store: Store) -> list[DepartmentStat]:
        """Active head-count per department, largest first."""
        counts = await store.employees.count_by_department()
        stats = [
            DepartmentStat(department=name, employee_count=count)
            for name, count in counts.items()
        ]
        stats.sort(key=lambda s: (-s.employee_count, s.department or ""))
        return stats
