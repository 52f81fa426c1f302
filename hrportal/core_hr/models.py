"""Core HR ORM models: Employee.

Only the directory fields the attendance, leave and call-tracking modules
read are mapped here; profile management lives outside this service.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrportal.common.constants import EmploymentStatus, UserRole
from hrportal.database import Base


class Employee(Base):
    """Employee directory entry."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_code: Mapped[str] = mapped_column(
        sa.String(20), unique=True, nullable=False,
    )
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False,
    )
    department: Mapped[Optional[str]] = mapped_column(sa.String(100))
    position: Mapped[Optional[str]] = mapped_column(sa.String(100))
    role: Mapped[UserRole] = mapped_column(
        sa.Enum(UserRole, name="user_role"),
        nullable=False,
        default=UserRole.employee,
    )
    status: Mapped[EmploymentStatus] = mapped_column(
        sa.Enum(EmploymentStatus, name="employment_status"),
        nullable=False,
        default=EmploymentStatus.active,
    )
    start_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.active

    def __repr__(self) -> str:
        return f"<Employee {self.employee_code} {self.name!r}>"
