"""Call-center ORM model: CallDataRecord (daily counters per employee)."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrportal.database import Base


class CallDataRecord(Base):
    __tablename__ = "call_data"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "date", name="uq_call_data_emp_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False
    )
    date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    total_calls: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    # minutes
    total_call_time: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    interested_students: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    visited_today: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0)
    performance_score: Mapped[float] = mapped_column(sa.Float, nullable=False, default=0)
    notes: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id")
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    updated_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
