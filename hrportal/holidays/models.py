"""Holiday calendar ORM model."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hrportal.common.constants import HolidayStatus, HolidayType
from hrportal.database import Base


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (
        sa.Index("ix_holidays_status_date", "status", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    type: Mapped[HolidayType] = mapped_column(
        sa.Enum(HolidayType, name="holiday_type"),
        nullable=False,
        default=HolidayType.company,
    )
    is_recurring: Mapped[bool] = mapped_column(sa.Boolean, default=False)
    is_office_closed: Mapped[bool] = mapped_column(sa.Boolean, default=True)
    status: Mapped[HolidayStatus] = mapped_column(
        sa.Enum(HolidayStatus, name="holiday_status"),
        nullable=False,
        default=HolidayStatus.active,
    )
    added_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("employees.id"), nullable=False
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
