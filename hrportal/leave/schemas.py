"""Leave module Pydantic v2 schemas."""


import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrportal.common.constants import HalfDayPeriod, LeaveStatus, LeaveType
from hrportal.common.pagination import PaginationMeta


# ── Request schemas ──────────────────────────────────────────────────

class LeaveApplyRequest(BaseModel):
    """Employee applies for leave. Reason length is checked in the service."""

    type: LeaveType
    start_date: date
    end_date: date
    reason: str
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None


class LeaveUpdateRequest(BaseModel):
    """Partial edit of an existing request; dates travel as a pair."""

    type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    is_half_day: Optional[bool] = None
    half_day_period: Optional[HalfDayPeriod] = None


class LeaveApproveRequest(BaseModel):
    handover_notes: Optional[str] = Field(None, max_length=1000)


class LeaveRejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


# ── Response schemas ─────────────────────────────────────────────────

class LeaveRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    status: LeaveStatus
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    handover_notes: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LeaveListResponse(BaseModel):
    data: list[LeaveRequestOut]
    meta: PaginationMeta


class LeaveUsageOut(BaseModel):
    """Approved days taken per leave type in a year."""

    employee_id: uuid.UUID
    year: int
    usage: dict[LeaveType, Decimal]
    total_days: Decimal


class LeaveStatsOut(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0
    this_month: int = 0
