"""Attendance Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Request / *Update → request bodies (write)
  - *Response                    → response bodies (read)
"""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrportal.common.constants import AttendanceStatus, WorkLocation
from hrportal.common.pagination import PaginationMeta


# ═════════════════════════════════════════════════════════════════════
# Clock in / out
# ═════════════════════════════════════════════════════════════════════


class ClockInRequest(BaseModel):
    """Payload for clocking in."""

    location: WorkLocation = WorkLocation.office
    notes: Optional[str] = Field(None, max_length=500)


class AttendanceRecordResponse(BaseModel):
    """Single attendance record for a day."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    date: date
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    status: AttendanceStatus
    location: WorkLocation = WorkLocation.office
    notes: Optional[str] = None
    is_manual_entry: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClockResponse(BaseModel):
    """Response after a clock-in or clock-out action."""

    message: str
    attendance: AttendanceRecordResponse
    total_hours: Optional[float] = None
    overtime_hours: Optional[float] = None


class TodayResponse(BaseModel):
    clocked_in: bool
    can_clock_out: bool
    attendance: Optional[AttendanceRecordResponse] = None


# ═════════════════════════════════════════════════════════════════════
# Lists and aggregates
# ═════════════════════════════════════════════════════════════════════


class AttendanceListResponse(BaseModel):
    data: list[AttendanceRecordResponse]
    meta: PaginationMeta


class AttendanceStats(BaseModel):
    """Admin dashboard counts for today."""

    total_employees: int = 0
    today_attendance: int = 0
    present_today: int = 0
    late_today: int = 0
    absent_today: int = 0


class MonthlySummary(BaseModel):
    employee_id: uuid.UUID
    year: int
    month: int
    total_days: int = 0
    present_days: int = 0
    total_hours: float = 0.0
    overtime_hours: float = 0.0
    avg_hours_per_day: float = 0.0


# ═════════════════════════════════════════════════════════════════════
# Admin manual entry / edit
# ═════════════════════════════════════════════════════════════════════


class ManualAttendanceCreate(BaseModel):
    """Admin-entered record that bypasses the clock-in flow."""

    employee_id: uuid.UUID
    date: date
    status: AttendanceStatus
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    location: WorkLocation = WorkLocation.office
    notes: Optional[str] = Field(None, max_length=500)


class AttendanceUpdate(BaseModel):
    """Partial admin edit; omitted fields are left as they are."""

    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    location: Optional[WorkLocation] = None
    notes: Optional[str] = Field(None, max_length=500)
