"""Enums and constants for the HR portal — matching PostgreSQL ENUM types."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "employee"
    admin = "admin"


class EmploymentStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    terminated = "terminated"


# ── Attendance ──────────────────────────────────────────────────────

class AttendanceStatus(str, enum.Enum):
    present = "present"
    absent = "absent"
    late = "late"
    half_day = "half_day"
    holiday = "holiday"


class WorkLocation(str, enum.Enum):
    office = "office"
    remote = "remote"
    field = "field"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


class LeaveType(str, enum.Enum):
    vacation = "vacation"
    sick_leave = "sick_leave"
    personal_leave = "personal_leave"
    emergency_leave = "emergency_leave"
    maternity_paternity = "maternity_paternity"
    bereavement = "bereavement"


class HalfDayPeriod(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"


# ── Holidays ────────────────────────────────────────────────────────

class HolidayType(str, enum.Enum):
    national = "national"
    religious = "religious"
    company = "company"
    regional = "regional"


class HolidayStatus(str, enum.Enum):
    active = "active"
    cancelled = "cancelled"


# ── Misc constants ──────────────────────────────────────────────────

TIMEZONE = "Asia/Kolkata"
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50
