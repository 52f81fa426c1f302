"""Common module — shared utilities for the HR portal."""

from hrportal.common.clock import Clock, FixedClock, SystemClock
from hrportal.common.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TIMEZONE,
    AttendanceStatus,
    EmploymentStatus,
    HalfDayPeriod,
    HolidayStatus,
    HolidayType,
    LeaveStatus,
    LeaveType,
    UserRole,
    WorkLocation,
)
from hrportal.common.exceptions import (
    AlreadyClockedOutError,
    AppException,
    AuthorizationError,
    CheckedOutError,
    ConflictError,
    DuplicateClockInError,
    DuplicateEmployeeError,
    DuplicateRecordConflict,
    DuplicateRecordError,
    InvalidRangeError,
    InvalidTransitionError,
    NotClockedInError,
    NotFoundException,
    OverlappingLeaveError,
    PastDateError,
    StateTransitionError,
    ValidationError,
    register_exception_handlers,
)
from hrportal.common.pagination import (
    PaginationMeta,
    PaginationParams,
    build_meta,
    paginate,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    # Constants / Enums
    "AttendanceStatus",
    "EmploymentStatus",
    "HalfDayPeriod",
    "HolidayStatus",
    "HolidayType",
    "LeaveStatus",
    "LeaveType",
    "UserRole",
    "WorkLocation",
    "TIMEZONE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    # Exceptions
    "AlreadyClockedOutError",
    "AppException",
    "AuthorizationError",
    "CheckedOutError",
    "ConflictError",
    "DuplicateClockInError",
    "DuplicateEmployeeError",
    "DuplicateRecordConflict",
    "DuplicateRecordError",
    "InvalidRangeError",
    "InvalidTransitionError",
    "NotClockedInError",
    "NotFoundException",
    "OverlappingLeaveError",
    "PastDateError",
    "StateTransitionError",
    "ValidationError",
    "register_exception_handlers",
    # Pagination
    "PaginationMeta",
    "PaginationParams",
    "build_meta",
    "paginate",
]
