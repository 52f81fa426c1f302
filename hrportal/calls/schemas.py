"""Call-tracking Pydantic v2 schemas."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrportal.common.pagination import PaginationMeta


# ── Request schemas ──────────────────────────────────────────────────

class CallDataUpsert(BaseModel):
    """Daily counters; ``employee_id`` is only honoured for admins."""

    model_config = ConfigDict(populate_by_name=True)

    total_calls: int = Field(..., ge=0)
    total_call_time: float = Field(..., ge=0, description="Minutes on calls")
    interested_students: int = Field(..., ge=0)
    visited_today: int = Field(..., ge=0)
    notes: Optional[str] = Field(None, max_length=1000)
    # field named after the type would shadow it in the class namespace
    record_date: Optional[date] = Field(None, alias="date")
    employee_id: Optional[uuid.UUID] = None


class CallDataUpdate(BaseModel):
    total_calls: Optional[int] = Field(None, ge=0)
    total_call_time: Optional[float] = Field(None, ge=0)
    interested_students: Optional[int] = Field(None, ge=0)
    visited_today: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=1000)


# ── Response schemas ─────────────────────────────────────────────────

class CallDataOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_id: uuid.UUID
    date: date
    total_calls: int
    total_call_time: float
    interested_students: int
    visited_today: int
    performance_score: float
    notes: str = ""
    updated_by: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CallDataUpsertResponse(BaseModel):
    message: str
    created: bool
    call_data: CallDataOut


class CallDataListResponse(BaseModel):
    data: list[CallDataOut]
    meta: PaginationMeta


class EmployeePerformance(BaseModel):
    employee_id: uuid.UUID
    name: Optional[str] = None
    employee_code: Optional[str] = None
    department: Optional[str] = None
    total_calls: int = 0
    total_call_time: float = 0.0
    total_interested_students: int = 0
    total_visited: int = 0
    performance_score: float = 0.0
    record_count: int = 0


class OverallPerformance(BaseModel):
    total_employees_tracked: int = 0
    total_calls: int = 0
    total_call_time: float = 0.0
    total_interested_students: int = 0
    total_visited: int = 0
    average_performance_score: float = 0.0


class PerformanceStatsOut(BaseModel):
    top_performer: Optional[EmployeePerformance] = None
    performance_data: list[EmployeePerformance]
    overall_stats: OverallPerformance
