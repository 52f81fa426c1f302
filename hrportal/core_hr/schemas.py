"""Employee directory Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update  → request bodies (write)
  - *Out               → response bodies (read)
  - *Summary           → compact read representation for search results
"""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hrportal.common.constants import EmploymentStatus, UserRole
from hrportal.common.pagination import PaginationMeta


# ═════════════════════════════════════════════════════════════════════
# Write schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeCreate(BaseModel):
    """Payload for adding an employee; the code is generated when omitted."""

    employee_code: Optional[str] = Field(None, min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    department: str = Field(..., min_length=1, max_length=100)
    position: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.employee
    start_date: Optional[date] = None


class EmployeeUpdate(BaseModel):
    """Partial update — all fields optional."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    position: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    status: Optional[EmploymentStatus] = None
    start_date: Optional[date] = None


# ═════════════════════════════════════════════════════════════════════
# Read schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee_code: str
    name: str
    email: str
    department: Optional[str] = None
    position: Optional[str] = None


class EmployeeOut(EmployeeSummary):
    role: UserRole
    status: EmploymentStatus
    start_date: Optional[date] = None
    created_at: Optional[datetime] = None


class EmployeeListResponse(BaseModel):
    data: list[EmployeeOut]
    meta: PaginationMeta


class DepartmentStat(BaseModel):
    department: Optional[str] = None
    employee_count: int = 0
