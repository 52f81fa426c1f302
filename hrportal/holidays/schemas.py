"""Holiday calendar Pydantic v2 schemas."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrportal.common.constants import HolidayStatus, HolidayType
from hrportal.common.pagination import PaginationMeta


class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=500)
    date: date
    type: HolidayType = HolidayType.company
    is_recurring: bool = False
    is_office_closed: bool = True


class HolidayUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=500)
    holiday_date: Optional[date] = Field(None, alias="date")
    type: Optional[HolidayType] = None
    is_recurring: Optional[bool] = None
    is_office_closed: Optional[bool] = None
    status: Optional[HolidayStatus] = None


class HolidayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    date: date
    type: HolidayType
    is_recurring: bool = False
    is_office_closed: bool = True
    status: HolidayStatus
    added_by: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HolidayListResponse(BaseModel):
    data: list[HolidayOut]
    meta: PaginationMeta


class HolidayStatsOut(BaseModel):
    year: int
    total_holidays: int = 0
    upcoming_holidays: int = 0
    by_type: dict[HolidayType, int] = Field(default_factory=dict)
