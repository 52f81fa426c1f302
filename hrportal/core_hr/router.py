"""Employee directory router.

Routes:
    /employees                    — List (admin), create (admin)
    /employees/search             — Quick search of active employees (admin)
    /employees/me                 — Caller's own profile
    /employees/departments/stats  — Active head-count per department (admin)
    /employees/{id}               — Get (owner or admin), update / deactivate (admin)
"""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrportal.auth.dependencies import get_current_actor, require_admin
from hrportal.auth.schemas import Actor
from hrportal.common.clock import Clock
from hrportal.common.constants import EmploymentStatus
from hrportal.common.pagination import PaginationParams
from hrportal.core_hr.schemas import (
    DepartmentStat,
    EmployeeCreate,
    EmployeeListResponse,
    EmployeeOut,
    EmployeeSummary,
    EmployeeUpdate,
)
from hrportal.core_hr.service import EmployeeService
from hrportal.dependencies import get_clock, get_store
from hrportal.storage import Store

router = APIRouter()


@router.get("/", response_model=EmployeeListResponse)
async def list_employees(
    search: Optional[str] = Query(None, description="Search by name, email, or employee code"),
    department: Optional[str] = Query(None),
    status: Optional[EmploymentStatus] = Query(None),
    pagination: PaginationParams = Depends(),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await EmployeeService.list_employees(
        store,
        search=search,
        department=department,
        status=status,
        page=pagination.page,
        page_size=pagination.page_size,
    )


# NOTE: fixed paths must be declared before /{employee_id}.

@router.get("/search", response_model=list[EmployeeSummary])
async def search_employees(
    q: str = Query("", description="At least 2 characters"),
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await EmployeeService.search_employees(store, q)


@router.get("/me", response_model=EmployeeOut)
async def my_profile(
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await EmployeeService.get_me(store, actor)


@router.get("/departments/stats", response_model=list[DepartmentStat])
async def department_stats(
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await EmployeeService.department_stats(store)


@router.post("/", response_model=EmployeeOut, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    return await EmployeeService.create_employee(store, actor, clock, body)


@router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee(
    employee_id: uuid.UUID,
    actor: Actor = Depends(get_current_actor),
    store: Store = Depends(get_store),
):
    return await EmployeeService.get_employee(store, actor, employee_id)


@router.put("/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await EmployeeService.update_employee(store, actor, employee_id, body)


@router.delete("/{employee_id}", response_model=EmployeeOut)
async def deactivate_employee(
    employee_id: uuid.UUID,
    actor: Actor = Depends(require_admin),
    store: Store = Depends(get_store),
):
    return await EmployeeService.deactivate_employee(store, actor, employee_id)
