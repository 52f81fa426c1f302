"""Employee directory tests — service layer, SQL uniqueness and HTTP endpoints."""

from __future__ import annotations

import uuid
from datetime import date

import pytest

from hrportal.attendance.schemas import ManualAttendanceCreate
from hrportal.attendance.service import AttendanceService
from hrportal.auth.schemas import Actor
from hrportal.common.constants import AttendanceStatus, EmploymentStatus, UserRole
from hrportal.common.exceptions import (
    AuthorizationError,
    DuplicateEmployeeError,
    NotFoundException,
    ValidationError,
)
from hrportal.core_hr.schemas import EmployeeCreate, EmployeeUpdate
from hrportal.core_hr.service import EmployeeService
from tests.conftest import _add_employee


def _new(name: str = "Rahul Verma", email: str = "rahul.verma@hrportal.in", **kwargs) -> EmployeeCreate:
    payload = dict(name=name, email=email, department="Sales", position="Counsellor")
    payload.update(kwargs)
    return EmployeeCreate(**payload)


# ═════════════════════════════════════════════════════════════════════
# Create / update / deactivate
# ═════════════════════════════════════════════════════════════════════


class TestCreate:

    async def test_generates_code_and_defaults(self, store, clock, admin_actor):
        created = await EmployeeService.create_employee(
            store, admin_actor, clock, _new(email="Rahul.Verma@HRPortal.in"),
        )
        assert created.employee_code == "EMP0002"
        assert created.email == "rahul.verma@hrportal.in"
        assert created.status == EmploymentStatus.active
        assert created.role == UserRole.employee
        assert created.start_date == date(2024, 1, 15)
        assert await store.employees.get(created.id) is not None

    async def test_explicit_code_kept(self, store, clock, admin_actor):
        created = await EmployeeService.create_employee(
            store, admin_actor, clock, _new(employee_code="SALES-7"),
        )
        assert created.employee_code == "SALES-7"

    async def test_duplicate_email_ignores_case(self, store, clock, admin_actor, employee):
        with pytest.raises(DuplicateEmployeeError) as exc:
            await EmployeeService.create_employee(
                store, admin_actor, clock, _new(email=employee.email.upper()),
            )
        assert "email" in exc.value.errors
        assert await store.employees.count_all() == 2

    async def test_duplicate_code(self, store, clock, admin_actor, employee):
        with pytest.raises(DuplicateEmployeeError) as exc:
            await EmployeeService.create_employee(
                store, admin_actor, clock, _new(employee_code=employee.employee_code),
            )
        assert "employee_code" in exc.value.errors

    async def test_new_employee_can_receive_manual_attendance(
        self, store, clock, admin_actor,
    ):
        created = await EmployeeService.create_employee(store, admin_actor, clock, _new())
        record = await AttendanceService.create_manual(
            store, admin_actor, clock, ManualAttendanceCreate(
                employee_id=created.id,
                date=date(2024, 1, 12),
                status=AttendanceStatus.present,
            ),
        )
        assert record.employee_id == created.id
        assert record.is_manual_entry is True


class TestUpdate:

    async def test_partial_update(self, store, admin_actor, employee):
        updated = await EmployeeService.update_employee(
            store, admin_actor, employee.id,
            EmployeeUpdate(department="Finance", position=" Analyst "),
        )
        assert updated.department == "Finance"
        assert updated.position == "Analyst"
        assert updated.name == "Priya Sharma"

    async def test_email_taken_by_someone_else(self, store, admin_actor, employee, admin):
        with pytest.raises(DuplicateEmployeeError):
            await EmployeeService.update_employee(
                store, admin_actor, employee.id, EmployeeUpdate(email=admin.email),
            )
        stored = await store.employees.get(employee.id)
        assert stored.email != admin.email

    async def test_keeping_own_email_is_fine(self, store, admin_actor, employee):
        updated = await EmployeeService.update_employee(
            store, admin_actor, employee.id, EmployeeUpdate(email=employee.email),
        )
        assert updated.email == employee.email

    async def test_unknown(self, store, admin_actor):
        with pytest.raises(NotFoundException):
            await EmployeeService.update_employee(
                store, admin_actor, uuid.uuid4(), EmployeeUpdate(name="Ghost"),
            )

    async def test_deactivate_is_soft(self, store, admin_actor, employee):
        result = await EmployeeService.deactivate_employee(store, admin_actor, employee.id)
        assert result.status == EmploymentStatus.terminated
        assert await store.employees.get(employee.id) is not None
        assert await store.employees.count_active() == 1


# ═════════════════════════════════════════════════════════════════════
# Reads
# ═════════════════════════════════════════════════════════════════════


class TestReads:

    async def test_list_filters_and_search(self, store, employee, admin):
        await _add_employee(store, name="Rahul Verma", department="Finance")
        await _add_employee(
            store, name="Priyanka Das", status=EmploymentStatus.terminated,
        )

        everyone = await EmployeeService.list_employees(store, page_size=2)
        assert everyone.meta.total == 4
        assert everyone.meta.total_pages == 2
        assert [e.name for e in everyone.data] == ["Admin User", "Priya Sharma"]

        priyas = await EmployeeService.list_employees(store, search="  PRIYA ")
        assert {e.name for e in priyas.data} == {"Priya Sharma", "Priyanka Das"}

        active_sales = await EmployeeService.list_employees(
            store, department="Sales", status=EmploymentStatus.active,
        )
        assert [e.name for e in active_sales.data] == ["Priya Sharma"]

    async def test_search_skips_inactive(self, store, employee):
        await _add_employee(store, name="Priyanka Das", status=EmploymentStatus.terminated)
        hits = await EmployeeService.search_employees(store, "priya")
        assert [h.name for h in hits] == ["Priya Sharma"]

    @pytest.mark.parametrize("query", [None, "", " p "])
    async def test_search_needs_two_characters(self, store, query):
        with pytest.raises(ValidationError) as exc:
            await EmployeeService.search_employees(store, query)
        assert "q" in exc.value.errors

    async def test_owner_or_admin_only(self, store, employee_actor, admin_actor, admin, employee):
        own = await EmployeeService.get_employee(store, employee_actor, employee.id)
        assert own.id == employee.id
        assert (await EmployeeService.get_me(store, employee_actor)).id == employee.id

        with pytest.raises(AuthorizationError):
            await EmployeeService.get_employee(store, employee_actor, admin.id)
        seen = await EmployeeService.get_employee(store, admin_actor, employee.id)
        assert seen.name == "Priya Sharma"

    async def test_unknown_is_404_before_403(self, store, employee_actor):
        with pytest.raises(NotFoundException):
            await EmployeeService.get_employee(store, employee_actor, uuid.uuid4())

    async def test_department_stats(self, store, employee, admin):
        await _add_employee(store, name="Rahul Verma")
        await _add_employee(store, name="Gone", status=EmploymentStatus.terminated)

        stats = await EmployeeService.department_stats(store)
        assert [(s.department, s.employee_count) for s in stats] == [
            ("Sales", 2), ("Management", 1),
        ]


# ═════════════════════════════════════════════════════════════════════
# SQL store
# ═════════════════════════════════════════════════════════════════════


class TestSqlDirectory:

    async def test_duplicate_code_names_the_field(self, sql_provider, clock):
        actor = Actor(employee_id=uuid.uuid4(), role=UserRole.admin)
        async with sql_provider.open() as store:
            await EmployeeService.create_employee(store, actor, clock, _new(employee_code="EMP-1"))

        with pytest.raises(DuplicateEmployeeError) as exc:
            async with sql_provider.open() as store:
                await EmployeeService.create_employee(
                    store, actor, clock,
                    _new(name="Other", email="other@hrportal.in", employee_code="EMP-1"),
                )
        assert "employee_code" in exc.value.errors

    async def test_department_stats_over_sql(self, sql_provider, clock):
        actor = Actor(employee_id=uuid.uuid4(), role=UserRole.admin)
        async with sql_provider.open() as store:
            await EmployeeService.create_employee(store, actor, clock, _new())
            await EmployeeService.create_employee(
                store, actor, clock,
                _new(name="Anita Rao", email="anita@hrportal.in", department="Finance"),
            )
            await EmployeeService.create_employee(
                store, actor, clock, _new(name="Kiran Shah", email="kiran@hrportal.in"),
            )
            stats = await EmployeeService.department_stats(store)
        assert [(s.department, s.employee_count) for s in stats] == [
            ("Sales", 2), ("Finance", 1),
        ]


# ═════════════════════════════════════════════════════════════════════
# HTTP
# ═════════════════════════════════════════════════════════════════════


class TestEmployeeEndpoints:

    async def test_admin_creates_and_reads(self, client, admin_headers):
        resp = await client.post(
            "/api/v1/employees/",
            json={
                "name": "Rahul Verma",
                "email": "rahul.verma@hrportal.in",
                "department": "Sales",
                "position": "Counsellor",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201
        employee_id = resp.json()["id"]

        resp = await client.get(f"/api/v1/employees/{employee_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["email"] == "rahul.verma@hrportal.in"

        resp = await client.get(
            "/api/v1/employees/", params={"search": "rahul"}, headers=admin_headers,
        )
        assert resp.json()["meta"]["total"] == 1

    async def test_duplicate_email_is_409_problem(self, client, admin_headers, employee):
        resp = await client.post(
            "/api/v1/employees/",
            json={
                "name": "Copy",
                "email": employee.email,
                "department": "Sales",
                "position": "Counsellor",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 409
        assert resp.json()["type"].endswith("/duplicate-employee")

    async def test_invalid_email_is_422(self, client, admin_headers):
        resp = await client.post(
            "/api/v1/employees/",
            json={"name": "X", "email": "nope", "department": "Sales", "position": "P"},
            headers=admin_headers,
        )
        assert resp.status_code == 422
        assert "email" in resp.json()["errors"]

    async def test_me_and_access_rules(self, client, auth_headers, employee, admin):
        resp = await client.get("/api/v1/employees/me", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["id"] == str(employee.id)

        resp = await client.get(f"/api/v1/employees/{admin.id}", headers=auth_headers)
        assert resp.status_code == 403

        resp = await client.get("/api/v1/employees/", headers=auth_headers)
        assert resp.status_code == 403

    async def test_search_and_department_stats(self, client, admin_headers, employee):
        resp = await client.get(
            "/api/v1/employees/search", params={"q": "p"}, headers=admin_headers,
        )
        assert resp.status_code == 422

        resp = await client.get(
            "/api/v1/employees/search", params={"q": "priya"}, headers=admin_headers,
        )
        assert [e["id"] for e in resp.json()] == [str(employee.id)]

        resp = await client.get("/api/v1/employees/departments/stats", headers=admin_headers)
        assert resp.status_code == 200
        assert {s["department"]: s["employee_count"] for s in resp.json()} == {
            "Sales": 1, "Management": 1,
        }

    async def test_update_and_deactivate(self, client, admin_headers, employee):
        resp = await client.put(
            f"/api/v1/employees/{employee.id}",
            json={"position": "Team Lead"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["position"] == "Team Lead"

        resp = await client.delete(f"/api/v1/employees/{employee.id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "terminated"
