"""Attendance lifecycle tests — service layer and HTTP endpoints."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from hrportal.attendance.schemas import AttendanceUpdate, ManualAttendanceCreate
from hrportal.attendance.service import AttendanceService
from hrportal.common.constants import AttendanceStatus, WorkLocation
from hrportal.common.exceptions import (
    AlreadyClockedOutError,
    ConflictError,
    DuplicateClockInError,
    InvalidRangeError,
    NotClockedInError,
    NotFoundException,
)
from tests.conftest import NOW, TODAY, _add_employee


def _at(hour: int, minute: int = 0) -> datetime:
    """UTC instant for an IST wall-clock time on TODAY."""
    return datetime(2024, 1, 15, hour, minute, tzinfo=timezone.utc) - timedelta(hours=5, minutes=30)


# ═════════════════════════════════════════════════════════════════════
# Service layer
# ═════════════════════════════════════════════════════════════════════


class TestClockIn:

    async def test_creates_present_record_for_local_today(self, store, clock, employee_actor):
        result = await AttendanceService.clock_in(store, employee_actor, clock)

        assert result.message == "Clocked in successfully"
        assert result.attendance.date == TODAY
        assert result.attendance.clock_in == NOW
        assert result.attendance.clock_out is None
        assert result.attendance.status == AttendanceStatus.present
        assert result.attendance.total_hours == 0

    async def test_second_clock_in_conflicts_and_keeps_first(self, store, clock, employee_actor):
        first = await AttendanceService.clock_in(store, employee_actor, clock)
        clock.advance(timedelta(hours=1))

        with pytest.raises(DuplicateClockInError) as exc:
            await AttendanceService.clock_in(store, employee_actor, clock, WorkLocation.remote)

        assert isinstance(exc.value, ConflictError)
        assert exc.value.extra["existing_record"]["id"] == str(first.attendance.id)
        assert exc.value.extra["existing_record"]["can_clock_out"] is True

        records = await store.attendance.list(employee_id=employee_actor.employee_id)
        assert len(records) == 1
        assert records[0].clock_in == NOW
        assert records[0].location == WorkLocation.office

    async def test_clock_in_after_clock_out_still_conflicts(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        await AttendanceService.clock_out(store, employee_actor, clock)

        with pytest.raises(DuplicateClockInError) as exc:
            await AttendanceService.clock_in(store, employee_actor, clock)
        assert exc.value.extra["existing_record"]["can_clock_out"] is False

    async def test_local_midnight_starts_a_new_day(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        # 2024-01-16 00:30 IST
        clock.advance(timedelta(hours=14, minutes=30))

        result = await AttendanceService.clock_in(store, employee_actor, clock)
        assert result.attendance.date == date(2024, 1, 16)


class TestClockOut:

    async def test_full_day_is_present_with_overtime(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        clock.advance(timedelta(hours=8, minutes=30))

        result = await AttendanceService.clock_out(store, employee_actor, clock)

        assert result.total_hours == 8.5
        assert result.overtime_hours == 0.5
        assert result.attendance.status == AttendanceStatus.present
        assert result.attendance.clock_out == NOW + timedelta(hours=8, minutes=30)

    async def test_short_day_is_half_day(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        clock.advance(timedelta(hours=5))

        result = await AttendanceService.clock_out(store, employee_actor, clock)
        assert result.attendance.status == AttendanceStatus.half_day
        assert result.overtime_hours == 0

    async def test_very_short_day_is_late(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        clock.advance(timedelta(hours=2))

        result = await AttendanceService.clock_out(store, employee_actor, clock)
        assert result.attendance.status == AttendanceStatus.late

    async def test_without_clock_in(self, store, clock, employee_actor):
        with pytest.raises(NotClockedInError):
            await AttendanceService.clock_out(store, employee_actor, clock)

    async def test_twice(self, store, clock, employee_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        await AttendanceService.clock_out(store, employee_actor, clock)
        with pytest.raises(AlreadyClockedOutError):
            await AttendanceService.clock_out(store, employee_actor, clock)


class TestReads:

    async def test_today_before_and_after_clock_in(self, store, clock, employee_actor):
        before = await AttendanceService.get_today(store, employee_actor, clock)
        assert before.clocked_in is False
        assert before.attendance is None

        await AttendanceService.clock_in(store, employee_actor, clock)
        after = await AttendanceService.get_today(store, employee_actor, clock)
        assert after.clocked_in is True
        assert after.can_clock_out is True

    async def test_list_all_rejects_inverted_range(self, store):
        with pytest.raises(InvalidRangeError):
            await AttendanceService.list_all(store, date(2024, 1, 31), date(2024, 1, 1))

    async def test_list_my_only_returns_own_rows(self, store, clock, employee_actor, admin_actor):
        await AttendanceService.clock_in(store, employee_actor, clock)
        await AttendanceService.clock_in(store, admin_actor, clock)

        result = await AttendanceService.list_my(store, employee_actor)
        assert result.meta.total == 1
        assert result.data[0].employee_id == employee_actor.employee_id

    async def test_stats_for_today(self, store, clock, employee_actor, admin_actor):
        await _add_employee(store, name="No Show")
        await AttendanceService.clock_in(store, employee_actor, clock)
        await AttendanceService.clock_in(store, admin_actor, clock)

        stats = await AttendanceService.get_stats(store, clock)
        assert stats.total_employees == 3
        assert stats.today_attendance == 2
        assert stats.present_today == 2
        assert stats.absent_today == 1

    async def test_monthly_summary(self, store, clock, admin_actor, employee):
        for day, hours in ((2, 9.0), (3, 8.0), (4, 5.0)):
            start = datetime(2024, 1, day, 4, 0, tzinfo=timezone.utc)
            await AttendanceService.create_manual(store, admin_actor, clock, ManualAttendanceCreate(
                employee_id=employee.id,
                date=date(2024, 1, day),
                status=AttendanceStatus.absent,
                clock_in=start,
                clock_out=start + timedelta(hours=hours),
            ))

        summary = await AttendanceService.get_monthly_summary(store, employee.id, 2024, 1)
        assert summary.total_days == 3
        assert summary.present_days == 2
        assert summary.total_hours == 22.0
        assert summary.overtime_hours == 1.0
        assert summary.avg_hours_per_day == pytest.approx(7.33)

    async def test_monthly_summary_empty_month(self, store, employee):
        summary = await AttendanceService.get_monthly_summary(store, employee.id, 2024, 2)
        assert summary.total_days == 0
        assert summary.avg_hours_per_day == 0


class TestAdminWrites:

    async def test_manual_entry_derives_hours(self, store, clock, admin_actor, employee):
        record = await AttendanceService.create_manual(store, admin_actor, clock, ManualAttendanceCreate(
            employee_id=employee.id,
            date=date(2024, 1, 10),
            status=AttendanceStatus.absent,
            clock_in=_at(9),
            clock_out=_at(18),
            break_start=_at(13),
            break_end=_at(14),
        ))
        assert record.is_manual_entry is True
        assert record.total_hours == pytest.approx(8.0)
        assert record.status == AttendanceStatus.present

    async def test_manual_entry_without_times_keeps_status(self, store, clock, admin_actor, employee):
        record = await AttendanceService.create_manual(store, admin_actor, clock, ManualAttendanceCreate(
            employee_id=employee.id,
            date=date(2024, 1, 10),
            status=AttendanceStatus.holiday,
        ))
        assert record.status == AttendanceStatus.holiday
        assert record.total_hours == 0

    async def test_manual_entry_duplicate_day_conflicts(self, store, clock, admin_actor, employee):
        data = ManualAttendanceCreate(
            employee_id=employee.id, date=date(2024, 1, 10), status=AttendanceStatus.absent,
        )
        await AttendanceService.create_manual(store, admin_actor, clock, data)
        with pytest.raises(ConflictError):
            await AttendanceService.create_manual(store, admin_actor, clock, data)

    async def test_manual_entry_unknown_employee(self, store, clock, admin_actor):
        with pytest.raises(NotFoundException):
            await AttendanceService.create_manual(store, admin_actor, clock, ManualAttendanceCreate(
                employee_id=uuid.uuid4(), date=TODAY, status=AttendanceStatus.absent,
            ))

    async def test_update_rederives(self, store, clock, employee_actor, admin_actor):
        clocked = await AttendanceService.clock_in(store, employee_actor, clock)

        updated = await AttendanceService.update_record(
            store, admin_actor, clock, clocked.attendance.id,
            AttendanceUpdate(clock_out=NOW + timedelta(hours=10)),
        )
        assert updated.total_hours == pytest.approx(10)
        assert updated.overtime_hours == pytest.approx(2)
        assert updated.status == AttendanceStatus.present

        stored = await store.attendance.get(clocked.attendance.id)
        assert stored.updated_by == admin_actor.employee_id

    async def test_delete(self, store, clock, employee_actor):
        clocked = await AttendanceService.clock_in(store, employee_actor, clock)
        await AttendanceService.delete_record(store, clocked.attendance.id)
        assert await store.attendance.get(clocked.attendance.id) is None

        with pytest.raises(NotFoundException):
            await AttendanceService.delete_record(store, clocked.attendance.id)


# ═════════════════════════════════════════════════════════════════════
# HTTP endpoints
# ═════════════════════════════════════════════════════════════════════


class TestAttendanceEndpoints:

    async def test_clock_in_and_out(self, client, auth_headers, clock):
        resp = await client.post("/api/v1/attendance/clock-in", headers=auth_headers)
        assert resp.status_code == 201
        assert resp.json()["attendance"]["date"] == "2024-01-15"

        clock.advance(timedelta(hours=8))
        resp = await client.post("/api/v1/attendance/clock-out", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_hours"] == 8.0
        assert body["attendance"]["status"] == "present"

    async def test_duplicate_clock_in_is_409_problem(self, client, auth_headers):
        await client.post("/api/v1/attendance/clock-in", headers=auth_headers)
        resp = await client.post(
            "/api/v1/attendance/clock-in",
            json={"location": "remote"},
            headers=auth_headers,
        )
        assert resp.status_code == 409
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["type"].endswith("/already-clocked-in")
        assert body["existing_record"]["can_clock_out"] is True

    async def test_clock_out_without_clock_in_is_409(self, client, auth_headers):
        resp = await client.post("/api/v1/attendance/clock-out", headers=auth_headers)
        assert resp.status_code == 409
        assert resp.json()["type"].endswith("/not-clocked-in")

    async def test_admin_routes_forbidden_to_employee(self, client, auth_headers):
        for path in ("/api/v1/attendance/all", "/api/v1/attendance/stats"):
            resp = await client.get(path, headers=auth_headers)
            assert resp.status_code == 403

    async def test_summary_for_other_employee_forbidden(self, client, auth_headers, admin):
        resp = await client.get(
            "/api/v1/attendance/summary",
            params={"year": 2024, "month": 1, "employee_id": str(admin.id)},
            headers=auth_headers,
        )
        assert resp.status_code == 403

    async def test_admin_manual_entry_and_list(self, client, admin_headers, employee):
        resp = await client.post(
            "/api/v1/attendance/manual",
            json={
                "employee_id": str(employee.id),
                "date": "2024-01-12",
                "status": "absent",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201

        resp = await client.get(
            "/api/v1/attendance/all",
            params={"employee_id": str(employee.id)},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["meta"]["total"] == 1

    async def test_admin_delete(self, client, auth_headers, admin_headers):
        created = await client.post("/api/v1/attendance/clock-in", headers=auth_headers)
        record_id = created.json()["attendance"]["id"]

        resp = await client.delete(f"/api/v1/attendance/{record_id}", headers=admin_headers)
        assert resp.status_code == 204

        resp = await client.get("/api/v1/attendance/today", headers=auth_headers)
        assert resp.json()["clocked_in"] is False
