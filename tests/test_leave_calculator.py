"""Leave day counting, overlap detection and status transition table."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from hrportal.common.constants import LeaveStatus
from hrportal.common.exceptions import (
    InvalidRangeError,
    InvalidTransitionError,
    PastDateError,
    StateTransitionError,
    ValidationError,
)
from hrportal.leave.calculator import (
    apply_transition,
    check_overlap,
    compute_duration,
    ensure_not_past,
    ensure_transition,
    validate_reason,
)

EMP = uuid.uuid4()
KOLKATA = ZoneInfo("Asia/Kolkata")
_MORNING = datetime(2024, 1, 15, 4, 30, tzinfo=timezone.utc)  # 10:00 local


@dataclass
class _Leave:
    start_date: date
    end_date: date
    status: LeaveStatus = LeaveStatus.approved
    employee_id: uuid.UUID = EMP
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    reviewed_by: uuid.UUID | None = None
    reviewed_at: datetime | None = None
    updated_at: datetime | None = None


class TestComputeDuration:

    def test_inclusive_day_count(self):
        assert compute_duration(date(2024, 1, 20), date(2024, 1, 25), False) == 6

    def test_same_day_is_one(self):
        assert compute_duration(date(2024, 3, 1), date(2024, 3, 1)) == 1

    def test_half_day_overrides_range(self):
        assert compute_duration(date(2024, 1, 20), date(2024, 1, 22), True) == Decimal("0.5")

    def test_spans_month_and_leap_day(self):
        assert compute_duration(date(2024, 2, 27), date(2024, 3, 2)) == 5

    def test_time_of_day_is_ignored(self):
        start = datetime(2024, 1, 20, 23, 0, tzinfo=timezone.utc)
        end = datetime(2024, 1, 22, 1, 0, tzinfo=timezone.utc)
        assert compute_duration(start, end) == 3

    def test_end_before_start_raises(self):
        with pytest.raises(InvalidRangeError):
            compute_duration(date(2024, 1, 25), date(2024, 1, 20))

    def test_invalid_range_is_validation_error(self):
        with pytest.raises(ValidationError):
            compute_duration(date(2024, 1, 25), date(2024, 1, 24), True)


class TestCheckOverlap:

    existing = [_Leave(date(2024, 1, 20), date(2024, 1, 25))]

    def test_contained_range_overlaps(self):
        assert check_overlap(EMP, date(2024, 1, 22), date(2024, 1, 23), self.existing)

    def test_adjacent_range_does_not_overlap(self):
        assert not check_overlap(EMP, date(2024, 1, 26), date(2024, 1, 27), self.existing)

    def test_shared_boundary_day_overlaps(self):
        assert check_overlap(EMP, date(2024, 1, 25), date(2024, 1, 26), self.existing)
        assert check_overlap(EMP, date(2024, 1, 18), date(2024, 1, 20), self.existing)

    def test_enclosing_range_overlaps(self):
        assert check_overlap(EMP, date(2024, 1, 1), date(2024, 1, 31), self.existing)

    def test_rejected_and_cancelled_do_not_block(self):
        existing = [
            _Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.rejected),
            _Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.cancelled),
        ]
        assert not check_overlap(EMP, date(2024, 1, 21), date(2024, 1, 21), existing)

    def test_pending_blocks(self):
        existing = [_Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.pending)]
        assert check_overlap(EMP, date(2024, 1, 21), date(2024, 1, 21), existing)

    def test_other_employee_ignored(self):
        assert not check_overlap(uuid.uuid4(), date(2024, 1, 22), date(2024, 1, 23), self.existing)

    def test_exclude_id_skips_self(self):
        own = self.existing[0]
        assert not check_overlap(
            EMP, date(2024, 1, 21), date(2024, 1, 24), self.existing, exclude_id=own.id,
        )


class TestTransitions:

    def test_pending_to_approved_stamps_reviewer(self):
        leave = _Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.pending)
        reviewer = uuid.uuid4()
        now = datetime(2024, 1, 16, tzinfo=timezone.utc)

        apply_transition(leave, LeaveStatus.approved, reviewer, now)

        assert leave.status == LeaveStatus.approved
        assert leave.reviewed_by == reviewer
        assert leave.reviewed_at == now

    def test_second_approve_fails(self):
        leave = _Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.pending)
        apply_transition(leave, LeaveStatus.approved, uuid.uuid4(), datetime.now(timezone.utc))
        with pytest.raises(InvalidTransitionError):
            apply_transition(leave, LeaveStatus.approved, uuid.uuid4(), datetime.now(timezone.utc))

    def test_approve_rejected_is_state_transition_error(self):
        with pytest.raises(StateTransitionError):
            ensure_transition(LeaveStatus.rejected, LeaveStatus.approved)

    @pytest.mark.parametrize(
        "current,target",
        [
            (LeaveStatus.approved, LeaveStatus.rejected),
            (LeaveStatus.cancelled, LeaveStatus.approved),
            (LeaveStatus.pending, LeaveStatus.cancelled),
            (LeaveStatus.pending, LeaveStatus.pending),
        ],
    )
    def test_illegal_transitions(self, current, target):
        with pytest.raises(InvalidTransitionError):
            ensure_transition(current, target)

    def test_failed_transition_leaves_record_untouched(self):
        leave = _Leave(date(2024, 1, 20), date(2024, 1, 25), status=LeaveStatus.rejected)
        with pytest.raises(InvalidTransitionError):
            apply_transition(leave, LeaveStatus.approved, uuid.uuid4(), datetime.now(timezone.utc))
        assert leave.status == LeaveStatus.rejected
        assert leave.reviewed_by is None


class TestValidation:

    def test_reason_is_stripped(self):
        assert validate_reason("  Family function  ") == "Family function"

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reason_required(self, reason):
        with pytest.raises(ValidationError) as exc:
            validate_reason(reason)
        assert "reason" in exc.value.errors

    def test_reason_max_length(self):
        validate_reason("x" * 500)
        with pytest.raises(ValidationError):
            validate_reason("x" * 501)

    def test_past_start_rejected(self):
        with pytest.raises(PastDateError):
            ensure_not_past(date(2024, 1, 14), _MORNING, KOLKATA)

    def test_today_rejected_once_the_day_has_begun(self):
        with pytest.raises(PastDateError):
            ensure_not_past(date(2024, 1, 15), _MORNING, KOLKATA)

    def test_tomorrow_allowed(self):
        ensure_not_past(date(2024, 1, 16), _MORNING, KOLKATA)

    def test_today_allowed_at_local_midnight(self):
        midnight = datetime(2024, 1, 15, tzinfo=KOLKATA)
        ensure_not_past(date(2024, 1, 15), midnight, KOLKATA)

    def test_local_day_decides_not_utc_day(self):
        # 20:00 UTC on the 15th is already the 16th in Kolkata
        late = datetime(2024, 1, 15, 20, 0, tzinfo=timezone.utc)
        with pytest.raises(PastDateError):
            ensure_not_past(date(2024, 1, 16), late, KOLKATA)
        ensure_not_past(date(2024, 1, 17), late, KOLKATA)
