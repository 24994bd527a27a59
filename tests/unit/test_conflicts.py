"""
Unit tests for interval overlap and conflict detection.

Run: pytest tests/unit/test_conflicts.py -v
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from scheduling.conflicts import (
    SchedulingValidationError,
    TimeWindow,
    find_conflicts,
    overlaps,
    to_naive_utc,
    validate_interval,
)


@dataclass
class FakeInterview:
    id: int
    scheduled_at: datetime
    duration: int = 60
    status: str = "scheduled"


def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    return datetime(2026, 3, day, hour, minute)


# ---------------------------------------------------------------------------
# overlaps
# ---------------------------------------------------------------------------

class TestOverlaps:

    def test_partial_overlap(self):
        a = TimeWindow.from_duration(at(10), 60)
        b = TimeWindow.from_duration(at(10, 30), 60)
        assert overlaps(a, b)

    def test_is_symmetric(self):
        a = TimeWindow.from_duration(at(9), 90)
        b = TimeWindow.from_duration(at(10), 30)
        c = TimeWindow.from_duration(at(13), 30)
        assert overlaps(a, b) == overlaps(b, a)
        assert overlaps(a, c) == overlaps(c, a)

    def test_touching_windows_do_not_overlap(self):
        a = TimeWindow.from_duration(at(10), 60)
        b = TimeWindow.from_duration(at(11), 60)
        assert not overlaps(a, b)
        assert not overlaps(b, a)

    def test_containment_overlaps(self):
        outer = TimeWindow.from_duration(at(9), 180)
        inner = TimeWindow.from_duration(at(10), 15)
        assert overlaps(outer, inner)

    def test_widened_window(self):
        window = TimeWindow.from_duration(at(10), 60).widened(15)
        assert window.start == at(9, 45)
        assert window.end == at(11, 15)


# ---------------------------------------------------------------------------
# find_conflicts
# ---------------------------------------------------------------------------

class TestFindConflicts:

    def test_reports_overlapping_interview(self):
        existing = [FakeInterview(id=1, scheduled_at=at(10))]
        check = find_conflicts(at(10, 30), 60, existing)

        assert check.has_conflict
        assert [i.id for i in check.conflicts] == [1]
        assert check.conflict_type == "overlapping"

    def test_back_to_back_is_not_a_conflict_without_buffer(self):
        existing = [FakeInterview(id=1, scheduled_at=at(10))]
        check = find_conflicts(at(11), 60, existing)

        assert not check.has_conflict
        assert check.conflicts == []
        assert check.conflict_type is None

    def test_cancelled_interviews_are_ignored(self):
        existing = [FakeInterview(id=1, scheduled_at=at(10), status="cancelled")]
        assert not find_conflicts(at(10), 60, existing).has_conflict

    def test_excluded_interview_is_ignored(self):
        existing = [FakeInterview(id=7, scheduled_at=at(10))]
        check = find_conflicts(at(10, 15), 60, existing, exclude_interview_id=7)
        assert not check.has_conflict

    def test_conflicts_sorted_by_start(self):
        existing = [
            FakeInterview(id=2, scheduled_at=at(11)),
            FakeInterview(id=1, scheduled_at=at(9, 30)),
            FakeInterview(id=3, scheduled_at=at(15)),
        ]
        check = find_conflicts(at(10), 90, existing)
        assert [i.id for i in check.conflicts] == [1, 2]

    def test_buffer_reports_back_to_back(self):
        existing = [FakeInterview(id=1, scheduled_at=at(10))]
        check = find_conflicts(at(11, 10), 30, existing, buffer_minutes=15)

        assert check.has_conflict
        assert check.conflict_type == "back_to_back"

    def test_buffer_with_true_overlap_reports_overlapping(self):
        existing = [
            FakeInterview(id=1, scheduled_at=at(10)),
            FakeInterview(id=2, scheduled_at=at(12)),
        ]
        check = find_conflicts(at(11, 30), 60, existing, buffer_minutes=15)

        assert [i.id for i in check.conflicts] == [2]
        assert check.conflict_type == "overlapping"

    def test_non_positive_duration_rejected(self):
        with pytest.raises(SchedulingValidationError):
            find_conflicts(at(10), 0, [])


# ---------------------------------------------------------------------------
# validation helpers
# ---------------------------------------------------------------------------

class TestValidation:

    def test_past_start_rejected_when_disallowed(self):
        with pytest.raises(SchedulingValidationError):
            validate_interval(at(9), 30, now=at(10), allow_past=False)

    def test_past_start_allowed_by_default(self):
        validate_interval(at(9), 30, now=at(10))

    def test_negative_duration_rejected(self):
        with pytest.raises(SchedulingValidationError):
            validate_interval(at(11), -5, now=at(10))

    def test_validation_error_is_a_value_error(self):
        assert issubclass(SchedulingValidationError, ValueError)

    def test_aware_datetimes_become_naive_utc(self):
        aware = datetime(2026, 3, 10, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 3, 10, 10, 0)

    def test_naive_datetimes_pass_through(self):
        assert to_naive_utc(at(10)) == at(10)
