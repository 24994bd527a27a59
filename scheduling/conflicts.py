"""
Interview conflict detection and alternative slot suggestion.

Intervals are half-open: an interview occupies `[start, start + duration)`,
so an interview ending at 11:00 and one starting at 11:00 do not conflict.
Cancelled interviews never take part in a comparison.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

CANCELLED = "cancelled"


class SchedulingValidationError(ValueError):
    """Raised for an unusable interval or suggestion request."""


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime

    @classmethod
    def from_duration(cls, start: datetime, minutes: int) -> "TimeWindow":
        return cls(start=start, end=start + timedelta(minutes=minutes))

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if this window overlaps with another."""
        return self.start < other.end and other.start < self.end

    def widened(self, minutes: int) -> "TimeWindow":
        delta = timedelta(minutes=minutes)
        return TimeWindow(start=self.start - delta, end=self.end + delta)


@dataclass
class ConflictCheck:
    """Result of checking a proposed slot against existing interviews."""
    has_conflict: bool
    conflicts: List[Any] = field(default_factory=list)
    conflict_type: Optional[str] = None  # "overlapping" | "back_to_back"


def overlaps(a: TimeWindow, b: TimeWindow) -> bool:
    return a.overlaps(b)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_interval(
    scheduled_at: datetime,
    duration: int,
    now: Optional[datetime] = None,
    allow_past: bool = True,
) -> None:
    """
    Validate a proposed interview interval.

    Args:
        scheduled_at: Proposed start (naive UTC)
        duration: Length in minutes
        now: Reference time for the past-start check
        allow_past: Whether a start before `now` is acceptable

    Raises:
        SchedulingValidationError: If duration is not positive or the start is in the past
    """
    if duration is None or duration <= 0:
        raise SchedulingValidationError(f"Duration must be positive, got {duration}")

    if not allow_past:
        reference = now or datetime.utcnow()
        if scheduled_at < reference:
            raise SchedulingValidationError(
                f"Cannot schedule an interview in the past ({scheduled_at.isoformat()})"
            )


def _window_of(interview: Any) -> TimeWindow:
    return TimeWindow.from_duration(interview.scheduled_at, interview.duration)


def _active(interviews: Iterable[Any], exclude_interview_id: Optional[int] = None) -> List[Any]:
    return [
        i for i in interviews
        if i.status != CANCELLED
        and (exclude_interview_id is None or i.id != exclude_interview_id)
    ]


def find_conflicts(
    scheduled_at: datetime,
    duration: int,
    interviews: Iterable[Any],
    buffer_minutes: int = 0,
    exclude_interview_id: Optional[int] = None,
) -> ConflictCheck:
    """
    Find existing interviews that collide with a proposed slot.

    Args:
        scheduled_at: Proposed start
        duration: Proposed length in minutes
        interviews: Employer's interviews (anything with id, scheduled_at, duration, status)
        buffer_minutes: Required gap around the slot; interviews that only fall
            inside the gap are reported as "back_to_back"
        exclude_interview_id: Interview being rescheduled, ignored in the check

    Returns:
        ConflictCheck with the colliding interviews in start order
    """
    if duration <= 0:
        raise SchedulingValidationError(f"Duration must be positive, got {duration}")

    proposed = TimeWindow.from_duration(scheduled_at, duration)
    guarded = proposed.widened(buffer_minutes) if buffer_minutes > 0 else proposed

    conflicts = []
    has_overlap = False
    for interview in _active(interviews, exclude_interview_id):
        window = _window_of(interview)
        if not guarded.overlaps(window):
            continue
        conflicts.append(interview)
        if proposed.overlaps(window):
            has_overlap = True

    if not conflicts:
        return ConflictCheck(has_conflict=False)

    conflicts.sort(key=lambda i: i.scheduled_at)
    return ConflictCheck(
        has_conflict=True,
        conflicts=conflicts,
        conflict_type="overlapping" if has_overlap else "back_to_back",
    )


def suggest_slots(
    preferred_date: datetime,
    duration: int,
    interviews: Iterable[Any],
    number_of_suggestions: int = 5,
    day_start_hour: int = 9,
    day_end_hour: int = 17,
    step_minutes: int = 30,
    max_days: int = 14,
    buffer_minutes: int = 0,
    not_before: Optional[datetime] = None,
) -> List[datetime]:
    """
    Propose conflict-free interview start times.

    Steps through the business window of the preferred day in fixed
    increments, then through the following days, collecting the first
    starts that fit before closing time and collide with nothing.

    Args:
        preferred_date: Day (and earliest time) to start searching from
        duration: Interview length in minutes
        interviews: Employer's existing interviews
        number_of_suggestions: Maximum number of starts to return
        day_start_hour: Opening hour of the business window
        day_end_hour: Closing hour; a slot must end by then
        step_minutes: Increment between candidate starts
        max_days: Number of days searched, the preferred day included
        buffer_minutes: Required gap to existing interviews
        not_before: Extra lower bound, usually "now"

    Returns:
        Up to `number_of_suggestions` starts in chronological order
    """
    if duration <= 0:
        raise SchedulingValidationError(f"Duration must be positive, got {duration}")
    if number_of_suggestions <= 0:
        raise SchedulingValidationError(
            f"number_of_suggestions must be positive, got {number_of_suggestions}"
        )
    if step_minutes <= 0:
        raise SchedulingValidationError(f"step_minutes must be positive, got {step_minutes}")
    if not 0 <= day_start_hour < day_end_hour <= 24:
        raise SchedulingValidationError(
            f"Invalid business window {day_start_hour}:00-{day_end_hour}:00"
        )

    earliest = preferred_date
    if not_before is not None and not_before > earliest:
        earliest = not_before

    busy = [_window_of(i) for i in _active(interviews)]
    step = timedelta(minutes=step_minutes)
    length = timedelta(minutes=duration)
    suggestions: List[datetime] = []

    for offset in range(max_days):
        day = earliest.date() + timedelta(days=offset)
        opening = datetime.combine(day, time(day_start_hour), tzinfo=earliest.tzinfo)
        closing = opening + timedelta(hours=day_end_hour - day_start_hour)

        slot = opening
        while slot + length <= closing:
            if slot >= earliest:
                window = TimeWindow(slot, slot + length)
                guarded = window.widened(buffer_minutes) if buffer_minutes > 0 else window
                if not any(guarded.overlaps(b) for b in busy):
                    suggestions.append(slot)
                    if len(suggestions) == number_of_suggestions:
                        return suggestions
            slot += step

    logger.info(
        f"Found {len(suggestions)}/{number_of_suggestions} free slots within {max_days} days "
        f"from {earliest.isoformat()}"
    )
    return suggestions
