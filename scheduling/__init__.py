"""
Scheduling module - interview conflict detection and slot suggestion.

Pure functions over interview lists fetched by the caller; nothing here
touches the database.
"""

from scheduling.conflicts import (
    ConflictCheck,
    SchedulingValidationError,
    TimeWindow,
    find_conflicts,
    overlaps,
    suggest_slots,
    to_naive_utc,
    validate_interval,
)

__all__ = [
    "ConflictCheck",
    "SchedulingValidationError",
    "TimeWindow",
    "find_conflicts",
    "overlaps",
    "suggest_slots",
    "to_naive_utc",
    "validate_interval",
]
