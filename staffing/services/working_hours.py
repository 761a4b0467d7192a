"""Working-hours containment checks."""

from __future__ import annotations

from datetime import time
from typing import Optional

from staffing.domain.intervals import TimeInterval
from staffing.domain.models import DayPlanning


def shift_contains(shift_from: Optional[time], shift_to: Optional[time], interval: TimeInterval) -> bool:
    """
    Check that a single-day interval lies entirely inside one shift.

    A shift with a missing bound never contains anything.
    """
    if shift_from is None or shift_to is None:
        return False
    return shift_from <= interval.start.time() and shift_to >= interval.end.time()


def day_planning_covers(day_planning: Optional[DayPlanning], interval: TimeInterval) -> bool:
    """
    Check that an interval fits in the morning shift or in the afternoon shift.

    The interval may not be split across both shifts. Multi-day intervals and
    days without a planning are never covered.

    Args:
        day_planning: Working hours for the interval's date (may be None)
        interval: Requested interval

    Returns:
        True if one shift fully contains the interval
    """
    if day_planning is None or not interval.is_single_day:
        return False
    return shift_contains(day_planning.morning_from, day_planning.morning_to, interval) or shift_contains(
        day_planning.afternoon_from, day_planning.afternoon_to, interval
    )
