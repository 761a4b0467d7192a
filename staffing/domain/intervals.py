"""Time intervals and the canonical overlap test."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from staffing.errors import InvalidIntervalError


@dataclass(frozen=True)
class TimeInterval:
    """
    Half-open interval ``[start, end)`` of planned work.

    Raises:
        InvalidIntervalError: If ``start`` is after ``end``
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidIntervalError(
                f"Interval ends before it starts: {self.start.isoformat()} > {self.end.isoformat()}"
            )

    @classmethod
    def from_bounds(cls, start: Optional[datetime], end: Optional[datetime]) -> Optional["TimeInterval"]:
        """Build an interval, or return None when either bound is missing."""
        if start is None or end is None:
            return None
        return cls(start, end)

    @property
    def is_single_day(self) -> bool:
        return self.start.date() == self.end.date()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other: "TimeInterval") -> bool:
        return intervals_overlap(self, other)


def intervals_overlap(a: TimeInterval, b: TimeInterval) -> bool:
    """
    Check whether two intervals share any instant.

    Intervals are half-open, so ``[09:00, 10:00)`` and ``[10:00, 11:00)`` do
    not overlap. The test is symmetric in its arguments. The SQL commitment
    query in ``staffing.domain.repositories`` renders the same comparison.
    """
    return a.start < b.end and b.start < a.end
