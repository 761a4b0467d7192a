"""Employee availability resolution for planned operations."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from staffing.domain.intervals import TimeInterval
from staffing.domain.models import Employee

from .candidates import CandidateSet
from .collaborators import CommitmentIndex, PlanningLookup
from .working_hours import day_planning_covers

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """
    Select employees who are free and on shift for a requested interval.

    Resolution runs in two stages:
    1. Employees with an overlapping non-cancelled commitment are removed
       from the pool by the commitment index.
    2. Each remaining employee must have a day planning whose morning or
       afternoon shift fully contains the interval.

    The resolver only reads. Committing a selected employee is the caller's
    job (see ``AssignmentBuilder``), so two resolutions made before either
    result is committed may return the same employee.
    """

    def __init__(self, commitments: CommitmentIndex, plannings: PlanningLookup):
        self.commitments = commitments
        self.plannings = plannings

    def is_on_shift(self, employee: Employee, interval: TimeInterval) -> bool:
        """Check that the employee's working hours cover the interval within one shift."""
        if employee.weekly_planning is None or not interval.is_single_day:
            return False
        day_planning = self.plannings.day_planning_for(employee.weekly_planning, interval.start.date())
        return day_planning_covers(day_planning, interval)

    def _available(self, interval: TimeInterval) -> Iterator[Employee]:
        conflicted = self.commitments.find_overlapping_commitments(interval)
        pool = self.commitments.all_employees_excluding(conflicted)
        logger.debug(
            "Resolving %s - %s: %d committed, %d in pool",
            interval.start.isoformat(),
            interval.end.isoformat(),
            len(conflicted),
            len(pool),
        )
        for employee in pool:
            if self.is_on_shift(employee, interval):
                yield employee

    def resolve_one(self, interval: Optional[TimeInterval]) -> Optional[Employee]:
        """
        Get the first available employee for an interval.

        Args:
            interval: Requested interval, or None for an unscheduled operation

        Returns:
            The first qualifying employee in pool order, or None
        """
        if interval is None:
            return None
        employee = next(self._available(interval), None)
        if employee is None:
            logger.debug("No available employee for %s - %s", interval.start.isoformat(), interval.end.isoformat())
        return employee

    def resolve_candidates(self, interval: Optional[TimeInterval]) -> CandidateSet:
        """Get IDs of every available employee for an interval (empty when unscheduled)."""
        if interval is None:
            return CandidateSet()
        return CandidateSet.of(employee.employee_id for employee in self._available(interval))
