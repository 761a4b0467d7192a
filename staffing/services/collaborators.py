"""Collaborator interfaces consumed by the availability resolver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from staffing.domain.intervals import TimeInterval
from staffing.domain.models import STATUS_CANCELED, DayPlanning, Employee, WeeklyPlanning
from staffing.domain.repositories import (
    EmployeeRepository,
    ResourceAllocationRepository,
    WeeklyPlanningRepository,
)


class CommitmentIndex(ABC):
    """Source of existing employee commitments and of the candidate pool."""

    @abstractmethod
    def find_overlapping_commitments(self, interval: TimeInterval) -> Set[int]:
        """
        Get IDs of employees with a non-cancelled commitment overlapping ``interval``.

        Overlap follows ``staffing.domain.intervals.intervals_overlap``.
        """

    @abstractmethod
    def all_employees_excluding(self, conflicted: Set[int]) -> List[Employee]:
        """Get the candidate pool, without the given employee IDs."""


class PlanningLookup(ABC):
    """Source of per-day working hours."""

    @abstractmethod
    def day_planning_for(self, weekly_planning: WeeklyPlanning, day: date) -> Optional[DayPlanning]:
        """
        Get the day planning for a date, or None when that day has none.

        Raises only when ``weekly_planning`` itself is unusable.
        """


class SqlCommitmentIndex(CommitmentIndex):
    """Commitment index backed by the allocation tables."""

    def __init__(self, session: Session, cancelled_status: int = STATUS_CANCELED):
        self.session = session
        self.cancelled_status = cancelled_status

    def find_overlapping_commitments(self, interval: TimeInterval) -> Set[int]:
        return ResourceAllocationRepository.find_committed_employee_ids(
            self.session, interval, self.cancelled_status
        )

    def all_employees_excluding(self, conflicted: Set[int]) -> List[Employee]:
        return EmployeeRepository.get_excluding(self.session, conflicted)


class SqlPlanningLookup(PlanningLookup):
    """Day-planning lookup backed by the planning tables."""

    def __init__(self, session: Session):
        self.session = session

    def day_planning_for(self, weekly_planning: WeeklyPlanning, day: date) -> Optional[DayPlanning]:
        return WeeklyPlanningRepository.find_day_planning(self.session, weekly_planning, day)
