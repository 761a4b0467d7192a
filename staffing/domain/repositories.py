"""Repository classes for data access."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Set

from sqlalchemy.orm import Session

from .intervals import TimeInterval
from .models import (
    DAY_NAMES,
    STATUS_CANCELED,
    DayPlanning,
    Employee,
    ManufOrder,
    OperationOrder,
    ResourceAllocation,
    WeeklyPlanning,
    WorkCenter,
)


class EmployeeRepository:
    """Repository for employee data access."""

    @staticmethod
    def get_all(session: Session) -> List[Employee]:
        """Get all employees."""
        return session.query(Employee).order_by(Employee.employee_id).all()

    @staticmethod
    def get_by_id(session: Session, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        return session.query(Employee).filter(Employee.employee_id == employee_id).first()

    @staticmethod
    def get_by_filter(session: Session, criterion) -> List[Employee]:
        """Get employees matching a SQL criterion (see ``staffing.services.candidates``)."""
        return session.query(Employee).filter(criterion).order_by(Employee.employee_id).all()

    @staticmethod
    def get_excluding(session: Session, excluded_ids: Iterable[int]) -> List[Employee]:
        """Get all employees except the given ones, lowest ID first."""
        query = session.query(Employee)
        excluded = list(excluded_ids)
        if excluded:
            query = query.filter(Employee.employee_id.notin_(excluded))
        return query.order_by(Employee.employee_id).all()


class WeeklyPlanningRepository:
    """Repository for working-hours calendars."""

    @staticmethod
    def get_by_name(session: Session, name: str) -> Optional[WeeklyPlanning]:
        """Get weekly planning by name."""
        return session.query(WeeklyPlanning).filter(WeeklyPlanning.name == name).first()

    @staticmethod
    def find_day_planning(session: Session, weekly_planning: WeeklyPlanning, day: date) -> Optional[DayPlanning]:
        """
        Get the day planning of a weekly planning for a calendar date.

        Args:
            session: Database session
            weekly_planning: Persisted weekly planning
            day: Calendar date; only its weekday is used

        Returns:
            The matching DayPlanning, or None if that weekday has no planning

        Raises:
            ValueError: If the weekly planning has not been persisted
        """
        if weekly_planning.id is None:
            raise ValueError(f"Weekly planning '{weekly_planning.name}' is not persisted")
        return (
            session.query(DayPlanning)
            .filter(
                DayPlanning.weekly_planning_id == weekly_planning.id,
                DayPlanning.day_name == DAY_NAMES[day.weekday()],
            )
            .first()
        )


class WorkCenterRepository:
    """Repository for work centers."""

    @staticmethod
    def get_by_name(session: Session, name: str) -> Optional[WorkCenter]:
        """Get work center by name."""
        return session.query(WorkCenter).filter(WorkCenter.name == name).first()


class ManufOrderRepository:
    """Repository for manufacturing orders."""

    @staticmethod
    def get_by_seq(session: Session, seq: str) -> Optional[ManufOrder]:
        """Get manufacturing order by its sequence number."""
        return session.query(ManufOrder).filter(ManufOrder.manuf_order_seq == seq).first()


class OperationOrderRepository:
    """Repository for operation orders."""

    @staticmethod
    def get_by_id(session: Session, operation_order_id: int) -> Optional[OperationOrder]:
        """Get operation order by ID."""
        return session.query(OperationOrder).filter(OperationOrder.id == operation_order_id).first()


class ResourceAllocationRepository:
    """Repository for allocation records and the commitments they hold."""

    @staticmethod
    def get_all(session: Session) -> List[ResourceAllocation]:
        """Get all allocations attached to an operation order."""
        return (
            session.query(ResourceAllocation)
            .filter(ResourceAllocation.operation_order_id.is_not(None))
            .order_by(ResourceAllocation.id)
            .all()
        )

    @staticmethod
    def find_committed_employee_ids(
        session: Session,
        interval: TimeInterval,
        cancelled_status: int = STATUS_CANCELED,
    ) -> Set[int]:
        """
        Get IDs of employees holding a commitment that overlaps an interval.

        A commitment is an allocation with an employee whose operation order is
        scheduled and not cancelled. The filter is the SQL form of
        ``intervals_overlap``: ``planned_start < end AND planned_end > start``.
        """
        rows = (
            session.query(ResourceAllocation.employee_id)
            .join(OperationOrder, ResourceAllocation.operation_order_id == OperationOrder.id)
            .filter(
                ResourceAllocation.employee_id.is_not(None),
                OperationOrder.status != cancelled_status,
                OperationOrder.planned_start < interval.end,
                OperationOrder.planned_end > interval.start,
            )
            .distinct()
            .all()
        )
        return {row[0] for row in rows}
