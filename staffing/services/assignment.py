"""Creation and re-synchronization of operation resource allocations."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import ContextManager, List, Optional

from sqlalchemy.orm import Session

from staffing.domain.models import (
    STATUS_CANCELED,
    STATUS_DRAFT,
    ManufOrder,
    OperationOrder,
    ProcessLine,
    ResourceAllocation,
    WorkCenter,
)
from staffing.errors import MissingWorkCenterError

from .collaborators import SqlCommitmentIndex, SqlPlanningLookup
from .resolver import AvailabilityResolver

logger = logging.getLogger(__name__)

# Shared by every builder that is not given its own lock
ASSIGNMENT_LOCK = threading.RLock()


def compute_name(manuf_order: Optional[ManufOrder], priority: int, operation_name: str) -> str:
    """Build an operation name such as ``MO0001-10-Cutting``."""
    prefix = ""
    if manuf_order is not None:
        prefix = manuf_order.manuf_order_seq or str(manuf_order.id)
    return f"{prefix}-{priority}-{operation_name}"


class AssignmentBuilder:
    """
    Build allocation records and attach available employees to them.

    Every select-then-commit sequence runs under ``lock``. Each allocation is
    flushed before the next resolution, and the session is committed before
    the lock is released, so an employee picked here is already a commitment
    for any other builder that resolves afterwards, whatever its session.

    Passing ``commit=False`` leaves the transaction open; the caller must then
    hold ``lock`` until it commits.
    """

    def __init__(
        self,
        session: Session,
        resolver: AvailabilityResolver,
        lock: Optional[ContextManager] = None,
    ):
        self.session = session
        self.resolver = resolver
        self.lock = lock or ASSIGNMENT_LOCK

    @classmethod
    def for_session(cls, session: Session, cancelled_status: int = STATUS_CANCELED) -> "AssignmentBuilder":
        """Create a builder whose resolver reads from the same session."""
        resolver = AvailabilityResolver(
            SqlCommitmentIndex(session, cancelled_status),
            SqlPlanningLookup(session),
        )
        return cls(session, resolver)

    def create_operation_order(
        self,
        manuf_order: ManufOrder,
        process_line: ProcessLine,
        planned_start: Optional[datetime] = None,
        planned_end: Optional[datetime] = None,
        commit: bool = True,
    ) -> OperationOrder:
        """
        Instantiate a draft operation order from a process line.

        Args:
            manuf_order: Owning manufacturing order
            process_line: Routing step providing name, priority and work center
            planned_start: Optional planned start
            planned_end: Optional planned end
            commit: Commit before releasing the lock (False only flushes)

        Returns:
            The new operation order with one allocation per work-center template

        Raises:
            MissingWorkCenterError: If the process line has no work center
        """
        work_center = process_line.work_center
        if work_center is None:
            raise MissingWorkCenterError(process_line.process_code, process_line.name)

        logger.debug(
            "Creation of an operation %s for the manufacturing order %s",
            process_line.priority,
            manuf_order.manuf_order_seq,
        )

        planned_duration = 0
        if planned_start is not None and planned_end is not None:
            planned_duration = int((planned_end - planned_start).total_seconds())

        with self.lock:
            with self.session.no_autoflush:
                operation_order = OperationOrder(
                    priority=process_line.priority,
                    name=compute_name(manuf_order, process_line.priority, process_line.name),
                    operation_name=process_line.name,
                    status=STATUS_DRAFT,
                    planned_start=planned_start,
                    planned_end=planned_end,
                    planned_duration=planned_duration,
                    manuf_order=manuf_order,
                    work_center=work_center,
                    process_line=process_line,
                )
                self.session.add(operation_order)
            self.create_allocations(operation_order, work_center, commit=commit)
        return operation_order

    def create_allocations(
        self,
        operation_order: OperationOrder,
        work_center: Optional[WorkCenter],
        commit: bool = True,
    ) -> List[ResourceAllocation]:
        """Copy every resource template of a work center into the operation order."""
        if work_center is None:
            return []
        created = []
        with self.lock:
            for template in work_center.resource_templates:
                allocation = self.create_allocation(template, operation_order)
                operation_order.allocations.append(allocation)
                self.session.flush()
                created.append(allocation)
            self._finish(commit)
        return created

    def create_allocation(self, template: ResourceAllocation, operation_order: OperationOrder) -> ResourceAllocation:
        """Create one allocation from a template; an employee is picked only for a scheduled operation."""
        allocation = ResourceAllocation(product=template.product, duration=operation_order.planned_duration)
        interval = operation_order.interval
        if interval is None:
            return allocation
        allocation.employee = self.resolver.resolve_one(interval)
        return allocation

    @staticmethod
    def copy_allocation(allocation: ResourceAllocation) -> ResourceAllocation:
        """Duplicate an allocation, keeping its employee."""
        return ResourceAllocation(
            product=allocation.product,
            duration=allocation.duration,
            employee=allocation.employee,
        )

    def resynchronize(self, operation_order: OperationOrder, commit: bool = True) -> None:
        """
        Align allocations with the operation's current plan.

        Durations are always refreshed. Allocations without an employee get
        one if someone is available; assigned allocations are left alone even
        when the new plan makes their employee unavailable.
        """
        with self.lock:
            interval = operation_order.interval
            for allocation in operation_order.allocations:
                allocation.duration = operation_order.planned_duration
                if allocation.employee is not None:
                    continue
                allocation.employee = self.resolver.resolve_one(interval)
                self.session.flush()
            self._finish(commit)

    def update_operations(self, manuf_order: ManufOrder, commit: bool = True) -> None:
        """Re-synchronize every operation order of a manufacturing order in one transaction."""
        with self.lock:
            for operation_order in manuf_order.operation_orders:
                if not operation_order.allocations:
                    continue
                self.resynchronize(operation_order, commit=False)
            self._finish(commit)

    def _finish(self, commit: bool) -> None:
        if commit:
            self.session.commit()
        else:
            self.session.flush()
