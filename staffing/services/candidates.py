"""Candidate sets and their rendering as employee filters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List

from sqlalchemy import false

from staffing.domain.models import Employee, ResourceAllocation


@dataclass(frozen=True)
class CandidateSet:
    """IDs of every employee eligible for an interval."""

    employee_ids: FrozenSet[int] = frozenset()

    @classmethod
    def of(cls, employee_ids: Iterable[int]) -> "CandidateSet":
        return cls(frozenset(employee_ids))

    @property
    def is_empty(self) -> bool:
        return not self.employee_ids

    def sorted_ids(self) -> List[int]:
        return sorted(self.employee_ids)

    def __contains__(self, employee_id: object) -> bool:
        return employee_id in self.employee_ids

    def __len__(self) -> int:
        return len(self.employee_ids)


def employee_filter(candidates: CandidateSet):
    """
    Render a candidate set as a criterion on ``Employee``.

    An empty set renders as ``false()`` so the filter matches no employee.
    """
    if candidates.is_empty:
        return false()
    return Employee.employee_id.in_(candidates.sorted_ids())


def candidate_filter_for_allocation(resolver, allocation: ResourceAllocation):
    """
    Build the employee filter offered when picking an employee for an allocation.

    Returns None (no restriction) while the allocation has no operation order
    or the operation is not fully scheduled.
    """
    operation_order = allocation.operation_order
    if operation_order is None or operation_order.interval is None:
        return None
    return employee_filter(resolver.resolve_candidates(operation_order.interval))
