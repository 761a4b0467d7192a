"""Services for employee availability and allocation."""

from .assignment import AssignmentBuilder, compute_name
from .candidates import CandidateSet, candidate_filter_for_allocation, employee_filter
from .collaborators import CommitmentIndex, PlanningLookup, SqlCommitmentIndex, SqlPlanningLookup
from .resolver import AvailabilityResolver
from .working_hours import day_planning_covers, shift_contains

__all__ = [
    "AssignmentBuilder",
    "compute_name",
    "CandidateSet",
    "candidate_filter_for_allocation",
    "employee_filter",
    "CommitmentIndex",
    "PlanningLookup",
    "SqlCommitmentIndex",
    "SqlPlanningLookup",
    "AvailabilityResolver",
    "day_planning_covers",
    "shift_contains",
]
