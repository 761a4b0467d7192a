"""Domain models and data access layer."""

from .intervals import TimeInterval, intervals_overlap
from .models import (
    Base,
    DayPlanning,
    Employee,
    ManufOrder,
    OperationOrder,
    ProcessLine,
    ResourceAllocation,
    WeeklyPlanning,
    WorkCenter,
)
from .repositories import (
    EmployeeRepository,
    ManufOrderRepository,
    OperationOrderRepository,
    ResourceAllocationRepository,
    WeeklyPlanningRepository,
    WorkCenterRepository,
)

__all__ = [
    "TimeInterval",
    "intervals_overlap",
    "Base",
    "DayPlanning",
    "Employee",
    "ManufOrder",
    "OperationOrder",
    "ProcessLine",
    "ResourceAllocation",
    "WeeklyPlanning",
    "WorkCenter",
    "EmployeeRepository",
    "ManufOrderRepository",
    "OperationOrderRepository",
    "ResourceAllocationRepository",
    "WeeklyPlanningRepository",
    "WorkCenterRepository",
]
