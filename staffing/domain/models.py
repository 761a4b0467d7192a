"""SQLAlchemy models for operation staffing."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Time
from sqlalchemy.orm import DeclarativeBase, relationship

from .intervals import TimeInterval


# Operation order lifecycle (statusSelect in the production module)
STATUS_DRAFT = 1
STATUS_CANCELED = 2
STATUS_PLANNED = 3
STATUS_IN_PROGRESS = 4
STATUS_STANDBY = 5
STATUS_FINISHED = 6

DAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class WeeklyPlanning(Base):
    """Working-hours calendar shared by any number of employees."""

    __tablename__ = "weekly_plannings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)

    day_plannings = relationship("DayPlanning", back_populates="weekly_planning", cascade="all, delete-orphan")
    employees = relationship("Employee", back_populates="weekly_planning")

    def __repr__(self) -> str:
        return f"<WeeklyPlanning(id={self.id}, name='{self.name}')>"


class DayPlanning(Base):
    """Morning and afternoon working-hour bounds for one weekday."""

    __tablename__ = "day_plannings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    weekly_planning_id = Column(Integer, ForeignKey("weekly_plannings.id"), nullable=False)
    day_name = Column(String(10), nullable=False)  # monday .. sunday

    # Either half of the day may be absent
    morning_from = Column(Time, nullable=True)
    morning_to = Column(Time, nullable=True)
    afternoon_from = Column(Time, nullable=True)
    afternoon_to = Column(Time, nullable=True)

    weekly_planning = relationship("WeeklyPlanning", back_populates="day_plannings")

    def __repr__(self) -> str:
        return (
            f"<DayPlanning(day={self.day_name}, morning={self.morning_from}-{self.morning_to}, "
            f"afternoon={self.afternoon_from}-{self.afternoon_to})>"
        )


class Employee(Base):
    """Employee that can be allocated to operations."""

    __tablename__ = "employees"

    employee_id = Column(Integer, primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    weekly_planning_id = Column(Integer, ForeignKey("weekly_plannings.id"), nullable=True)

    weekly_planning = relationship("WeeklyPlanning", back_populates="employees")
    allocations = relationship("ResourceAllocation", back_populates="employee")

    def __repr__(self) -> str:
        return f"<Employee(id={self.employee_id}, name='{self.first_name} {self.last_name}')>"


class WorkCenter(Base):
    """Work center holding the resource templates copied into each operation."""

    __tablename__ = "work_centers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)

    resource_templates = relationship(
        "ResourceAllocation",
        back_populates="work_center",
        order_by="ResourceAllocation.id",
    )

    def __repr__(self) -> str:
        return f"<WorkCenter(id={self.id}, name='{self.name}')>"


class ManufOrder(Base):
    """Manufacturing order grouping operation orders."""

    __tablename__ = "manuf_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    manuf_order_seq = Column(String(50), nullable=True)
    planned_start = Column(DateTime, nullable=True)
    planned_end = Column(DateTime, nullable=True)

    operation_orders = relationship(
        "OperationOrder",
        back_populates="manuf_order",
        order_by="OperationOrder.priority",
    )

    def __repr__(self) -> str:
        return f"<ManufOrder(id={self.id}, seq='{self.manuf_order_seq}')>"


class ProcessLine(Base):
    """Routing step an operation order is instantiated from."""

    __tablename__ = "process_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    priority = Column(Integer, nullable=False, default=0)
    process_code = Column(String(50), nullable=True)
    work_center_id = Column(Integer, ForeignKey("work_centers.id"), nullable=True)

    work_center = relationship("WorkCenter")

    def __repr__(self) -> str:
        return f"<ProcessLine(id={self.id}, name='{self.name}', priority={self.priority})>"


class OperationOrder(Base):
    """Time-bounded piece of work needing allocated employees."""

    __tablename__ = "operation_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    priority = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=True)
    operation_name = Column(String(100), nullable=True)
    status = Column(Integer, nullable=False, default=STATUS_DRAFT)
    planned_start = Column(DateTime, nullable=True)
    planned_end = Column(DateTime, nullable=True)
    planned_duration = Column(Integer, nullable=False, default=0)  # seconds

    manuf_order_id = Column(Integer, ForeignKey("manuf_orders.id"), nullable=True)
    work_center_id = Column(Integer, ForeignKey("work_centers.id"), nullable=True)
    process_line_id = Column(Integer, ForeignKey("process_lines.id"), nullable=True)

    manuf_order = relationship("ManufOrder", back_populates="operation_orders")
    work_center = relationship("WorkCenter")
    process_line = relationship("ProcessLine")
    allocations = relationship(
        "ResourceAllocation",
        back_populates="operation_order",
        order_by="ResourceAllocation.id",
    )

    @property
    def interval(self) -> Optional[TimeInterval]:
        """Planned interval, or None while the operation is not fully scheduled."""
        return TimeInterval.from_bounds(self.planned_start, self.planned_end)

    def __repr__(self) -> str:
        return f"<OperationOrder(id={self.id}, name='{self.name}', status={self.status})>"


class ResourceAllocation(Base):
    """
    Human resource line.

    Attached to a work center it is a template; attached to an operation
    order it is an allocation and, once it has an employee, a commitment.
    """

    __tablename__ = "resource_allocations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product = Column(String(100), nullable=True)  # labour / skill code
    duration = Column(Integer, nullable=False, default=0)  # seconds
    employee_id = Column(Integer, ForeignKey("employees.employee_id"), nullable=True)
    operation_order_id = Column(Integer, ForeignKey("operation_orders.id"), nullable=True)
    work_center_id = Column(Integer, ForeignKey("work_centers.id"), nullable=True)

    employee = relationship("Employee", back_populates="allocations")
    operation_order = relationship("OperationOrder", back_populates="allocations")
    work_center = relationship("WorkCenter", back_populates="resource_templates")

    def __repr__(self) -> str:
        return (
            f"<ResourceAllocation(id={self.id}, product='{self.product}', "
            f"op={self.operation_order_id}, emp={self.employee_id})>"
        )
