"""Tests for AssignmentBuilder - operation creation and re-synchronization."""

import threading
import warnings
from datetime import datetime, time

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SAWarning

from staffing.domain.models import (
    STATUS_DRAFT,
    STATUS_PLANNED,
    DayPlanning,
    Employee,
    ManufOrder,
    OperationOrder,
    ProcessLine,
    ResourceAllocation,
    WeeklyPlanning,
    WorkCenter,
)
from staffing.domain.repositories import OperationOrderRepository
from staffing.errors import MissingWorkCenterError
from staffing.services.assignment import AssignmentBuilder, compute_name


@pytest.fixture
def standard_planning(db_session):
    planning = WeeklyPlanning(name="Standard")
    planning.day_plannings.append(
        DayPlanning(
            day_name="wednesday",
            morning_from=time(8, 0),
            morning_to=time(12, 0),
            afternoon_from=time(13, 0),
            afternoon_to=time(17, 0),
        )
    )
    db_session.add(planning)
    db_session.commit()
    return planning


@pytest.fixture
def employees(db_session, standard_planning):
    staff = [
        Employee(employee_id=1, first_name="Ada", last_name="Byron", weekly_planning=standard_planning),
        Employee(employee_id=2, first_name="Alan", last_name="Kay", weekly_planning=standard_planning),
    ]
    db_session.add_all(staff)
    db_session.commit()
    return staff


@pytest.fixture
def work_center(db_session):
    """Work center needing an operator and an inspector."""
    center = WorkCenter(name="Assembly")
    center.resource_templates.append(ResourceAllocation(product="OPERATOR", duration=3600))
    center.resource_templates.append(ResourceAllocation(product="INSPECTOR", duration=1800))
    db_session.add(center)
    db_session.commit()
    return center


@pytest.fixture
def manuf_order(db_session):
    order = ManufOrder(manuf_order_seq="MO0001")
    db_session.add(order)
    db_session.commit()
    return order


@pytest.fixture
def builder(db_session):
    return AssignmentBuilder.for_session(db_session)


def _wed(hour, minute=0):
    return datetime(2024, 1, 10, hour, minute)


def test_compute_name():
    order = ManufOrder(id=7, manuf_order_seq="MO0042")
    assert compute_name(order, 10, "Cutting") == "MO0042-10-Cutting"
    assert compute_name(ManufOrder(id=7), 20, "Drilling") == "7-20-Drilling"
    assert compute_name(None, 5, "Sanding") == "-5-Sanding"


def test_missing_work_center_raises(db_session, builder, manuf_order):
    line = ProcessLine(name="Welding", priority=10, process_code="PROC-1")
    with pytest.raises(MissingWorkCenterError) as exc_info:
        builder.create_operation_order(manuf_order, line)
    assert "Welding" in str(exc_info.value)
    assert "PROC-1" in str(exc_info.value)


def test_create_operation_order_unscheduled(db_session, builder, employees, work_center, manuf_order):
    """Test that an operation without planned dates gets allocations but no employees."""
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line, commit=True)

    assert operation.id is not None
    assert operation.name == "MO0001-10-Assembly"
    assert operation.status == STATUS_DRAFT
    assert operation.work_center == work_center
    assert operation in manuf_order.operation_orders
    assert [a.product for a in operation.allocations] == ["OPERATOR", "INSPECTOR"]
    assert all(a.employee is None for a in operation.allocations)
    assert all(a.duration == 0 for a in operation.allocations)


def test_create_operation_order_assigns_distinct_employees(db_session, builder, employees, work_center, manuf_order):
    """Test that the second allocation sees the first one's commitment."""
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line, _wed(9), _wed(11))

    assert operation.planned_duration == 7200
    assert [a.duration for a in operation.allocations] == [7200, 7200]
    assert [a.employee_id for a in operation.allocations] == [1, 2]


def test_templates_are_not_modified(db_session, builder, employees, work_center, manuf_order):
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    builder.create_operation_order(manuf_order, line, _wed(9), _wed(11))

    assert [t.duration for t in work_center.resource_templates] == [3600, 1800]
    assert all(t.employee is None for t in work_center.resource_templates)
    assert all(t.operation_order is None for t in work_center.resource_templates)


def test_create_allocations_without_available_staff(db_session, builder, employees, work_center, manuf_order):
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line, _wed(11, 30), _wed(13, 30))
    assert all(a.employee is None for a in operation.allocations)


def test_create_allocations_without_work_center(db_session, builder):
    operation = OperationOrder(name="OP", status=STATUS_PLANNED)
    assert builder.create_allocations(operation, None) == []


def test_copy_allocation_keeps_employee(db_session, employees):
    original = ResourceAllocation(product="OPERATOR", duration=5400, employee=employees[0])
    copy = AssignmentBuilder.copy_allocation(original)

    assert copy is not original
    assert copy.product == "OPERATOR"
    assert copy.duration == 5400
    assert copy.employee is employees[0]
    assert copy.operation_order is None


def test_resynchronize_fills_missing_employees(db_session, builder, employees, work_center, manuf_order):
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line)

    # Reschedule
    operation.planned_start = _wed(14)
    operation.planned_end = _wed(16)
    operation.planned_duration = 7200
    builder.resynchronize(operation)

    assert [a.duration for a in operation.allocations] == [7200, 7200]
    assert [a.employee_id for a in operation.allocations] == [1, 2]


def test_resynchronize_is_idempotent(db_session, builder, employees, work_center, manuf_order):
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line)
    operation.planned_start = _wed(9)
    operation.planned_end = _wed(10)
    operation.planned_duration = 3600

    builder.resynchronize(operation)
    first = [(a.id, a.duration, a.employee_id) for a in operation.allocations]
    builder.resynchronize(operation)
    second = [(a.id, a.duration, a.employee_id) for a in operation.allocations]

    assert first == second


def test_resynchronize_keeps_stale_assignment(db_session, builder, employees, work_center, manuf_order):
    """Test that assigned allocations are not re-evaluated after a reschedule."""
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line, _wed(9), _wed(11))
    assigned = [a.employee_id for a in operation.allocations]

    # Move into the lunch gap where nobody is on shift
    operation.planned_start = _wed(11, 30)
    operation.planned_end = _wed(13, 30)
    operation.planned_duration = 7200
    builder.resynchronize(operation)

    assert [a.employee_id for a in operation.allocations] == assigned
    assert [a.duration for a in operation.allocations] == [7200, 7200]


def test_resynchronize_unscheduled_only_updates_duration(db_session, builder, employees, work_center, manuf_order):
    line = ProcessLine(name="Assembly", priority=10, work_center=work_center)
    operation = builder.create_operation_order(manuf_order, line)
    operation.planned_duration = 600
    builder.resynchronize(operation)

    assert [a.duration for a in operation.allocations] == [600, 600]
    assert all(a.employee is None for a in operation.allocations)


def test_update_operations_across_manuf_order(db_session, builder, employees, work_center, manuf_order):
    """Test that overlapping operations of one order do not share an employee."""
    single = WorkCenter(name="Packing")
    single.resource_templates.append(ResourceAllocation(product="PACKER"))
    db_session.add(single)

    first = builder.create_operation_order(manuf_order, ProcessLine(name="Pack", priority=10, work_center=single))
    second = builder.create_operation_order(manuf_order, ProcessLine(name="Repack", priority=20, work_center=single))
    empty = OperationOrder(name="MO0001-30-Paint", priority=30, status=STATUS_DRAFT, manuf_order=manuf_order)
    db_session.add(empty)

    for operation in (first, second):
        operation.planned_start = _wed(9)
        operation.planned_end = _wed(10)
        operation.planned_duration = 3600

    builder.update_operations(manuf_order, commit=True)

    assert first.allocations[0].employee_id == 1
    assert second.allocations[0].employee_id == 2
    assert empty.allocations == []


def test_builders_share_default_lock(db_session):
    first = AssignmentBuilder.for_session(db_session)
    second = AssignmentBuilder.for_session(db_session)
    assert first.lock is second.lock

    own = threading.RLock()
    assert AssignmentBuilder(db_session, first.resolver, lock=own).lock is own


class _DepthLock:
    """Re-entrant lock stand-in that records how deeply it is held."""

    def __init__(self):
        self.depth = 0

    def __enter__(self):
        self.depth += 1
        return self

    def __exit__(self, *exc_info):
        self.depth -= 1
        return False


def test_commit_happens_while_lock_is_held(db_session, employees, work_center, manuf_order):
    lock = _DepthLock()
    builder = AssignmentBuilder(db_session, AssignmentBuilder.for_session(db_session).resolver, lock=lock)
    depths = []
    event.listen(db_session, "after_commit", lambda session: depths.append(lock.depth))

    operation = builder.create_operation_order(manuf_order, ProcessLine(name="Assembly", priority=10, work_center=work_center))
    operation.planned_start = _wed(9)
    operation.planned_end = _wed(10)
    operation.planned_duration = 3600
    builder.resynchronize(operation)
    builder.update_operations(manuf_order)

    assert len(depths) == 3
    assert all(depth > 0 for depth in depths)
    assert lock.depth == 0


def test_create_operation_order_does_not_warn_on_autoflush(db_session, builder, employees, work_center, manuf_order):
    """Test that the new operation is in the session before its allocations are resolved."""
    with warnings.catch_warnings():
        warnings.simplefilter("error", SAWarning)
        builder.create_operation_order(manuf_order, ProcessLine(name="Cutting", priority=10, work_center=work_center), _wed(9), _wed(10))
        builder.create_operation_order(manuf_order, ProcessLine(name="Welding", priority=20, work_center=work_center), _wed(9), _wed(10))

    assert [len(op.allocations) for op in manuf_order.operation_orders] == [2, 2]


def test_assignment_is_visible_to_builder_on_another_session(file_db):
    """Test that a default resynchronize commits before another session resolves."""
    setup = file_db.get_session()
    planning = WeeklyPlanning(name="Standard")
    planning.day_plannings.append(
        DayPlanning(day_name="wednesday", morning_from=time(8, 0), morning_to=time(12, 0))
    )
    center = WorkCenter(name="Cutting")
    center.resource_templates.append(ResourceAllocation(product="OPERATOR"))
    order = ManufOrder(manuf_order_seq="MO0001")
    setup.add_all([planning, center, order, Employee(employee_id=1, first_name="Ada", last_name="Byron", weekly_planning=planning)])
    setup.commit()

    setup_builder = AssignmentBuilder.for_session(setup)
    operation_ids = []
    for priority in (10, 20):
        operation = setup_builder.create_operation_order(order, ProcessLine(name="Cut", priority=priority, work_center=center))
        operation.planned_start = _wed(9)
        operation.planned_end = _wed(11)
        operation.planned_duration = 7200
        setup.commit()
        operation_ids.append(operation.id)
    setup.close()

    session_a = file_db.get_session()
    first = OperationOrderRepository.get_by_id(session_a, operation_ids[0])
    AssignmentBuilder.for_session(session_a).resynchronize(first)
    assert first.allocations[0].employee_id == 1
    session_a.close()

    session_b = file_db.get_session()
    builder_b = AssignmentBuilder.for_session(session_b)
    second = OperationOrderRepository.get_by_id(session_b, operation_ids[1])
    assert builder_b.resolver.resolve_one(second.interval) is None
    builder_b.resynchronize(second)
    assert second.allocations[0].employee_id is None
    session_b.close()
