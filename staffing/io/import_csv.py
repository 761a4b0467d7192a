"""CSV import utilities to load data into database."""

from __future__ import annotations

from datetime import datetime, time
from pathlib import Path
from typing import Optional

import pandas as pd
from sqlalchemy.orm import Session

from staffing.domain.models import (
    DAY_NAMES,
    STATUS_DRAFT,
    DayPlanning,
    Employee,
    ManufOrder,
    OperationOrder,
    ResourceAllocation,
    WeeklyPlanning,
    WorkCenter,
)
from staffing.domain.repositories import (
    EmployeeRepository,
    ManufOrderRepository,
    WeeklyPlanningRepository,
    WorkCenterRepository,
)
from staffing.services.assignment import compute_name


def parse_time_string(value) -> Optional[time]:
    """Parse ``HH:MM`` (blank or NaN gives None)."""
    if value is None or pd.isna(value) or str(value).strip() == "":
        return None
    hours, minutes = [int(x) for x in str(value).strip().split(":")[:2]]
    return time(hours, minutes)


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).to_pydatetime()


def _parse_int(value) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    return int(value)


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    return df


def import_plannings_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import weekly plannings from CSV, one row per planning and weekday.

    Columns: planning, day_name, morning_from, morning_to, afternoon_from, afternoon_to

    Returns:
        Number of day plannings imported
    """
    df = _read(csv_path)
    df["day_name"] = df["day_name"].str.lower().str.strip()

    unknown_days = set(df["day_name"]) - set(DAY_NAMES)
    if unknown_days:
        raise ValueError(f"Unknown day names: {sorted(unknown_days)}")

    count = 0
    for planning_name, rows in df.groupby("planning", sort=False):
        weekly_planning = WeeklyPlanningRepository.get_by_name(session, str(planning_name))
        if weekly_planning is None:
            weekly_planning = WeeklyPlanning(name=str(planning_name))
            session.add(weekly_planning)
        for _, row in rows.iterrows():
            weekly_planning.day_plannings.append(
                DayPlanning(
                    day_name=row["day_name"],
                    morning_from=parse_time_string(row.get("morning_from")),
                    morning_to=parse_time_string(row.get("morning_to")),
                    afternoon_from=parse_time_string(row.get("afternoon_from")),
                    afternoon_to=parse_time_string(row.get("afternoon_to")),
                )
            )
            count += 1

    session.commit()

    print(f"[INFO] Imported {count} day plannings from {csv_path}")
    return count


def import_employees_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import employees from CSV into database.

    Columns: employee_id, first_name, last_name, weekly_planning (optional planning name)

    Returns:
        Number of employees imported
    """
    df = _read(csv_path)

    employees = []
    # New employees join the planning's collection before they are flushed
    with session.no_autoflush:
        for _, row in df.iterrows():
            weekly_planning = None
            planning_name = row.get("weekly_planning")
            if planning_name is not None and pd.notna(planning_name):
                weekly_planning = WeeklyPlanningRepository.get_by_name(session, str(planning_name))
                if weekly_planning is None:
                    raise ValueError(f"Employee {row['employee_id']} references unknown planning '{planning_name}'")
            employee = Employee(
                employee_id=int(row["employee_id"]),
                first_name=str(row["first_name"]),
                last_name=str(row["last_name"]),
                weekly_planning=weekly_planning,
            )
            session.add(employee)
            employees.append(employee)

    session.commit()

    print(f"[INFO] Imported {len(employees)} employees from {csv_path}")
    return len(employees)


def import_templates_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import work-center resource templates.

    Columns: work_center, product, duration (seconds)

    Returns:
        Number of templates imported
    """
    df = _read(csv_path)

    count = 0
    for _, row in df.iterrows():
        name = str(row["work_center"])
        work_center = WorkCenterRepository.get_by_name(session, name)
        if work_center is None:
            work_center = WorkCenter(name=name)
            session.add(work_center)
            session.flush()
        work_center.resource_templates.append(
            ResourceAllocation(product=str(row["product"]), duration=_parse_int(row.get("duration")) or 0)
        )
        count += 1

    session.commit()

    print(f"[INFO] Imported {count} resource templates from {csv_path}")
    return count


def import_operations_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import planned operation orders.

    Columns: operation_id, manuf_order_seq, name, priority, status, planned_start,
    planned_end, work_center (optional), employee_id (optional, must exist).

    Each operation with a work center gets one allocation per template of that
    work center. A given ``employee_id`` is set on those allocations, which
    makes them existing commitments.

    Returns:
        Number of operation orders imported
    """
    df = _read(csv_path)

    operations = []
    for _, row in df.iterrows():
        seq = str(row["manuf_order_seq"])
        manuf_order = ManufOrderRepository.get_by_seq(session, seq)
        if manuf_order is None:
            manuf_order = ManufOrder(manuf_order_seq=seq)
            session.add(manuf_order)
            session.flush()

        planned_start = _parse_datetime(row.get("planned_start"))
        planned_end = _parse_datetime(row.get("planned_end"))
        planned_duration = 0
        if planned_start is not None and planned_end is not None:
            planned_duration = int((planned_end - planned_start).total_seconds())

        status = _parse_int(row.get("status"))
        priority = _parse_int(row.get("priority")) or 0
        operation_order = OperationOrder(
            id=int(row["operation_id"]),
            priority=priority,
            name=compute_name(manuf_order, priority, str(row["name"])),
            operation_name=str(row["name"]),
            status=status if status is not None else STATUS_DRAFT,
            planned_start=planned_start,
            planned_end=planned_end,
            planned_duration=planned_duration,
            manuf_order=manuf_order,
        )
        session.add(operation_order)

        work_center_name = row.get("work_center")
        if work_center_name is not None and pd.notna(work_center_name):
            work_center = WorkCenterRepository.get_by_name(session, str(work_center_name))
            if work_center is None:
                raise ValueError(f"Operation {row['operation_id']} references unknown work center '{work_center_name}'")
            operation_order.work_center = work_center
            employee_id = _parse_int(row.get("employee_id"))
            if employee_id is not None and EmployeeRepository.get_by_id(session, employee_id) is None:
                raise ValueError(f"Operation {row['operation_id']} references unknown employee {employee_id}")
            for template in work_center.resource_templates:
                operation_order.allocations.append(
                    ResourceAllocation(
                        product=template.product,
                        duration=planned_duration,
                        employee_id=employee_id,
                    )
                )
        operations.append(operation_order)

    session.commit()

    print(f"[INFO] Imported {len(operations)} operation orders from {csv_path}")
    return len(operations)
