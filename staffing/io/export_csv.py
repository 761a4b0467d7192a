"""CSV export utilities."""

from __future__ import annotations

from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from staffing.domain.repositories import EmployeeRepository, ResourceAllocationRepository

ALLOCATION_COLUMNS = ["allocation_id", "operation_order_id", "operation", "product", "duration", "employee_id"]


def export_allocations_csv(session: Session, csv_path: str | Path) -> int:
    """
    Export every operation allocation to CSV.

    Returns:
        Number of allocations exported
    """
    rows = [
        {
            "allocation_id": allocation.id,
            "operation_order_id": allocation.operation_order_id,
            "operation": allocation.operation_order.name,
            "product": allocation.product,
            "duration": allocation.duration,
            "employee_id": allocation.employee_id,
        }
        for allocation in ResourceAllocationRepository.get_all(session)
    ]
    df = pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)
    # Keep unassigned rows as blanks rather than floats
    df["employee_id"] = df["employee_id"].astype("Int64")
    df.to_csv(csv_path, index=False)

    print(f"[INFO] Exported {len(df)} allocations to {csv_path}")
    return len(df)


def export_employees_csv(session: Session, csv_path: str | Path) -> int:
    """
    Export employees with their planning names to CSV.

    Returns:
        Number of employees exported
    """
    rows = [
        {
            "employee_id": employee.employee_id,
            "first_name": employee.first_name,
            "last_name": employee.last_name,
            "weekly_planning": employee.weekly_planning.name if employee.weekly_planning else None,
        }
        for employee in EmployeeRepository.get_all(session)
    ]
    df = pd.DataFrame(rows, columns=["employee_id", "first_name", "last_name", "weekly_planning"])
    df.to_csv(csv_path, index=False)

    print(f"[INFO] Exported {len(df)} employees to {csv_path}")
    return len(df)
