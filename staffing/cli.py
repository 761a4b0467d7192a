"""Command-line interface for operation staffing."""

from __future__ import annotations

import argparse
import logging

from staffing.config import StaffingConfig, load_config
from staffing.domain.db import DatabaseManager, init_database
from staffing.domain.repositories import EmployeeRepository, ManufOrderRepository, OperationOrderRepository
from staffing.io.export_csv import export_allocations_csv, export_employees_csv
from staffing.io.import_csv import (
    import_employees_csv,
    import_operations_csv,
    import_plannings_csv,
    import_templates_csv,
)
from staffing.services.assignment import AssignmentBuilder
from staffing.services.candidates import candidate_filter_for_allocation
from staffing.services.collaborators import SqlCommitmentIndex, SqlPlanningLookup
from staffing.services.resolver import AvailabilityResolver


def _load(args: argparse.Namespace) -> StaffingConfig:
    cfg = load_config(args.config)
    if args.db:
        cfg.db_url = args.db
    logging.basicConfig(level=cfg.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return cfg


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    cfg = _load(args)
    init_database(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    cfg = _load(args)
    session = DatabaseManager(cfg.db_url).get_session()

    try:
        # Plannings before employees, templates before operations
        if args.plannings:
            count = import_plannings_csv(session, args.plannings)
            print(f"[OK] Imported {count} day plannings")

        if args.employees:
            count = import_employees_csv(session, args.employees)
            print(f"[OK] Imported {count} employees")

        if args.templates:
            count = import_templates_csv(session, args.templates)
            print(f"[OK] Imported {count} resource templates")

        if args.operations:
            count = import_operations_csv(session, args.operations)
            print(f"[OK] Imported {count} operation orders")

        session.close()
        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Import failed: {e}")
        raise


def _cmd_assign(args: argparse.Namespace) -> None:
    """Fill unassigned allocations of a manufacturing order."""
    cfg = _load(args)
    session = DatabaseManager(cfg.db_url).get_session()

    try:
        manuf_order = ManufOrderRepository.get_by_seq(session, args.manuf_order)
        if manuf_order is None:
            session.close()
            raise SystemExit(f"[ERROR] Unknown manufacturing order {args.manuf_order}")

        builder = AssignmentBuilder.for_session(session, cfg.cancelled_status)
        builder.update_operations(manuf_order)

        missing = 0
        for operation_order in manuf_order.operation_orders:
            for allocation in operation_order.allocations:
                if allocation.employee_id is None:
                    missing += 1
                    print(f"[WARN] No employee available for {operation_order.name} ({allocation.product})")
                else:
                    print(f"[INFO] {operation_order.name} ({allocation.product}) -> employee {allocation.employee_id}")

        session.close()
        print(f"[OK] Assignment complete for {args.manuf_order}: {missing} allocation(s) left unassigned")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Assignment failed: {e}")
        raise


def _cmd_candidates(args: argparse.Namespace) -> None:
    """Print eligible employees for each allocation of an operation order."""
    cfg = _load(args)
    session = DatabaseManager(cfg.db_url).get_session()

    try:
        operation_order = OperationOrderRepository.get_by_id(session, args.operation)
        if operation_order is None:
            session.close()
            raise SystemExit(f"[ERROR] Unknown operation order {args.operation}")

        resolver = AvailabilityResolver(SqlCommitmentIndex(session, cfg.cancelled_status), SqlPlanningLookup(session))
        for allocation in operation_order.allocations:
            criterion = candidate_filter_for_allocation(resolver, allocation)
            if criterion is None:
                print(f"[INFO] {allocation.product}: operation not scheduled, any employee")
                continue
            employees = EmployeeRepository.get_by_filter(session, criterion)
            ids = ", ".join(str(e.employee_id) for e in employees) or "none"
            print(f"[INFO] {allocation.product}: {ids}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Candidate lookup failed: {e}")
        raise


def _cmd_export(args: argparse.Namespace) -> None:
    """Export data from database to CSV."""
    cfg = _load(args)
    session = DatabaseManager(cfg.db_url).get_session()

    try:
        if args.allocations:
            count = export_allocations_csv(session, args.allocations)
            print(f"[OK] Exported {count} allocations to {args.allocations}")

        if args.employees:
            count = export_employees_csv(session, args.employees)
            print(f"[OK] Exported {count} employees to {args.employees}")

        session.close()

    except Exception as e:
        session.close()
        print(f"[ERROR] Export failed: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="staffing",
        description="Assign available employees to planned manufacturing operations",
    )

    # Global options
    parser.add_argument("--db", help="Database URL (default: sqlite:///staffing.db)")
    parser.add_argument("--config", help="Path to config YAML or JSON")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize database")
    init.set_defaults(func=_cmd_init_db)

    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--plannings", help="Path to weekly plannings CSV")
    imp.add_argument("--employees", help="Path to employees CSV")
    imp.add_argument("--templates", help="Path to work-center templates CSV")
    imp.add_argument("--operations", help="Path to operation orders CSV")
    imp.set_defaults(func=_cmd_import_csv)

    asg = sub.add_parser("assign", help="Assign employees to a manufacturing order's operations")
    asg.add_argument("--manuf-order", required=True, help="Manufacturing order sequence (e.g., MO0001)")
    asg.set_defaults(func=_cmd_assign)

    cand = sub.add_parser("candidates", help="List eligible employees for an operation order")
    cand.add_argument("--operation", required=True, type=int, help="Operation order ID")
    cand.set_defaults(func=_cmd_candidates)

    exp = sub.add_parser("export", help="Export data from database to CSV")
    exp.add_argument("--allocations", help="Path to export allocations CSV")
    exp.add_argument("--employees", help="Path to export employees CSV")
    exp.set_defaults(func=_cmd_export)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
