"""I/O utilities for CSV import/export."""

from .export_csv import export_allocations_csv, export_employees_csv
from .import_csv import (
    import_employees_csv,
    import_operations_csv,
    import_plannings_csv,
    import_templates_csv,
)

__all__ = [
    "import_employees_csv",
    "import_operations_csv",
    "import_plannings_csv",
    "import_templates_csv",
    "export_allocations_csv",
    "export_employees_csv",
]
