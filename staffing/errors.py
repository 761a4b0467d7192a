"""Exception types raised by the staffing package."""

from __future__ import annotations


class StaffingError(Exception):
    """Base class for all staffing errors."""


class InvalidIntervalError(StaffingError, ValueError):
    """Raised when a time interval ends before it starts."""


class MissingWorkCenterError(StaffingError):
    """Raised when an operation is created from a process line without a work center."""

    def __init__(self, process_code: str | None, line_name: str | None):
        self.process_code = process_code
        self.line_name = line_name
        super().__init__(
            f"Process line '{line_name}' of process '{process_code or 'null'}' has no work center"
        )


class ConfigError(StaffingError, ValueError):
    """Raised when a configuration file cannot be used."""
