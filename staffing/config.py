"""Configuration loading for the staffing tools (YAML or JSON)."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

import yaml

from staffing.domain.db import DEFAULT_DB_URL
from staffing.domain.models import STATUS_CANCELED
from staffing.errors import ConfigError

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class StaffingConfig:
    db_url: str = DEFAULT_DB_URL
    log_level: str = "WARNING"
    cancelled_status: int = STATUS_CANCELED

    def __post_init__(self) -> None:
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")
        try:
            self.cancelled_status = int(self.cancelled_status)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"cancelled_status must be an integer: {self.cancelled_status!r}") from e


def _read_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text()
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")
    return data


def load_config(path: str | Path | None = None) -> StaffingConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Config file; ``.json`` files are parsed as JSON, anything else as YAML.
            None returns the defaults.

    Returns:
        StaffingConfig

    Raises:
        ConfigError: If the file holds unknown keys or invalid values
    """
    if path is None:
        return StaffingConfig()
    data = _read_raw(Path(path))
    known = {f.name for f in fields(StaffingConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return StaffingConfig(**data)
