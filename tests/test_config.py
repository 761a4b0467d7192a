"""Tests for configuration loading."""

import json

import pytest

from staffing.config import StaffingConfig, load_config
from staffing.domain.db import DEFAULT_DB_URL
from staffing.errors import ConfigError


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg.db_url == DEFAULT_DB_URL
    assert cfg.log_level == "WARNING"
    assert cfg.cancelled_status == 2


def test_load_yaml(tmp_path):
    path = tmp_path / "staffing.yaml"
    path.write_text("db_url: sqlite:///plant.db\nlog_level: debug\ncancelled_status: 9\n")

    cfg = load_config(path)
    assert cfg.db_url == "sqlite:///plant.db"
    assert cfg.log_level == "DEBUG"
    assert cfg.cancelled_status == 9


def test_load_json(tmp_path):
    path = tmp_path / "staffing.json"
    path.write_text(json.dumps({"log_level": "INFO"}))

    cfg = load_config(path)
    assert cfg.log_level == "INFO"
    assert cfg.db_url == DEFAULT_DB_URL


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == StaffingConfig()


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "staffing.yaml"
    path.write_text("db_url: sqlite:///x.db\nshift_policy: strict\n")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert "shift_policy" in str(exc_info.value)


def test_invalid_values_rejected(tmp_path):
    with pytest.raises(ConfigError):
        StaffingConfig(log_level="LOUD")
    with pytest.raises(ConfigError):
        StaffingConfig(cancelled_status="cancelled")

    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(path)
