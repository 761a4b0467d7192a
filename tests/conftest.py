"""Pytest configuration and shared fixtures."""

import pytest

from staffing.domain.db import DatabaseManager


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: end-to-end CLI tests using a file database (deselect with '-m \"not integration\"')"
    )


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    manager = DatabaseManager("sqlite:///:memory:")
    manager.create_tables()
    session = manager.get_session()
    yield session
    session.close()
    manager.dispose()


@pytest.fixture
def file_db(tmp_path):
    """File-backed database shared by several sessions."""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'staffing.db'}")
    manager.create_tables()
    yield manager
    manager.dispose()
