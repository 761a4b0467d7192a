"""Database initialization and utilities."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_DB_URL = "sqlite:///staffing.db"


class DatabaseManager:
    """Owns the engine and session factory for one staffing database."""

    def __init__(self, db_url: str = DEFAULT_DB_URL, echo: bool = False):
        """
        Initialize database manager.

        Args:
            db_url: SQLAlchemy database URL (default: sqlite:///staffing.db)
            echo: Log emitted SQL
        """
        self.db_url = db_url
        self.engine = create_engine(db_url, echo=echo)
        self.SessionLocal = sessionmaker(bind=self.engine)

    def create_tables(self) -> None:
        """Create plannings, employees, orders and allocation tables if missing."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Get a new database session.

        Each session has its own connection, so allocations committed by one
        builder are visible to the resolver of another.
        """
        return self.SessionLocal()

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()


def init_database(db_url: str = DEFAULT_DB_URL) -> DatabaseManager:
    """Initialize database and create all tables."""
    manager = DatabaseManager(db_url)
    manager.create_tables()
    print(f"[INFO] Database initialized: {db_url}")
    return manager
