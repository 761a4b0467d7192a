"""Employee availability and assignment for manufacturing operations.

Modules:
- config: load and validate configuration (YAML or JSON)
- errors: exception types
- domain: SQLAlchemy models, time intervals and repositories
- services: availability resolver, working-hours checks, allocation builder
- io: CSV import/export helpers
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "errors",
    "domain",
    "services",
    "io",
    "cli",
]
