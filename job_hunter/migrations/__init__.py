"""
Forward-only schema migrations.

The baseline tables are created by MigrationManager.initialize(); the numbered
steps in MIGRATIONS then reshape them. Applied steps are recorded in the
schema_migrations ledger.
"""
from job_hunter.migrations.manager import MigrationManager
from job_hunter.migrations.steps import BASELINE_TABLES, MIGRATIONS, Migration

__all__ = [
    "MigrationManager",
    "Migration",
    "MIGRATIONS",
    "BASELINE_TABLES",
]
