import logging
import time
from datetime import datetime, timezone

from sqlalchemy import inspect, select, text
from sqlalchemy.engine import Connection, Engine

from job_hunter.core.exceptions import SchemaConflict
from job_hunter.database import begin
from job_hunter.migrations.steps import BASELINE_TABLES, MIGRATIONS, Migration, column_info
from job_hunter.models.schema_migration import SchemaMigration

logger = logging.getLogger(__name__)

_ledger = SchemaMigration.__table__


class MigrationManager:
    """
    Creates the baseline tables and applies numbered migrations in order.

    Each step runs in its own transaction together with its ledger row, so a
    step is either fully applied and recorded or not applied at all.
    """

    def __init__(self, engine: Engine, migrations: list[Migration] | None = None):
        self.engine = engine
        steps = MIGRATIONS if migrations is None else migrations
        self.migrations = {m.version: m for m in steps}

    def initialize(self, apply_pending: bool = True) -> list[int]:
        """
        Create the ledger and any missing baseline tables.

        A store with tables that predate the ledger, even only some of them,
        has its applied steps inferred from the live schema once the missing
        tables exist. With apply_pending, every pending step is then applied.
        Returns the versions applied by this call.
        """
        with begin(self.engine) as conn:
            existing = set(inspect(conn).get_table_names())
            _ledger.create(conn, checkfirst=True)
            missing = [name for name in BASELINE_TABLES if name not in existing]
            for name in missing:
                conn.execute(text(BASELINE_TABLES[name]))
            if missing:
                logger.info("Created tables: %s", ", ".join(missing))
            if existing & set(BASELINE_TABLES) and not self._applied(conn):
                self._bootstrap_ledger(conn)

        if not apply_pending:
            return []
        return self.upgrade()

    def apply_migration(self, version: int) -> None:
        """Apply one step; refuses unknown, repeated or out-of-order versions."""
        migration = self.migrations.get(version)
        if migration is None:
            raise SchemaConflict(f"Unknown migration {version}")

        with begin(self.engine) as conn:
            _ledger.create(conn, checkfirst=True)
            applied = self._applied(conn)
            if version in applied:
                raise SchemaConflict(f"Migration {version} is already applied")
            missing = [v for v in self.migrations if v < version and v not in applied]
            if missing:
                raise SchemaConflict(
                    f"Migration {version} requires {missing} to be applied first",
                    details=missing,
                )

            started = time.perf_counter()
            try:
                migration.upgrade(conn)
            except SchemaConflict:
                raise
            except Exception as e:
                logger.exception("Migration %d (%s) failed: %s", version, migration.description, e)
                raise
            elapsed_ms = int((time.perf_counter() - started) * 1000)

            conn.execute(
                _ledger.insert().values(
                    version=version,
                    description=migration.description,
                    installed_on=datetime.now(timezone.utc),
                    execution_time_ms=elapsed_ms,
                )
            )
        logger.info("Applied migration %d (%s) in %d ms", version, migration.description, elapsed_ms)

    def upgrade(self, target: int | None = None) -> list[int]:
        """Apply pending steps up to target (default: latest). Returns versions applied."""
        if target is not None and target not in self.migrations:
            raise SchemaConflict(f"Unknown migration {target}")
        done = []
        for version in self.pending_versions():
            if target is not None and version > target:
                break
            self.apply_migration(version)
            done.append(version)
        if not done:
            logger.info("Schema already up to date")
        return done

    def applied_versions(self) -> list[int]:
        with begin(self.engine) as conn:
            if not inspect(conn).has_table(_ledger.name):
                return []
            return self._applied(conn)

    def pending_versions(self) -> list[int]:
        applied = set(self.applied_versions())
        return [v for v in sorted(self.migrations) if v not in applied]

    def current_version(self) -> int:
        applied = self.applied_versions()
        return max(applied) if applied else 0

    def _applied(self, conn: Connection) -> list[int]:
        rows = conn.execute(select(_ledger.c.version).order_by(_ledger.c.version))
        return [row[0] for row in rows]

    def _bootstrap_ledger(self, conn: Connection) -> None:
        """Record the steps a pre-ledger store already carries."""
        versions = []
        hidden = column_info(conn, "company", "hidden")
        if hidden is not None and not hidden["nullable"]:
            versions.append(1)
        retrieved = column_info(conn, "job_post", "date_retrieved")
        if retrieved is not None:
            versions.append(2)
            if retrieved["nullable"]:
                versions.append(3)

        now = datetime.now(timezone.utc)
        for version in versions:
            migration = self.migrations.get(version)
            if migration is None:
                continue
            conn.execute(
                _ledger.insert().values(
                    version=version,
                    description=migration.description,
                    installed_on=now,
                    execution_time_ms=0,
                )
            )
        if versions:
            logger.info("Ledger bootstrapped from existing schema: %s", versions)
