"""
Create missing tables and apply pending schema migrations.

  python -m job_hunter.scripts.migrate_db             # bring the store to head
  python -m job_hunter.scripts.migrate_db --target 2  # stop after migration 2
  python -m job_hunter.scripts.migrate_db --status    # print the ledger only

The store is taken from DATABASE_URL (see job_hunter.config).
"""
import argparse
import sys

from job_hunter.core.exceptions import JobHunterError
from job_hunter.database import engine
from job_hunter.logging_config import setup_logging
from job_hunter.migrations import MigrationManager


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply schema migrations to the configured database.")
    parser.add_argument("--target", type=int, default=None, help="Last migration to apply")
    parser.add_argument("--status", action="store_true", help="Show applied and pending migrations and exit")
    parser.add_argument(
        "--baseline-only",
        action="store_true",
        help="Create missing tables without applying any migration",
    )
    args = parser.parse_args(argv)

    setup_logging()
    manager = MigrationManager(engine)
    try:
        if args.status:
            print("Applied:", manager.applied_versions() or "none")
            print("Pending:", manager.pending_versions() or "none")
            return 0
        manager.initialize(apply_pending=False)
        if not args.baseline_only:
            applied = manager.upgrade(target=args.target)
            print("Applied:", applied or "nothing, already up to date")
        print("Current version:", manager.current_version())
    except JobHunterError as e:
        print(f"Migration failed [{e.code}]: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
