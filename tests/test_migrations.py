import pytest

from job_hunter.core.exceptions import SchemaConflict, StorageUnavailable
from job_hunter.database import make_engine
from job_hunter.migrations import BASELINE_TABLES, MIGRATIONS, Migration, MigrationManager
from job_hunter.migrations.steps import reshape_column

from helpers import columns, run_sql


def _add_company(engine, name, url=None):
    run_sql(
        engine,
        "INSERT INTO company (name, career_page_base_url) VALUES (:name, :url)",
        {"name": name, "url": url},
    )


def _add_post(engine, company_id=1, url="https://acme.example/jobs/1"):
    run_sql(
        engine,
        "INSERT INTO job_post (location, location_type, url, company_id) "
        "VALUES ('Remote', 'remote', :url, :company_id)",
        {"url": url, "company_id": company_id},
    )


def test_initialize_creates_final_schema(engine, manager):
    applied = manager.initialize()

    assert applied == [1, 2, 3]
    assert manager.current_version() == 3
    assert manager.pending_versions() == []
    company = columns(engine, "company")
    assert set(company) == {"id", "name", "career_page_base_url", "hidden"}
    assert company["hidden"] is False
    post = columns(engine, "job_post")
    assert post["date_retrieved"] is True
    assert "date_retrieved_temp" not in post
    assert set(columns(engine, "job_application")) == {
        "id", "status", "date_applied", "date_responded", "job_post_id",
    }
    assert set(columns(engine, "company_alt_name")) == {"id", "name", "company_id"}


def test_initialize_twice_is_noop(engine, manager):
    manager.initialize()
    _add_company(engine, "Acme")

    assert manager.initialize() == []
    assert manager.applied_versions() == [1, 2, 3]
    assert run_sql(engine, "SELECT name FROM company") == [("Acme",)]


def test_initialize_baseline_only(baseline, manager):
    assert "hidden" not in columns(baseline, "company")
    assert "date_retrieved" not in columns(baseline, "job_post")
    assert manager.applied_versions() == []
    assert manager.pending_versions() == [1, 2, 3]
    assert manager.current_version() == 0


def test_migration_1_backfills_hidden_false(baseline, manager):
    _add_company(baseline, "Acme", "https://acme.example/careers")
    _add_company(baseline, "Globex")
    _add_company(baseline, "Initech", "https://initech.example")

    manager.apply_migration(1)

    rows = run_sql(baseline, "SELECT name, career_page_base_url, hidden FROM company ORDER BY id")
    assert rows == [
        ("Acme", "https://acme.example/careers", 0),
        ("Globex", None, 0),
        ("Initech", "https://initech.example", 0),
    ]
    assert columns(baseline, "company")["hidden"] is False


def test_migration_1_reshapes_legacy_nullable_hidden(baseline, manager):
    run_sql(baseline, 'ALTER TABLE company ADD COLUMN "hidden" INTEGER')
    _add_company(baseline, "Acme")
    run_sql(baseline, "INSERT INTO company (name, hidden) VALUES ('Globex', 1)")

    manager.apply_migration(1)

    assert run_sql(baseline, "SELECT name, hidden FROM company ORDER BY id") == [("Acme", 0), ("Globex", 1)]
    cols = columns(baseline, "company")
    assert cols["hidden"] is False
    assert "hidden_temp" not in cols


def test_migration_2_sets_date_retrieved_zero(baseline, manager):
    manager.apply_migration(1)
    _add_company(baseline, "Acme")
    for i in range(4):
        _add_post(baseline, url=f"https://acme.example/jobs/{i}")

    manager.apply_migration(2)

    assert run_sql(baseline, "SELECT date_retrieved FROM job_post") == [(0,)] * 4
    assert columns(baseline, "job_post")["date_retrieved"] is False


def test_migration_2_keeps_existing_values(baseline, manager):
    manager.apply_migration(1)
    run_sql(baseline, "ALTER TABLE job_post ADD COLUMN date_retrieved INTEGER")
    _add_company(baseline, "Acme")
    _add_post(baseline)
    run_sql(
        baseline,
        "INSERT INTO job_post (location, location_type, url, company_id, date_retrieved) "
        "VALUES ('Berlin', 'onsite', 'https://acme.example/jobs/2', 1, 1700000000)",
    )

    manager.apply_migration(2)

    assert run_sql(baseline, "SELECT date_retrieved FROM job_post ORDER BY id") == [(0,), (1700000000,)]


def test_migration_3_turns_zero_into_null(baseline, manager):
    manager.upgrade(target=2)
    _add_company(baseline, "Acme")
    _add_post(baseline, url="https://acme.example/jobs/1")
    run_sql(
        baseline,
        "INSERT INTO job_post (location, location_type, url, company_id, date_retrieved) "
        "VALUES ('Berlin', 'onsite', 'https://acme.example/jobs/2', 1, 1700000000)",
    )
    run_sql(
        baseline,
        "INSERT INTO job_post (location, location_type, url, company_id, date_retrieved) "
        "VALUES ('Paris', 'hybrid', 'https://acme.example/jobs/3', 1, 0)",
    )

    manager.apply_migration(3)

    rows = run_sql(baseline, "SELECT url, date_retrieved FROM job_post ORDER BY id")
    assert rows == [
        ("https://acme.example/jobs/1", None),
        ("https://acme.example/jobs/2", 1700000000),
        ("https://acme.example/jobs/3", None),
    ]
    assert columns(baseline, "job_post")["date_retrieved"] is True


def test_reapplying_a_step_is_refused(manager):
    manager.initialize()

    with pytest.raises(SchemaConflict, match="already applied"):
        manager.apply_migration(2)


def test_out_of_order_step_is_refused(baseline, manager):
    with pytest.raises(SchemaConflict) as exc:
        manager.apply_migration(2)

    assert exc.value.details == [1]
    assert manager.applied_versions() == []
    assert "date_retrieved" not in columns(baseline, "job_post")


def test_unknown_step_is_refused(baseline, manager):
    with pytest.raises(SchemaConflict):
        manager.apply_migration(4)
    with pytest.raises(SchemaConflict):
        manager.upgrade(target=7)


def test_precondition_mismatch_raises_schema_conflict(baseline, manager):
    run_sql(baseline, 'ALTER TABLE company ADD COLUMN "hidden" INTEGER NOT NULL DEFAULT 0')

    with pytest.raises(SchemaConflict, match="already NOT NULL"):
        manager.apply_migration(1)

    assert manager.applied_versions() == []


def test_migration_3_requires_column(baseline, manager):
    manager.apply_migration(1)
    run_sql(
        baseline,
        "INSERT INTO schema_migrations (version, description, installed_on, execution_time_ms) "
        "VALUES (2, 'stamped by hand', 0, 0)",
    )

    with pytest.raises(SchemaConflict, match="does not exist"):
        manager.apply_migration(3)

    assert manager.applied_versions() == [1, 2]


def test_failed_step_leaves_schema_untouched(engine):
    def broken(conn):
        reshape_column(conn, "job_post", "date_posted", "INTEGER NOT NULL DEFAULT 0", "COALESCE({old}, 0)")
        raise RuntimeError("disk on fire")

    manager = MigrationManager(engine, migrations=[MIGRATIONS[0], Migration(2, "broken", broken)])
    manager.initialize(apply_pending=False)
    manager.apply_migration(1)
    before = columns(engine, "job_post")

    with pytest.raises(RuntimeError):
        manager.apply_migration(2)

    assert columns(engine, "job_post") == before
    assert manager.applied_versions() == [1]


def test_upgrade_stops_at_target(baseline, manager):
    assert manager.upgrade(target=2) == [1, 2]
    assert manager.current_version() == 2
    assert manager.pending_versions() == [3]
    assert manager.upgrade() == [3]
    assert manager.upgrade() == []


def test_ledger_bootstrapped_for_store_without_ledger(engine, manager):
    manager.initialize()
    run_sql(engine, "DROP TABLE schema_migrations")

    assert manager.initialize() == []
    assert manager.applied_versions() == [1, 2, 3]


def test_ledger_bootstrap_leaves_later_steps_pending(baseline, manager):
    manager.upgrade(target=2)
    run_sql(baseline, "DROP TABLE schema_migrations")

    manager.initialize(apply_pending=False)

    assert manager.applied_versions() == [1, 2]
    assert manager.upgrade() == [3]


def test_ledger_bootstrap_for_store_in_original_shape(baseline, manager):
    _add_company(baseline, "Acme")
    run_sql(baseline, "DROP TABLE schema_migrations")
    run_sql(baseline, "ALTER TABLE job_post ADD COLUMN date_retrieved INTEGER")
    run_sql(
        baseline,
        "INSERT INTO job_post (location, location_type, url, company_id, date_retrieved) "
        "VALUES ('Remote', 'remote', 'https://acme.example/1', 1, NULL), "
        "('Remote', 'remote', 'https://acme.example/2', 1, 1700000000)",
    )

    assert manager.initialize(apply_pending=False) == []
    assert manager.applied_versions() == [2, 3]
    assert manager.upgrade() == [1]

    assert columns(baseline, "company")["hidden"] is False
    assert columns(baseline, "job_post")["date_retrieved"] is True
    assert run_sql(baseline, "SELECT hidden FROM company") == [(0,)]
    assert run_sql(baseline, "SELECT date_retrieved FROM job_post ORDER BY id") == [(None,), (1700000000,)]


def test_ledger_bootstrapped_for_partial_store(engine, manager):
    run_sql(engine, BASELINE_TABLES["job_post"])
    run_sql(engine, "ALTER TABLE job_post ADD COLUMN date_retrieved INTEGER NOT NULL DEFAULT 0")

    assert manager.initialize() == [1, 3]
    assert manager.applied_versions() == [1, 2, 3]
    assert columns(engine, "company")["hidden"] is False
    assert columns(engine, "job_post")["date_retrieved"] is True


def test_unreachable_store_raises_storage_unavailable(tmp_path):
    missing = tmp_path / "no" / "such" / "dir" / "jobs.db"
    manager = MigrationManager(make_engine(f"sqlite:///{missing}"))

    with pytest.raises(StorageUnavailable):
        manager.initialize()
