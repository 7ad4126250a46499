import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from job_hunter.config import settings
from job_hunter.core.exceptions import ConstraintViolation, StorageUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()


def _install_sqlite_hooks(engine: Engine, journal_mode: str) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # pysqlite would otherwise commit before every DDL statement;
        # BEGIN is emitted from the "begin" hook instead.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if journal_mode:
            cursor.execute(f"PRAGMA journal_mode={journal_mode}")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def make_engine(url: str | None = None, **kwargs) -> Engine:
    """Create an engine; SQLite engines get FK enforcement and transactional DDL."""
    kwargs.setdefault("echo", settings.sql_echo)
    engine = create_engine(url or settings.database_url, pool_pre_ping=True, **kwargs)
    if engine.dialect.name == "sqlite":
        _install_sqlite_hooks(engine, settings.sqlite_journal_mode)
    return engine


engine = make_engine()


# Session factory bound to the configured store.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def begin(bind: Engine):
    """Yield a connection inside one transaction; commit on success, roll back on error."""
    try:
        conn: Connection = bind.connect()
    except OperationalError as e:
        url = bind.url.render_as_string(hide_password=True)
        raise StorageUnavailable(f"Could not connect to {url}", details=str(e.orig)) from e
    with conn:
        with conn.begin():
            yield conn


def commit_or_raise(db: Session) -> None:
    """Commit the session, turning integrity errors into ConstraintViolation."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Write rejected: %s", e.orig)
        raise ConstraintViolation(str(e.orig), details=e.params) from e


def init_db(bind: Engine | None = None, apply_pending: bool = True) -> list[int]:
    """Create missing tables and bring the schema to the latest migration."""
    from job_hunter.migrations import MigrationManager

    try:
        applied = MigrationManager(bind or engine).initialize(apply_pending=apply_pending)
        logger.info("Database initialized")
        return applied
    except Exception as e:
        logger.exception("Database initialization failed: %s", e)
        raise
