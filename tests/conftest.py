import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from job_hunter.database import make_engine
from job_hunter.migrations import MigrationManager


@pytest.fixture
def engine():
    """In-memory SQLite; StaticPool keeps every checkout on the same database."""
    eng = make_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield eng
    eng.dispose()


@pytest.fixture
def manager(engine) -> MigrationManager:
    return MigrationManager(engine)


@pytest.fixture
def baseline(engine, manager):
    """Store at revision 0: tables exist, no migration applied."""
    manager.initialize(apply_pending=False)
    return engine


@pytest.fixture
def db(engine, manager):
    manager.initialize()
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
