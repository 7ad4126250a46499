from sqlalchemy import Column, Integer, String

from job_hunter.database import Base
from job_hunter.database_types import UnixTimestamp


class SchemaMigration(Base):
    """Ledger row: one per applied migration step."""

    __tablename__ = "schema_migrations"

    version = Column(Integer, primary_key=True, autoincrement=False)
    description = Column(String, nullable=False)
    installed_on = Column(UnixTimestamp, nullable=False)
    execution_time_ms = Column(Integer, nullable=False, default=0)
