"""
Baseline schema and the numbered migration steps.

SQLite cannot change a column's type or nullability in place, so reshaping a
column goes: rename to a temporary name, add the new column, copy the values
across (translating null/sentinel on the way), drop the temporary column.
Every step runs on a connection that is already inside a transaction.
"""
from dataclasses import dataclass
from typing import Callable

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection

from job_hunter.core.exceptions import SchemaConflict

# Revision 0. Order matters only for readability; SQLite resolves
# REFERENCES lazily.
BASELINE_TABLES = {
    "company": """
        CREATE TABLE IF NOT EXISTS company (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            "name" VARCHAR NOT NULL,
            career_page_base_url VARCHAR
        )
    """,
    "company_alt_name": """
        CREATE TABLE IF NOT EXISTS company_alt_name (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            "name" VARCHAR NOT NULL,
            company_id INTEGER NOT NULL,
            FOREIGN KEY (company_id) REFERENCES company(id)
        )
    """,
    "job_post": """
        CREATE TABLE IF NOT EXISTS job_post (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            "location" VARCHAR NOT NULL,
            location_type VARCHAR NOT NULL,
            "url" VARCHAR NOT NULL,
            min_yoe INTEGER,
            max_yoe INTEGER,
            min_pay_cents INTEGER,
            max_pay_cents INTEGER,
            date_posted INTEGER,
            company_id INTEGER NOT NULL,
            FOREIGN KEY (company_id) REFERENCES company(id)
        )
    """,
    "job_application": """
        CREATE TABLE IF NOT EXISTS job_application (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            "status" VARCHAR NOT NULL,
            date_applied INTEGER,
            date_responded INTEGER,
            job_post_id INTEGER NOT NULL,
            FOREIGN KEY (job_post_id) REFERENCES job_post(id)
        )
    """,
}


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    upgrade: Callable[[Connection], None]


def column_info(conn: Connection, table: str, column: str) -> dict | None:
    """Reflected column dict (name, type, nullable, default) or None if absent."""
    inspector = inspect(conn)
    if table not in inspector.get_table_names():
        raise SchemaConflict(f"Table {table} does not exist")
    for col in inspector.get_columns(table):
        if col["name"] == column:
            return col
    return None


def reshape_column(
    conn: Connection,
    table: str,
    column: str,
    new_definition: str,
    copy_expression: str,
) -> None:
    """
    Replace table.column with a column declared as new_definition.

    copy_expression is evaluated per row with {old} standing for the previous
    value, e.g. "COALESCE({old}, 0)".
    """
    temp = f"{column}_temp"
    conn.execute(text(f'ALTER TABLE {table} RENAME COLUMN "{column}" TO {temp}'))
    conn.execute(text(f'ALTER TABLE {table} ADD COLUMN "{column}" {new_definition}'))
    conn.execute(text(f'UPDATE {table} SET "{column}" = ' + copy_expression.format(old=temp)))
    conn.execute(text(f"ALTER TABLE {table} DROP COLUMN {temp}"))


def add_company_hidden(conn: Connection) -> None:
    hidden = column_info(conn, "company", "hidden")
    if hidden is None:
        conn.execute(text('ALTER TABLE company ADD COLUMN "hidden" INTEGER NOT NULL DEFAULT 0'))
        return
    if not hidden["nullable"]:
        raise SchemaConflict("company.hidden is already NOT NULL", details=hidden["name"])
    reshape_column(conn, "company", "hidden", "INTEGER NOT NULL DEFAULT 0", "COALESCE({old}, 0)")


def require_date_retrieved(conn: Connection) -> None:
    retrieved = column_info(conn, "job_post", "date_retrieved")
    if retrieved is None:
        conn.execute(text("ALTER TABLE job_post ADD COLUMN date_retrieved INTEGER NOT NULL DEFAULT 0"))
        return
    if not retrieved["nullable"]:
        raise SchemaConflict("job_post.date_retrieved is already NOT NULL")
    reshape_column(conn, "job_post", "date_retrieved", "INTEGER NOT NULL DEFAULT 0", "COALESCE({old}, 0)")


def relax_date_retrieved(conn: Connection) -> None:
    retrieved = column_info(conn, "job_post", "date_retrieved")
    if retrieved is None:
        raise SchemaConflict("job_post.date_retrieved does not exist")
    if retrieved["nullable"]:
        raise SchemaConflict("job_post.date_retrieved is already nullable")
    reshape_column(conn, "job_post", "date_retrieved", "INTEGER", "NULLIF({old}, 0)")


MIGRATIONS = [
    Migration(1, "add company hidden flag", add_company_hidden),
    Migration(2, "make job_post date_retrieved not null", require_date_retrieved),
    Migration(3, "make job_post date_retrieved nullable", relax_date_retrieved),
]
