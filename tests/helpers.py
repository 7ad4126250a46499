from sqlalchemy import inspect, text

from job_hunter.database import begin


def run_sql(engine, sql: str, params: dict | None = None) -> list:
    """Execute one statement in its own transaction; returns fetched rows for SELECTs."""
    with begin(engine) as conn:
        result = conn.execute(text(sql), params or {})
        return list(result) if result.returns_rows else []


def columns(engine, table: str) -> dict[str, bool]:
    """{column name: nullable} for table."""
    with begin(engine) as conn:
        return {c["name"]: c["nullable"] for c in inspect(conn).get_columns(table)}
