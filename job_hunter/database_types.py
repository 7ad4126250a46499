"""
Custom SQLAlchemy column types.
"""
from datetime import datetime, timezone

from sqlalchemy import Integer, TypeDecorator


class UnixTimestamp(TypeDecorator):
    """
    Timezone-aware datetime stored as integer unix seconds.

    Naive datetimes are taken to be UTC. Values come back as UTC datetimes,
    so the 0 sentinel left by older schema revisions reads as the epoch.
    """
    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, int):
            return value
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
