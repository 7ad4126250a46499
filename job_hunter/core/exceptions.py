"""
Error taxonomy for the store.
Everything raised on purpose by this package inherits from JobHunterError.
"""
from typing import Any, Optional


class JobHunterError(Exception):
    """Base error carrying a stable code and a human readable message."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(self.message)


class ConstraintViolation(JobHunterError):
    """Foreign-key, not-null or empty-value violation on write."""

    def __init__(
        self,
        message: str = "Constraint violation",
        details: Optional[Any] = None,
    ):
        super().__init__("CONSTRAINT_VIOLATION", message, details)


class SchemaConflict(JobHunterError):
    """Migration precondition unmet, or step applied out of order / twice."""

    def __init__(
        self,
        message: str = "Schema conflict",
        details: Optional[Any] = None,
    ):
        super().__init__("SCHEMA_CONFLICT", message, details)


class StorageUnavailable(JobHunterError):
    """Underlying engine could not be reached."""

    def __init__(
        self,
        message: str = "Storage unavailable",
        details: Optional[Any] = None,
    ):
        super().__init__("STORAGE_UNAVAILABLE", message, details)
