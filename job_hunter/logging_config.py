import logging
import sys


def setup_logging(level: int | str | None = None) -> None:
    """Configure root logger for the package."""
    if level is None:
        from job_hunter.config import settings
        level = settings.log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    root = logging.getLogger()
    root.setLevel(level)
    if root.handlers:
        root.handlers.clear()
    root.addHandler(handler)
    # SQL echo goes through this logger; keep it quiet unless asked for
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
