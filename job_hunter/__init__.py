"""Job application tracking database: schema, migrations and data access."""

__version__ = "0.1.0"
