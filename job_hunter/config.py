from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # SQLAlchemy URL of the store
    database_url: str = "sqlite:///job_hunter.db"

    # Applied to every SQLite connection; empty string leaves the default
    sqlite_journal_mode: str = "WAL"

    sql_echo: bool = False

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
