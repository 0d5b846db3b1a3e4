"""Runtime configuration resolved from the environment.

Environment variables (a ``.env`` in the working directory is loaded by the
CLI before these are read, without overriding real environment values):

- ``DAILY_BALANCE_HOME``: data directory, default ``~/.daily_balance``.
- ``DAILY_BALANCE_DATABASE_URL``: SQLAlchemy URL of the tracker store.
- ``DAILY_BALANCE_PREFERENCES``: path of the preference document.
- ``DAILY_BALANCE_LOG_LEVEL``: read by :mod:`daily_balance.logging_setup`.
"""

from __future__ import annotations

import os
from pathlib import Path

# Fixed logical name of the embedded database file.
DATABASE_NAME = "app_database.db"
PREFERENCES_NAME = "settings.json"
LOG_FILE_NAME = "daily_balance.log"

# Payment sources offered by the expense entry screen.
ORIGIN_OPTIONS: tuple[str, ...] = ("Nomina", "NoCuenta", "Credito", "Eci")

CSV_MIME_TYPE = "text/csv"
RECORDS_EXPORT_FILENAME = "records.csv"
EXPENSES_EXPORT_FILENAME = "expenses.csv"


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser()
    return None


def data_dir() -> Path:
    """Return the directory holding the database, preferences and log file."""

    return _env_path("DAILY_BALANCE_HOME") or (Path.home() / ".daily_balance")


def resolve_database_url(override: str | None = None) -> str:
    """Resolve the store URL: explicit override, then env, then the default file."""

    if override and override.strip():
        return override.strip()
    env_url = os.getenv("DAILY_BALANCE_DATABASE_URL")
    if env_url and env_url.strip():
        return env_url.strip()
    return f"sqlite+pysqlite:///{data_dir() / DATABASE_NAME}"


def preferences_path() -> Path:
    return _env_path("DAILY_BALANCE_PREFERENCES") or (data_dir() / PREFERENCES_NAME)


def log_file_path() -> Path:
    return data_dir() / LOG_FILE_NAME


__all__ = [
    "CSV_MIME_TYPE",
    "DATABASE_NAME",
    "EXPENSES_EXPORT_FILENAME",
    "ORIGIN_OPTIONS",
    "RECORDS_EXPORT_FILENAME",
    "data_dir",
    "log_file_path",
    "preferences_path",
    "resolve_database_url",
]
