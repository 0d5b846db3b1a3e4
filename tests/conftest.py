"""Pytest configuration for test isolation.

The application keeps its database, preference file and log file under a data
directory (``DAILY_BALANCE_HOME``, default ``~/.daily_balance``). To keep tests
hermetic we point that directory, and every path derived from it, at the
test's own temporary directory via an autouse fixture. Each test that needs a
store gets a fresh file-backed SQLite database with all migrations applied.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Make the monorepo packages importable without an install step.
_ROOT = Path(__file__).resolve().parents[1]
for _p in (_ROOT, _ROOT / "libs" / "db" / "src", _ROOT / "packages"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

from db.client import Store, open_store  # noqa: E402

from tests.helpers.db import sqlite_url  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Force a per-test data directory so tests don't share on-disk state."""

    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("DAILY_BALANCE_HOME", os.fspath(home))
    monkeypatch.delenv("DAILY_BALANCE_DATABASE_URL", raising=False)
    monkeypatch.delenv("DAILY_BALANCE_PREFERENCES", raising=False)
    return home


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return sqlite_url(tmp_path / "db" / "app_database.db")


@pytest.fixture()
def store(database_url: str) -> Iterator[Store]:
    s = open_store(database_url)
    try:
        yield s
    finally:
        s.dispose()
