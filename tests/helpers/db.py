"""DB helpers for tests: temporary SQLite URLs, seeding, and legacy databases."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable
from pathlib import Path

from db.client import Store
from db.models.tracker import ActionRecord, DailyExpense


def sqlite_url(db_file: Path) -> str:
    """Return a file-backed SQLite URL, creating the parent directory.

    File-backed databases let the worker threads used by the repositories share
    state (in-memory SQLite databases are per-connection by default).
    """

    db_file.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite+pysqlite:///{db_file}"


def seed_actions(store: Store, rows: Iterable[tuple[str, int, str | None]]) -> list[int]:
    """Insert ``(type, timestamp, description)`` rows; return their ids in order."""

    ids: list[int] = []
    with store.session_scope() as session:
        for action_type, ts, description in rows:
            rec = ActionRecord(type=action_type, timestamp=ts, description=description)
            session.add(rec)
            session.flush()
            ids.append(rec.id)
    return ids


def seed_expenses(
    store: Store,
    rows: Iterable[tuple[float, str, int, str | None, str | None]],
) -> list[int]:
    """Insert ``(amount, category, date, origin, note)`` rows; return their ids."""

    ids: list[int] = []
    with store.session_scope() as session:
        for amount, category, date, origin, note in rows:
            exp = DailyExpense(amount=amount, category=category, date=date, origin=origin, note=note)
            session.add(exp)
            session.flush()
            ids.append(exp.id)
    return ids


def create_legacy_v1_database(db_file: Path, rows: Iterable[tuple[str, int]]) -> None:
    """Create a pre-versioning database holding only ``action_record(id, type, timestamp)``.

    This mirrors a database written before schema tracking existed: no
    ``alembic_version`` table and no ``description`` column.
    """

    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    try:
        conn.execute(
            "CREATE TABLE action_record ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, "
            "type TEXT NOT NULL, "
            "timestamp INTEGER NOT NULL)"
        )
        conn.executemany(
            "INSERT INTO action_record (type, timestamp) VALUES (?, ?)", list(rows)
        )
        conn.commit()
    finally:
        conn.close()
