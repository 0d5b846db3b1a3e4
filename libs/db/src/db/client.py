"""SQLAlchemy engine/session helpers for the tracker database.

Usage
-----
from db.client import open_store

store = open_store("sqlite+pysqlite:////path/to/app_database.db")
with store.session_scope() as s:
    s.execute(...)

The application constructs exactly one ``Store`` at startup and passes it to
every access object. There is no module-level engine.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker


def _ensure_sqlite_parent(url: str) -> None:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return
    database = parsed.database
    if not database or database == ":memory:":
        return
    Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def create_store_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    SQLite connections are handed between worker threads (every access-layer
    call runs in ``asyncio.to_thread``), so the same-thread check is disabled;
    SQLite's own file locking serializes conflicting writes.
    """

    if not database_url:
        raise RuntimeError("database URL is empty; cannot initialize the store")
    connect_args: dict[str, object] = {}
    if make_url(database_url).get_backend_name() == "sqlite":
        _ensure_sqlite_parent(database_url)
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


class Store:
    """Handle over the tracker database: one engine plus a session factory."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_maker: sessionmaker[Session] = sessionmaker(
            bind=engine, expire_on_commit=False, class_=Session
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def url(self) -> str:
        return self._engine.url.render_as_string(hide_password=True)

    def session(self) -> Session:
        """Return a new session bound to this store's engine."""

        return self._session_maker()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""

        session = self.session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self._engine.dispose()


def open_store(database_url: str, *, migrate: bool = True) -> Store:
    """Open (or create) the database and apply pending migrations.

    Raises ``db.migrate.MigrationError`` when a migration fails; callers are
    expected to treat that as fatal.
    """

    from .migrate import upgrade  # local import keeps alembic off the hot path

    engine = create_store_engine(database_url)
    if migrate:
        try:
            upgrade(engine)
        except Exception:
            engine.dispose()
            raise
    return Store(engine)


__all__ = [
    "Store",
    "create_store_engine",
    "open_store",
]
