"""Programmatic Alembic entry points for the tracker schema.

The schema version is a monotonic integer. Each Alembic revision id carries
it as a zero-padded prefix (``0002_action_description`` is version 2), so the
integer can be read back from the ``alembic_version`` table without a lookup
table. Revisions are forward-only and additive.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy.engine import Connection, Engine

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

# Bump together with a new file under ``migrations/versions``.
SCHEMA_VERSION: int = 3

logger = logging.getLogger("db.migrate")


class MigrationError(RuntimeError):
    """A migration statement failed; the store cannot be used."""


def alembic_config(
    *,
    connection: Connection | None = None,
    database_url: str | None = None,
) -> Config:
    """Build an in-memory Alembic config pointing at the bundled scripts.

    When ``connection`` is given, ``env.py`` runs the migrations on it instead
    of creating its own engine.
    """

    cfg = Config()
    cfg.set_main_option("script_location", os.fspath(MIGRATIONS_DIR))
    if database_url:
        # ConfigParser interpolation: escape literal percent signs.
        cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    if connection is not None:
        cfg.attributes["connection"] = connection
    return cfg


def revision_to_version(revision: str | None) -> int:
    if not revision:
        return 0
    prefix = revision.split("_", 1)[0]
    if not prefix.isdigit():
        raise ValueError(f"unexpected revision id (no numeric prefix): {revision!r}")
    return int(prefix)


def upgrade(engine: Engine, revision: str = "head") -> None:
    """Apply pending migrations up to ``revision`` in version order."""

    url = engine.url.render_as_string(hide_password=True)
    before = current_version(engine)
    try:
        with engine.begin() as connection:
            command.upgrade(alembic_config(connection=connection), revision)
    except Exception as exc:
        raise MigrationError(f"failed to migrate {url} to {revision}: {exc}") from exc
    after = current_version(engine)
    if after != before:
        logger.info("schema upgraded url=%s from=%d to=%d", url, before, after)


def current_revision(engine: Engine) -> str | None:
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def current_version(engine: Engine) -> int:
    """Return the integer schema version (``0`` for an empty database)."""

    return revision_to_version(current_revision(engine))


__all__ = [
    "MIGRATIONS_DIR",
    "SCHEMA_VERSION",
    "MigrationError",
    "alembic_config",
    "current_revision",
    "current_version",
    "revision_to_version",
    "upgrade",
]
