"""db: tracker database library (SQLAlchemy/Alembic/SQLite).

Public exports
--------------
- ``Base`` and ``metadata`` for Alembic autogenerate/targeting
- ORM models in ``db.models.tracker`` (re-exported for convenience)
- The explicit ``Store`` handle and ``open_store`` in ``db.client``
"""

from __future__ import annotations

from .models.tracker import ActionRecord, Base, DailyExpense

# Re-export SQLAlchemy metadata for Alembic's env.py
metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "ActionRecord",
    "DailyExpense",
]
