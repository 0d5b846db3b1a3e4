"""Shared SQLAlchemy models registry for the tracker database.

Currently includes the action log and daily expense tables used by
``daily_balance``.
"""

from .tracker import ActionRecord, Base, DailyExpense

__all__ = [
    "Base",
    "ActionRecord",
    "DailyExpense",
]
