"""Data access for the tracker tables.

Two layers, mirroring how the rest of the package talks to the database:

- Plain functions taking a ``Session`` (``count_actions_between`` etc.). Callers
  own the transaction scope; these never commit.
- ``ActionRecordRepository`` / ``DailyExpenseRepository``: ``async`` façades
  that run one function per call inside ``Store.session_scope()`` on a worker
  thread (``asyncio.to_thread``), so the event loop never blocks on SQLite.

Errors from the store propagate unchanged; there is no retry policy. Range
arguments are epoch milliseconds and inclusive on both ends; this layer knows
nothing about timezones.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from db.client import Store
from db.models.tracker import ActionRecord, DailyExpense

from .logging_setup import get_logger

R = TypeVar("R")

_logger = get_logger("daily_balance.repositories")


# ----------------------------------------------------------------------------
# Session-level operations: action_record
# ----------------------------------------------------------------------------


def insert_action(session: Session, record: ActionRecord) -> int:
    session.add(record)
    session.flush()
    return record.id


def list_actions(session: Session) -> list[ActionRecord]:
    stmt = select(ActionRecord).order_by(ActionRecord.timestamp.desc(), ActionRecord.id.desc())
    return list(session.scalars(stmt).all())


def last_action_timestamp(session: Session, action_type: str) -> int | None:
    stmt = select(func.max(ActionRecord.timestamp)).where(ActionRecord.type == action_type)
    return session.execute(stmt).scalar_one_or_none()


def count_actions_between(session: Session, action_type: str, from_ms: int, to_ms: int) -> int:
    stmt = select(func.count(ActionRecord.id)).where(
        ActionRecord.type == action_type,
        ActionRecord.timestamp >= from_ms,
        ActionRecord.timestamp <= to_ms,
    )
    return int(session.execute(stmt).scalar_one())


def list_actions_between(
    session: Session, action_type: str, from_ms: int, to_ms: int
) -> list[ActionRecord]:
    stmt = (
        select(ActionRecord)
        .where(
            ActionRecord.type == action_type,
            ActionRecord.timestamp >= from_ms,
            ActionRecord.timestamp <= to_ms,
        )
        .order_by(ActionRecord.timestamp.desc(), ActionRecord.id.desc())
    )
    return list(session.scalars(stmt).all())


def delete_actions_between(session: Session, action_type: str, from_ms: int, to_ms: int) -> int:
    stmt = delete(ActionRecord).where(
        ActionRecord.type == action_type,
        ActionRecord.timestamp >= from_ms,
        ActionRecord.timestamp <= to_ms,
    )
    return session.execute(stmt).rowcount or 0


def delete_action_by_id(session: Session, record_id: int) -> int:
    return session.execute(delete(ActionRecord).where(ActionRecord.id == record_id)).rowcount or 0


def delete_all_actions(session: Session) -> int:
    return session.execute(delete(ActionRecord)).rowcount or 0


# ----------------------------------------------------------------------------
# Session-level operations: daily_expense
# ----------------------------------------------------------------------------


def insert_expense(session: Session, expense: DailyExpense) -> int:
    session.add(expense)
    session.flush()
    return expense.id


def update_expense(session: Session, expense: DailyExpense) -> int:
    """Replace the row with ``expense.id``. An unknown id updates nothing."""

    stmt = (
        update(DailyExpense)
        .where(DailyExpense.id == expense.id)
        .values(
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
            note=expense.note,
            origin=expense.origin,
        )
    )
    return session.execute(stmt).rowcount or 0


def delete_expense(session: Session, expense_id: int) -> int:
    return session.execute(delete(DailyExpense).where(DailyExpense.id == expense_id)).rowcount or 0


def list_expenses(session: Session) -> list[DailyExpense]:
    stmt = select(DailyExpense).order_by(DailyExpense.date.desc(), DailyExpense.id.desc())
    return list(session.scalars(stmt).all())


def get_expense(session: Session, expense_id: int) -> DailyExpense | None:
    return session.get(DailyExpense, expense_id)


# ----------------------------------------------------------------------------
# Async façades
# ----------------------------------------------------------------------------


class _StoreBacked:
    def __init__(self, store: Store) -> None:
        self._store = store

    def _run_sync(self, fn: Callable[..., R], *args: object) -> R:
        with self._store.session_scope() as session:
            return fn(session, *args)

    async def _run(self, fn: Callable[..., R], *args: object) -> R:
        return await asyncio.to_thread(self._run_sync, fn, *args)


class ActionRecordRepository(_StoreBacked):
    async def insert(self, record: ActionRecord) -> int:
        new_id = await self._run(insert_action, record)
        _logger.debug("action inserted id=%d type=%s ts=%d", new_id, record.type, record.timestamp)
        return new_id

    async def get_all(self) -> list[ActionRecord]:
        return await self._run(list_actions)

    async def get_last_timestamp_by_type(self, action_type: str) -> int | None:
        return await self._run(last_action_timestamp, action_type)

    async def count_by_type_between(self, action_type: str, from_ms: int, to_ms: int) -> int:
        return await self._run(count_actions_between, action_type, from_ms, to_ms)

    async def get_by_type_between(
        self, action_type: str, from_ms: int, to_ms: int
    ) -> list[ActionRecord]:
        return await self._run(list_actions_between, action_type, from_ms, to_ms)

    async def delete_by_type_between(self, action_type: str, from_ms: int, to_ms: int) -> int:
        n = await self._run(delete_actions_between, action_type, from_ms, to_ms)
        _logger.debug("actions deleted type=%s from=%d to=%d count=%d", action_type, from_ms, to_ms, n)
        return n

    async def delete_by_id(self, record_id: int) -> int:
        return await self._run(delete_action_by_id, record_id)

    async def delete_all(self) -> int:
        n = await self._run(delete_all_actions)
        _logger.debug("all actions deleted count=%d", n)
        return n


class DailyExpenseRepository(_StoreBacked):
    async def insert(self, expense: DailyExpense) -> int:
        new_id = await self._run(insert_expense, expense)
        _logger.debug("expense inserted id=%d category=%s", new_id, expense.category)
        return new_id

    async def update(self, expense: DailyExpense) -> None:
        n = await self._run(update_expense, expense)
        if n == 0:
            _logger.debug("expense update matched no row id=%s", expense.id)

    async def delete(self, expense: DailyExpense) -> None:
        await self._run(delete_expense, expense.id)

    async def get_all(self) -> list[DailyExpense]:
        return await self._run(list_expenses)

    async def get_by_id(self, expense_id: int) -> DailyExpense | None:
        return await self._run(get_expense, expense_id)


def distinct_categories(expenses: Sequence[DailyExpense]) -> list[str]:
    return sorted({e.category for e in expenses})


__all__ = [
    "ActionRecordRepository",
    "DailyExpenseRepository",
    "count_actions_between",
    "delete_action_by_id",
    "delete_actions_between",
    "delete_all_actions",
    "delete_expense",
    "distinct_categories",
    "get_expense",
    "insert_action",
    "insert_expense",
    "last_action_timestamp",
    "list_actions",
    "list_actions_between",
    "list_expenses",
    "update_expense",
]
