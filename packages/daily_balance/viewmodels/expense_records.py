"""Expense history with a user-selectable sort."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from db.models.tracker import DailyExpense

from .. import csv_export
from ..repositories import DailyExpenseRepository
from ..state import StateField
from .base import ViewModel

SORT_KEYS: dict[str, Callable[[DailyExpense], Any]] = {
    "amount": lambda e: e.amount,
    "category": lambda e: e.category,
    "date": lambda e: e.date,
    "origin": lambda e: e.origin or "",
    "note": lambda e: e.note or "",
}
SORT_COLUMNS: tuple[str, ...] = tuple(SORT_KEYS)


class ExpenseRecordsViewModel(ViewModel):
    def __init__(self, expenses: DailyExpenseRepository) -> None:
        super().__init__()
        self._expenses = expenses
        self.expense_records: StateField[list[DailyExpense]] = StateField([])
        self.sort_column: StateField[str] = StateField("date")
        self.sort_ascending: StateField[bool] = StateField(False)

    def sorted_records(self) -> list[DailyExpense]:
        key = SORT_KEYS[self.sort_column.value]
        return sorted(self.expense_records.value, key=key, reverse=not self.sort_ascending.value)

    def sort_by(self, column: str) -> None:
        """Sort on ``column``; picking the current column flips the direction."""

        if column not in SORT_KEYS:
            raise ValueError(f"unknown sort column {column!r}; expected one of {SORT_COLUMNS}")
        if column == self.sort_column.value:
            self.sort_ascending.set(not self.sort_ascending.value)
        else:
            self.sort_column.set(column)
            self.sort_ascending.set(True)

    async def _load(self) -> None:
        self.expense_records.set(await self._expenses.get_all())

    def request_expense_records(self) -> None:
        self._launch(self._load())

    def delete_expense(self, expense: DailyExpense) -> None:
        self._logger.debug("delete_expense id=%s", expense.id)
        self._launch(self._delete(expense))

    async def _delete(self, expense: DailyExpense) -> None:
        await self._expenses.delete(expense)
        await self._load()

    def update_expense(self, expense: DailyExpense) -> None:
        self._logger.debug("update_expense id=%s", expense.id)
        self._launch(self._update(expense))

    async def _update(self, expense: DailyExpense) -> None:
        await self._expenses.update(expense)
        await self._load()

    def export_expenses_to_csv(self, expenses: Iterable[DailyExpense]) -> str:
        return csv_export.export_expenses_to_csv(expenses)


__all__ = ["SORT_COLUMNS", "ExpenseRecordsViewModel"]
