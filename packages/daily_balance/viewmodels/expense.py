"""Expense entry form state."""

from __future__ import annotations

import math

from db.models.tracker import DailyExpense

from ..repositories import DailyExpenseRepository, distinct_categories
from ..state import StateField
from ..timeutil import now_millis
from .base import ViewModel


def parse_amount(text: str) -> float | None:
    """Parse a plain decimal amount; ``None`` for anything else, including
    digit separators and values that are not finite."""

    text = text.strip()
    if "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def is_amount_valid(text: str) -> bool:
    """``True`` iff ``text`` parses as a float strictly greater than zero."""

    value = parse_amount(text)
    return value is not None and value > 0.0


def normalize_category(text: str) -> str:
    text = text.strip()
    return text[:1].upper() + text[1:]


class ExpenseViewModel(ViewModel):
    def __init__(self, expenses: DailyExpenseRepository) -> None:
        super().__init__()
        self._expenses = expenses
        self.amount_text: StateField[str] = StateField("")
        self.category: StateField[str] = StateField("")
        self.origin: StateField[str] = StateField("")
        self.note: StateField[str] = StateField("")
        self.is_amount_valid: StateField[bool] = StateField(True)
        self.show_expense_error: StateField[bool] = StateField(False)
        self.category_options: StateField[list[str]] = StateField([])
        self.is_submitting: StateField[bool] = StateField(False)

    def set_amount_text(self, text: str) -> None:
        self.amount_text.set(text)
        self.is_amount_valid.set(is_amount_valid(text))
        self.show_expense_error.set(False)

    def set_category(self, text: str) -> None:
        self.category.set(text)
        self.show_expense_error.set(False)

    def set_origin(self, text: str) -> None:
        self.origin.set(text)
        self.show_expense_error.set(False)

    def set_note(self, text: str) -> None:
        self.note.set(text)
        self.show_expense_error.set(False)

    def reset_fields(self) -> None:
        self.amount_text.set("")
        self.category.set("")
        self.origin.set("")
        self.note.set("")
        self.is_amount_valid.set(True)
        self.show_expense_error.set(False)

    def register_expense(self) -> bool:
        """Validate the form and insert one expense dated now.

        Returns ``False`` (and raises the error flag) when the amount is not a
        positive number or category/origin is blank. While a previous
        submission is still being written, further calls return ``False``
        without touching the form.
        """

        if self.is_submitting.value:
            self._logger.debug("register_expense ignored; submission in flight")
            return False

        amount = parse_amount(self.amount_text.value)
        category = normalize_category(self.category.value)
        origin = self.origin.value.strip()
        if not is_amount_valid(self.amount_text.value) or not category or not origin:
            self.show_expense_error.set(True)
            return False

        note = self.note.value.strip() or None
        expense = DailyExpense(
            amount=amount, category=category, date=now_millis(), note=note, origin=origin
        )
        self._logger.debug("register_expense amount=%s category=%s origin=%s", amount, category, origin)
        self.is_submitting.set(True)
        self._launch(self._submit(expense))
        self.reset_fields()
        return True

    async def _submit(self, expense: DailyExpense) -> None:
        try:
            await self._expenses.insert(expense)
        finally:
            self.is_submitting.set(False)
        await self._load_categories()

    async def _load_categories(self) -> None:
        self.category_options.set(distinct_categories(await self._expenses.get_all()))

    def reload_categories(self) -> None:
        self._launch(self._load_categories())


__all__ = ["ExpenseViewModel", "is_amount_valid", "normalize_category", "parse_amount"]
