"""Wires the store, repositories, preferences and view-state holders once."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from db.client import Store, open_store

from . import config
from .preferences import ThemePreferences
from .repositories import ActionRecordRepository, DailyExpenseRepository
from .viewmodels import (
    ExpenseRecordsViewModel,
    ExpenseViewModel,
    FoodViewModel,
    MainViewModel,
    RecordsViewModel,
    ThemeViewModel,
)


@dataclass(slots=True)
class AppContainer:
    store: Store
    actions: ActionRecordRepository
    expenses: DailyExpenseRepository
    preferences: ThemePreferences
    main: MainViewModel
    food: FoodViewModel
    expense: ExpenseViewModel
    records: RecordsViewModel
    expense_records: ExpenseRecordsViewModel
    theme: ThemeViewModel

    @classmethod
    def create(
        cls,
        *,
        database_url: str | None = None,
        preferences_path: Path | None = None,
    ) -> AppContainer:
        store = open_store(config.resolve_database_url(database_url))
        actions = ActionRecordRepository(store)
        expenses = DailyExpenseRepository(store)
        preferences = ThemePreferences(preferences_path or config.preferences_path())
        return cls(
            store=store,
            actions=actions,
            expenses=expenses,
            preferences=preferences,
            main=MainViewModel(),
            food=FoodViewModel(actions),
            expense=ExpenseViewModel(expenses),
            records=RecordsViewModel(actions),
            expense_records=ExpenseRecordsViewModel(expenses),
            theme=ThemeViewModel(preferences),
        )

    def holders(self) -> tuple:
        return (self.main, self.food, self.expense, self.records, self.expense_records, self.theme)

    async def join(self) -> None:
        """Wait for every holder's in-flight work; re-raise the first failure."""

        for holder in self.holders():
            await holder.join()

    def close(self) -> None:
        self.store.dispose()


__all__ = ["AppContainer"]
