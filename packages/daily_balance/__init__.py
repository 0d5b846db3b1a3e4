"""Public interface for the ``daily_balance`` package.

Re-exports the access objects, view-state holders and export helpers that the
CLI and the interactive screens are built from. There is no runtime logic here.
"""

from .container import AppContainer
from .csv_export import export_expenses_to_csv, export_records_to_csv
from .file_save import SaveChooser, fixed_destination, save_document
from .preferences import PreferencesError, ThemePreferences
from .repositories import ActionRecordRepository, DailyExpenseRepository
from .state import OneShotRequest, StateField
from .viewmodels import (
    ExpenseRecordsViewModel,
    ExpenseViewModel,
    FoodViewModel,
    MainViewModel,
    RecordsViewModel,
    Screen,
    ThemeViewModel,
)

__all__ = [
    # Wiring
    "AppContainer",
    # Access layer
    "ActionRecordRepository",
    "DailyExpenseRepository",
    "ThemePreferences",
    "PreferencesError",
    # Holders
    "MainViewModel",
    "FoodViewModel",
    "ExpenseViewModel",
    "RecordsViewModel",
    "ExpenseRecordsViewModel",
    "ThemeViewModel",
    "Screen",
    "StateField",
    "OneShotRequest",
    # Export
    "export_records_to_csv",
    "export_expenses_to_csv",
    "save_document",
    "fixed_destination",
    "SaveChooser",
]
