"""Top-level navigation and export requests."""

from __future__ import annotations

from enum import Enum

from ..state import OneShotRequest, StateField
from .base import ViewModel


class Screen(str, Enum):
    HOME = "home"
    FOOD = "food"
    EXPENSE = "expense"
    RECORDS = "records"
    EXPENSE_RECORDS = "expense_records"
    TODAY_RECORDS = "today_records"
    MESSAGE = "message"


class MainViewModel(ViewModel):
    """Current screen, the message shown on ``Screen.MESSAGE``, export requests.

    There is no back stack; leaving a screen is always an explicit
    ``navigate_to(Screen.HOME)``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.current_screen: StateField[Screen] = StateField(Screen.HOME)
        self.message: StateField[str] = StateField("")
        self.records_export = OneShotRequest()
        self.expenses_export = OneShotRequest()

    def navigate_to(self, screen: Screen) -> None:
        self._logger.debug("navigate screen=%s", screen.value)
        self.current_screen.set(screen)

    def set_message(self, message: str) -> None:
        self.message.set(message)

    def request_records_export(self) -> bool:
        return self.records_export.request()

    def records_export_handled(self) -> None:
        self.records_export.handled()

    def request_expenses_export(self) -> bool:
        return self.expenses_export.request()

    def expenses_export_handled(self) -> None:
        self.expenses_export.handled()


__all__ = ["MainViewModel", "Screen"]
