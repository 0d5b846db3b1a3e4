from __future__ import annotations

from ..preferences import ThemePreferences
from ..state import StateField
from .base import ViewModel


class ThemeViewModel(ViewModel):
    def __init__(self, preferences: ThemePreferences) -> None:
        super().__init__()
        self._preferences = preferences

    @property
    def is_dark_mode(self) -> StateField[bool]:
        return self._preferences.is_dark_mode

    def set_dark_mode(self, enabled: bool) -> None:
        self._launch(self._preferences.set_dark_mode(enabled))

    def toggle_dark_mode(self) -> None:
        self.set_dark_mode(not self.is_dark_mode.value)


__all__ = ["ThemeViewModel"]
