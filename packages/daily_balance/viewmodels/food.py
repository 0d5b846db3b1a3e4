from __future__ import annotations

from db.models.tracker import ActionRecord

from ..repositories import ActionRecordRepository
from ..state import StateField
from ..timeutil import now_millis
from .base import ViewModel

FOOD_ACTION = "comida"


class FoodViewModel(ViewModel):
    def __init__(self, actions: ActionRecordRepository) -> None:
        super().__init__()
        self._actions = actions
        self.description: StateField[str] = StateField("")

    def set_description(self, text: str) -> None:
        self.description.set(text)

    def register_food(self) -> None:
        """Log a food action carrying the current description, then clear it."""

        text = self.description.value.strip()
        record = ActionRecord(type=FOOD_ACTION, timestamp=now_millis(), description=text or None)
        self._logger.debug("register_food description=%r", record.description)
        self._launch(self._actions.insert(record))
        self.reset()

    def reset(self) -> None:
        self.description.set("")


__all__ = ["FOOD_ACTION", "FoodViewModel"]
