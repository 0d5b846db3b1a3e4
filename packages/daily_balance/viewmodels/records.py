"""Action records: history list, today's counters and the smoke-free banner."""

from __future__ import annotations

from collections.abc import Iterable

from db.models.tracker import ActionRecord

from .. import csv_export
from ..repositories import ActionRecordRepository
from ..state import StateField
from ..timeutil import now_millis, today_range_millis
from .base import ViewModel

CIGARETTE = "cigarette"
BEER = "beer"


class RecordsViewModel(ViewModel):
    """Cached snapshots of ``action_record``.

    Every write is followed by a re-read of whatever cached field it affects;
    the counters are never adjusted locally.
    """

    def __init__(self, actions: ActionRecordRepository) -> None:
        super().__init__()
        self._actions = actions
        self.records: StateField[list[ActionRecord]] = StateField([])
        self.last_cigarette_timestamp: StateField[int | None] = StateField(None)
        self.today_cigarettes_count: StateField[int] = StateField(0)
        self.today_beers_count: StateField[int] = StateField(0)
        self.today_type: StateField[str | None] = StateField(None)
        self.today_type_records: StateField[list[ActionRecord]] = StateField([])

    # -- refreshes ---------------------------------------------------------

    async def _load_last_cigarette(self) -> None:
        self.last_cigarette_timestamp.set(
            await self._actions.get_last_timestamp_by_type(CIGARETTE)
        )

    async def _load_today_counts(self) -> None:
        start, end = today_range_millis()
        self.today_cigarettes_count.set(
            await self._actions.count_by_type_between(CIGARETTE, start, end)
        )
        self.today_beers_count.set(await self._actions.count_by_type_between(BEER, start, end))

    async def _load_records(self) -> None:
        self.records.set(await self._actions.get_all())

    async def _load_today_type_records(self) -> None:
        action_type = self.today_type.value
        if action_type is None:
            self.today_type_records.set([])
            return
        start, end = today_range_millis()
        self.today_type_records.set(
            await self._actions.get_by_type_between(action_type, start, end)
        )

    async def _load_home_stats(self) -> None:
        await self._load_last_cigarette()
        await self._load_today_counts()

    def refresh_home_stats(self) -> None:
        self._launch(self._load_home_stats())

    def refresh_last_cigarette(self) -> None:
        self._launch(self._load_last_cigarette())

    def refresh_today_counts(self) -> None:
        self._launch(self._load_today_counts())

    def request_records(self) -> None:
        self._launch(self._load_records())

    def request_today_records_by_type(self, action_type: str) -> None:
        self.today_type.set(action_type)
        self._launch(self._load_today_type_records())

    # -- writes ------------------------------------------------------------

    def register_action(self, action_type: str, description: str | None = None) -> None:
        record = ActionRecord(type=action_type, timestamp=now_millis(), description=description)
        self._logger.debug("register_action type=%s", action_type)
        self._launch(self._register(record))

    async def _register(self, record: ActionRecord) -> None:
        await self._actions.insert(record)
        await self._load_home_stats()

    def delete_record(self, record: ActionRecord) -> None:
        self._logger.debug("delete_record id=%s", record.id)
        self._launch(self._delete_record(record.id))

    async def _delete_record(self, record_id: int) -> None:
        await self._actions.delete_by_id(record_id)
        await self._load_records()
        await self._load_today_type_records()
        await self._load_home_stats()

    def delete_today_records_by_type(self, action_type: str) -> None:
        self._logger.debug("delete_today_records_by_type type=%s", action_type)
        self._launch(self._delete_today(action_type))

    async def _delete_today(self, action_type: str) -> None:
        start, end = today_range_millis()
        await self._actions.delete_by_type_between(action_type, start, end)
        self.today_type.set(action_type)
        await self._load_today_type_records()
        await self._load_home_stats()

    def delete_all(self) -> None:
        self._logger.debug("delete_all")
        self._launch(self._delete_all())

    async def _delete_all(self) -> None:
        await self._actions.delete_all()
        self.records.set([])
        self.last_cigarette_timestamp.set(None)
        self.today_cigarettes_count.set(0)
        self.today_beers_count.set(0)
        self.today_type_records.set([])

    def export_records_to_csv(self, records: Iterable[ActionRecord]) -> str:
        return csv_export.export_records_to_csv(records)


__all__ = ["BEER", "CIGARETTE", "RecordsViewModel"]
