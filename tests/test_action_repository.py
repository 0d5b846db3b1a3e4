from __future__ import annotations

import pytest

from db.client import Store
from db.models.tracker import ActionRecord
from daily_balance.repositories import ActionRecordRepository

from tests.helpers.db import seed_actions


@pytest.mark.asyncio
async def test_insert_assigns_ids_and_get_all_is_newest_first(store: Store) -> None:
    repo = ActionRecordRepository(store)
    first = await repo.insert(ActionRecord(type="cigarette", timestamp=1_000))
    second = await repo.insert(ActionRecord(type="comida", timestamp=3_000, description="paella"))
    third = await repo.insert(ActionRecord(type="beer", timestamp=2_000))

    assert len({first, second, third}) == 3
    rows = await repo.get_all()
    assert [r.timestamp for r in rows] == [3_000, 2_000, 1_000]
    assert rows[0].description == "paella"
    assert rows[1].description is None


@pytest.mark.asyncio
async def test_last_timestamp_by_type(store: Store) -> None:
    repo = ActionRecordRepository(store)
    assert await repo.get_last_timestamp_by_type("cigarette") is None

    seed_actions(store, [("cigarette", 5_000, None), ("cigarette", 9_000, None), ("beer", 20_000, None)])
    assert await repo.get_last_timestamp_by_type("cigarette") == 9_000
    assert await repo.get_last_timestamp_by_type("beer") == 20_000


@pytest.mark.asyncio
async def test_count_between_is_inclusive_on_both_ends(store: Store) -> None:
    repo = ActionRecordRepository(store)
    seed_actions(
        store,
        [
            ("cigarette", 999, None),
            ("cigarette", 1_000, None),  # lower bound
            ("cigarette", 1_500, None),
            ("cigarette", 2_000, None),  # upper bound
            ("cigarette", 2_001, None),
            ("beer", 1_500, None),
        ],
    )
    assert await repo.count_by_type_between("cigarette", 1_000, 2_000) == 3
    assert await repo.count_by_type_between("beer", 1_000, 2_000) == 1
    assert await repo.count_by_type_between("comida", 1_000, 2_000) == 0


@pytest.mark.asyncio
async def test_get_and_delete_by_type_between(store: Store) -> None:
    repo = ActionRecordRepository(store)
    seed_actions(
        store,
        [
            ("beer", 100, None),
            ("beer", 200, None),
            ("beer", 300, None),
            ("cigarette", 200, None),
        ],
    )
    window = await repo.get_by_type_between("beer", 150, 300)
    assert [r.timestamp for r in window] == [300, 200]

    deleted = await repo.delete_by_type_between("beer", 150, 300)
    assert deleted == 2
    remaining = await repo.get_all()
    assert sorted((r.type, r.timestamp) for r in remaining) == [("beer", 100), ("cigarette", 200)]


@pytest.mark.asyncio
async def test_delete_by_id_and_delete_all(store: Store) -> None:
    repo = ActionRecordRepository(store)
    ids = seed_actions(store, [("beer", 1, None), ("beer", 2, None), ("beer", 3, None)])

    assert await repo.delete_by_id(ids[1]) == 1
    assert await repo.delete_by_id(ids[1]) == 0
    assert [r.id for r in await repo.get_all()] == [ids[2], ids[0]]

    assert await repo.delete_all() == 2
    assert await repo.get_all() == []
