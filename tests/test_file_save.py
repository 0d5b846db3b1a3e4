from __future__ import annotations

from pathlib import Path

import pytest

from daily_balance.file_save import fixed_destination, save_document


@pytest.mark.asyncio
async def test_granted_destination_receives_utf8_bytes(tmp_path: Path) -> None:
    dest = tmp_path / "out" / "records.csv"
    asked: list[tuple[str, str]] = []

    async def chooser(filename: str, mime_type: str) -> Path | None:
        asked.append((filename, mime_type))
        return dest

    saved = await save_document(
        chooser, filename="records.csv", mime_type="text/csv", content="type,date,description\nñ"
    )

    assert saved == dest
    assert asked == [("records.csv", "text/csv")]
    assert dest.read_bytes() == "type,date,description\nñ".encode()
    assert not dest.with_name("records.csv.tmp").exists()


@pytest.mark.asyncio
async def test_cancelled_chooser_writes_nothing(tmp_path: Path) -> None:
    async def chooser(_filename: str, _mime_type: str) -> Path | None:
        return None

    saved = await save_document(chooser, filename="x.csv", mime_type="text/csv", content="a")
    assert saved is None
    assert not (tmp_path / "x.csv").exists()


@pytest.mark.asyncio
async def test_fixed_destination_overwrites(tmp_path: Path) -> None:
    dest = tmp_path / "expenses.csv"
    dest.write_text("old", encoding="utf-8")
    await save_document(fixed_destination(dest), filename="expenses.csv", mime_type="text/csv", content="new")
    assert dest.read_text(encoding="utf-8") == "new"
