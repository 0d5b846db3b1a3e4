from __future__ import annotations

import json
from pathlib import Path

import pytest

from daily_balance.preferences import PreferencesError, ThemePreferences, load_document


def test_missing_file_defaults_to_light(tmp_path: Path) -> None:
    prefs = ThemePreferences(tmp_path / "settings.json")
    assert prefs.is_dark_mode.value is False


@pytest.mark.asyncio
async def test_set_dark_mode_writes_settings_group(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    prefs = ThemePreferences(path)
    seen: list[bool] = []
    prefs.is_dark_mode.subscribe(seen.append)

    await prefs.set_dark_mode(True)

    assert seen == [True]
    assert json.loads(path.read_text(encoding="utf-8")) == {"settings": {"dark_mode": True}}
    assert not path.with_suffix(".json.tmp").exists()


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        '{"settings": {"dark_mode": "yes"}}',
        '{"settings": {"dark_mode": true, "font": "big"}}',
    ],
)
def test_unreadable_document_falls_back_to_defaults(tmp_path: Path, content: str) -> None:
    path = tmp_path / "settings.json"
    path.write_text(content, encoding="utf-8")
    assert load_document(path).settings.dark_mode is False
    assert ThemePreferences(path).is_dark_mode.value is False


@pytest.mark.asyncio
async def test_write_failure_raises_and_keeps_value(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    prefs = ThemePreferences(blocker / "settings.json")

    with pytest.raises(PreferencesError):
        await prefs.set_dark_mode(True)
    assert prefs.is_dark_mode.value is False
