"""Persisted user preferences (currently only dark mode).

On-disk layout (``settings.json`` under the data directory by default)::

    {"settings": {"dark_mode": false}}

The document is validated with pydantic on read and written atomically
(``.tmp`` then ``os.replace``). A missing or unreadable file yields defaults;
write failures raise ``PreferencesError``.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .logging_setup import get_logger
from .state import StateField

_logger = get_logger("daily_balance.preferences")


class PreferencesError(RuntimeError):
    """Raised when the preference document cannot be written."""


class SettingsGroup(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    dark_mode: bool = False


class PreferencesDocument(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    settings: SettingsGroup = Field(default_factory=SettingsGroup)


def load_document(path: Path) -> PreferencesDocument:
    if not path.exists():
        return PreferencesDocument()
    try:
        return PreferencesDocument.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError):
        _logger.warning(
            "preferences unreadable; using defaults path=%s", os.fspath(path), exc_info=True
        )
        return PreferencesDocument()


def write_document(path: Path, document: PreferencesDocument) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(
            json.dumps(document.model_dump(mode="json"), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        os.replace(tmp, path)
    except OSError as exc:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise PreferencesError(f"could not write preferences to {path}: {exc}") from exc


class ThemePreferences:
    """Dark-mode flag backed by the preference document.

    ``is_dark_mode`` is loaded once at construction and updated only after a
    successful write, so observers never see a value that was not persisted.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._document = load_document(path)
        self.is_dark_mode: StateField[bool] = StateField(self._document.settings.dark_mode)

    @property
    def path(self) -> Path:
        return self._path

    async def set_dark_mode(self, enabled: bool) -> None:
        document = self._document.model_copy(
            update={"settings": SettingsGroup(dark_mode=enabled)}
        )
        await asyncio.to_thread(write_document, self._path, document)
        self._document = document
        _logger.debug("dark_mode persisted value=%s", enabled)
        self.is_dark_mode.set(enabled)


__all__ = [
    "PreferencesDocument",
    "PreferencesError",
    "SettingsGroup",
    "ThemePreferences",
    "load_document",
    "write_document",
]
