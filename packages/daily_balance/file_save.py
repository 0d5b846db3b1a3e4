"""Host "save document" interaction.

The application does not pick destinations itself. It asks a *chooser* for a
destination given a suggested file name and MIME type; the chooser returns a
path, or ``None`` when the user cancels. Granted destinations receive the
content as UTF-8 bytes, written atomically (``.tmp`` then ``os.replace``).
"""

from __future__ import annotations

import asyncio
import contextlib
import os
from collections.abc import Awaitable, Callable
from pathlib import Path

from .logging_setup import get_logger

SaveChooser = Callable[[str, str], Awaitable[Path | None]]

_logger = get_logger("daily_balance.file_save")


def write_document(destination: Path, content: str) -> None:
    destination = destination.expanduser()
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp = destination.with_name(destination.name + ".tmp")
    try:
        tmp.write_bytes(content.encode("utf-8"))
        os.replace(tmp, destination)
    except Exception:
        with contextlib.suppress(FileNotFoundError):
            tmp.unlink()
        raise


async def save_document(
    chooser: SaveChooser,
    *,
    filename: str,
    mime_type: str,
    content: str,
) -> Path | None:
    """Ask ``chooser`` for a destination and write ``content`` there.

    Returns the written path, or ``None`` when the chooser cancelled.
    """

    destination = await chooser(filename, mime_type)
    if destination is None:
        _logger.info("save cancelled filename=%s", filename)
        return None
    await asyncio.to_thread(write_document, destination, content)
    _logger.info("saved document path=%s bytes=%d", os.fspath(destination), len(content))
    return destination


def fixed_destination(path: Path) -> SaveChooser:
    """Chooser that always grants ``path`` (non-interactive callers)."""

    async def _choose(_filename: str, _mime_type: str) -> Path | None:
        return path

    return _choose


__all__ = ["SaveChooser", "fixed_destination", "save_document", "write_document"]
