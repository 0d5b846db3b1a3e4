"""Shared scaffolding for view-state holders.

Holders expose ``StateField`` attributes and intent methods. Intents validate
synchronously, then hand the store work to ``_launch`` which schedules it as a
task on the running event loop. ``join()`` waits for everything launched so
far and re-raises the first failure, which is how callers (the screen loop, the
CLI, tests) observe store errors.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from ..logging_setup import get_logger


class ViewModel:
    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._errors: list[BaseException] = []
        self._logger = get_logger(f"daily_balance.viewmodels.{type(self).__name__}")

    def _launch(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("intent failed: %s", exc, exc_info=exc)
            self._errors.append(exc)

    async def join(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        if self._errors:
            first, self._errors = self._errors[0], []
            raise first


__all__ = ["ViewModel"]
