"""Wall-clock helpers: epoch milliseconds, the local "today" window, display formats."""

from __future__ import annotations

import time
from datetime import datetime, timedelta

DAY_MS = 24 * 60 * 60 * 1000
# Below this the smoke-free banner switches to its warning tone.
SMOKE_FREE_WARNING_MS = 90 * 60 * 1000

CSV_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"
TIME_OF_DAY_FORMAT = "%H:%M:%S"


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def _local(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000).astimezone()


def today_range_millis(now_ms: int | None = None) -> tuple[int, int]:
    """Return ``(start, end)`` of the local day containing ``now_ms``.

    ``start`` is local midnight and ``end`` is one millisecond before the next
    local midnight, so an inclusive range query covers exactly one calendar
    day. The next midnight is computed on the calendar rather than by adding
    24 hours so days with a DST shift keep their true length.
    """

    today = _local(now_millis() if now_ms is None else now_ms).date()
    next_day = today + timedelta(days=1)
    start = datetime(today.year, today.month, today.day).astimezone()
    next_start = datetime(next_day.year, next_day.month, next_day.day).astimezone()
    start_ms = int(start.timestamp() * 1000)
    end_ms = int(next_start.timestamp() * 1000) - 1
    return start_ms, end_ms


def format_timestamp(ms: int, fmt: str = CSV_DATE_FORMAT) -> str:
    """Render epoch milliseconds in the process's local timezone."""

    return datetime.fromtimestamp(ms / 1000).strftime(fmt)


def format_elapsed(elapsed_ms: int) -> str:
    """``"2d 5h"`` once a full day has passed, otherwise ``"HH:MM"``."""

    total_minutes = max(0, elapsed_ms) // 60_000
    days = total_minutes // (60 * 24)
    if days >= 1:
        hours = (total_minutes // 60) % 24
        return f"{days}d {hours}h"
    hours = total_minutes // 60
    minutes = total_minutes % 60
    return f"{hours:02d}:{minutes:02d}"


__all__ = [
    "CSV_DATE_FORMAT",
    "DAY_MS",
    "SMOKE_FREE_WARNING_MS",
    "TIME_OF_DAY_FORMAT",
    "format_elapsed",
    "format_timestamp",
    "now_millis",
    "today_range_millis",
]
