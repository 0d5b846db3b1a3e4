"""CSV text builders for action records and daily expenses.

Output contract
---------------
- A fixed header line, then one line per record in the order given (callers
  pass the rows sorted as they are displayed).
- Fields are comma-joined with no quoting. Commas inside free-text fields are
  replaced by a single space instead of being escaped; this is lossy and
  intentional so the output stays trivially splittable.
- Lines are joined with ``"\\n"``; there is no trailing newline.
- Dates use ``yyyy/MM/dd HH:mm:ss`` in the local timezone.
"""

from __future__ import annotations

from collections.abc import Iterable

from db.models.tracker import ActionRecord, DailyExpense

from .timeutil import CSV_DATE_FORMAT, format_timestamp

RECORDS_HEADER = "type,date,description"
EXPENSES_HEADER = "amount,category,date,origin,note"


def _text(value: str | None) -> str:
    if value is None:
        return ""
    return value.replace(",", " ")


def _amount(value: float) -> str:
    # Keep the float form ("5.0", "10.5") rather than a currency rendering.
    return str(float(value))


def export_records_to_csv(records: Iterable[ActionRecord]) -> str:
    rows = [
        ",".join(
            (
                _text(r.type),
                format_timestamp(r.timestamp, CSV_DATE_FORMAT),
                _text(r.description),
            )
        )
        for r in records
    ]
    return "\n".join([RECORDS_HEADER, *rows])


def export_expenses_to_csv(expenses: Iterable[DailyExpense]) -> str:
    rows = [
        ",".join(
            (
                _amount(e.amount),
                _text(e.category),
                format_timestamp(e.date, CSV_DATE_FORMAT),
                _text(e.origin),
                _text(e.note),
            )
        )
        for e in expenses
    ]
    return "\n".join([EXPENSES_HEADER, *rows])


__all__ = [
    "EXPENSES_HEADER",
    "RECORDS_HEADER",
    "export_expenses_to_csv",
    "export_records_to_csv",
]
