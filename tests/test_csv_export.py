from __future__ import annotations

from datetime import datetime

from db.models.tracker import ActionRecord, DailyExpense
from daily_balance.csv_export import (
    EXPENSES_HEADER,
    RECORDS_HEADER,
    export_expenses_to_csv,
    export_records_to_csv,
)


def _local_ms(*args: int) -> int:
    return int(datetime(*args).timestamp() * 1000)


def test_expense_export_two_rows_has_three_lines_and_strips_note_commas() -> None:
    rows = [
        DailyExpense(
            amount=5.0,
            category="Comida",
            date=_local_ms(2024, 3, 9, 13, 45, 0),
            origin="Nomina",
            note="pan, leche, huevos",
        ),
        DailyExpense(
            amount=10.5,
            category="Ocio",
            date=_local_ms(2024, 3, 10, 8, 0, 59),
            origin="Eci",
            note=None,
        ),
    ]
    text = export_expenses_to_csv(rows)
    lines = text.split("\n")

    assert len(lines) == 3
    assert lines[0] == EXPENSES_HEADER == "amount,category,date,origin,note"
    assert lines[1] == "5.0,Comida,2024/03/09 13:45:00,Nomina,pan  leche  huevos"
    assert lines[2] == "10.5,Ocio,2024/03/10 08:00:59,Eci,"
    assert not text.endswith("\n")


def test_expense_export_missing_origin_renders_empty() -> None:
    row = DailyExpense(amount=1.0, category="Cat, egory", date=_local_ms(2024, 1, 1), origin=None)
    assert export_expenses_to_csv([row]).split("\n")[1] == "1.0,Cat  egory,2024/01/01 00:00:00,,"


def test_records_export_format() -> None:
    rows = [
        ActionRecord(type="comida", timestamp=_local_ms(2024, 12, 31, 23, 59, 59), description="a, b"),
        ActionRecord(type="cigarette", timestamp=_local_ms(2025, 1, 1, 0, 0, 0), description=None),
    ]
    assert export_records_to_csv(rows) == "\n".join(
        [
            RECORDS_HEADER,
            "comida,2024/12/31 23:59:59,a  b",
            "cigarette,2025/01/01 00:00:00,",
        ]
    )


def test_empty_exports_are_header_only() -> None:
    assert export_records_to_csv([]) == "type,date,description"
    assert export_expenses_to_csv([]) == "amount,category,date,origin,note"
