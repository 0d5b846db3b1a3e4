from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from daily_balance.cli import app

runner = CliRunner()


def _invoke(*args: str, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


def test_migrate_creates_default_database(_isolate_data_dir: Path) -> None:
    result = _invoke("migrate")
    assert result.exit_code == 0, result.output
    assert "schema version 3" in result.output
    assert (_isolate_data_dir / "app_database.db").exists()


def test_log_and_records_listing() -> None:
    assert _invoke("log", "cigarette").exit_code == 0
    assert _invoke("log", "beer", "--description", "IPA").exit_code == 0
    assert _invoke("food", "tortilla").exit_code == 0

    result = _invoke("records")
    assert result.exit_code == 0, result.output
    lines = [line.split("\t") for line in result.output.strip().splitlines()]
    assert {line[2] for line in lines} == {"cigarette", "beer", "comida"}
    assert ["IPA"] == [line[3] for line in lines if line[2] == "beer"]

    today = _invoke("records", "--today", "beer")
    assert len(today.output.strip().splitlines()) == 1


def test_status_reports_today_counters() -> None:
    _invoke("log", "cigarette")
    _invoke("log", "cigarette")
    result = _invoke("status")
    assert result.exit_code == 0, result.output
    assert "today: 2 cigarettes, 0 beers" in result.output
    assert "Smoke-free for 00:00" in result.output


def test_add_expense_normalizes_and_lists() -> None:
    result = _invoke(
        "add-expense", "--amount", "12.5", "--category", "comida", "--origin", "Nomina", "--note", "a, b"
    )
    assert result.exit_code == 0, result.output

    listing = _invoke("expenses")
    fields = listing.output.strip().split("\t")
    assert fields[1:3] == ["12.50", "Comida"]
    assert fields[4:] == ["Nomina", "a, b"]


def test_add_expense_rejects_invalid_amount() -> None:
    result = _invoke("add-expense", "--amount", "0", "--category", "x", "--origin", "Eci")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert _invoke("expenses").output.strip() == ""


def test_update_and_delete_expense() -> None:
    _invoke("add-expense", "--amount", "3", "--category", "Ocio", "--origin", "Eci")
    expense_id = _invoke("expenses").output.split("\t")[0]

    updated = _invoke("update-expense", expense_id, "--amount", "4.5", "--note", "cine")
    assert updated.exit_code == 0, updated.output
    fields = _invoke("expenses").output.strip().split("\t")
    assert fields[1] == "4.50"
    assert fields[-1] == "cine"

    assert _invoke("delete-expense", expense_id).exit_code == 0
    missing = _invoke("delete-expense", expense_id)
    assert missing.exit_code == 1
    assert "no expense with id" in missing.output


def test_delete_records_requires_confirmation() -> None:
    _invoke("log", "beer")
    aborted = _invoke("delete-records", input="n\n")
    assert aborted.exit_code == 1
    assert _invoke("records").output.strip() != ""

    assert _invoke("delete-records", "--yes").exit_code == 0
    assert _invoke("records").output.strip() == ""


def test_delete_record_and_delete_today() -> None:
    _invoke("log", "beer")
    _invoke("log", "beer")
    _invoke("log", "cigarette")
    first_id = _invoke("records").output.splitlines()[0].split("\t")[0]

    assert _invoke("delete-record", first_id).exit_code == 0
    assert _invoke("delete-record", first_id).exit_code == 1

    assert _invoke("delete-today", "beer").exit_code == 0
    assert _invoke("records", "--today", "beer").output.strip() == ""


def test_exports_write_csv(tmp_path: Path) -> None:
    _invoke("log", "comida", "--description", "pan, queso")
    _invoke("add-expense", "--amount", "2", "--category", "Casa", "--origin", "Eci")

    records_csv = tmp_path / "out" / "records.csv"
    result = _invoke("export-records", "--output", str(records_csv))
    assert result.exit_code == 0, result.output
    lines = records_csv.read_text(encoding="utf-8").split("\n")
    assert lines[0] == "type,date,description"
    assert lines[1].startswith("comida,") and lines[1].endswith(",pan  queso")

    expenses_csv = tmp_path / "expenses.csv"
    assert _invoke("export-expenses", "-o", str(expenses_csv)).exit_code == 0
    exp_lines = expenses_csv.read_text(encoding="utf-8").split("\n")
    assert exp_lines[0] == "amount,category,date,origin,note"
    assert exp_lines[1].startswith("2.0,Casa,")


def test_dark_mode_round_trip(_isolate_data_dir: Path) -> None:
    assert "dark mode: off" in _invoke("dark-mode").output
    assert _invoke("dark-mode", "on").exit_code == 0
    assert "dark mode: on" in _invoke("dark-mode").output
    doc = json.loads((_isolate_data_dir / "settings.json").read_text(encoding="utf-8"))
    assert doc == {"settings": {"dark_mode": True}}
    assert _invoke("dark-mode", "maybe").exit_code == 1


def test_unknown_sort_column_is_an_error() -> None:
    result = _invoke("expenses", "--sort-by", "color")
    assert result.exit_code == 1
    assert "unknown sort column" in result.output


def test_broken_database_url_reports_error(tmp_path: Path) -> None:
    bad = tmp_path / "file-not-dir"
    bad.write_text("x", encoding="utf-8")
    result = _invoke("--database-url", f"sqlite+pysqlite:///{bad}/db.sqlite", "status")
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_add_expense_rejects_infinite_amount() -> None:
    result = _invoke("add-expense", "--amount", "1e400", "--category", "x", "--origin", "Eci")
    assert result.exit_code == 1
    assert _invoke("expenses").output.strip() == ""


def test_unknown_log_level_does_not_break_commands(monkeypatch) -> None:
    monkeypatch.setenv("DAILY_BALANCE_LOG_LEVEL", "verbose")
    result = _invoke("status")
    assert result.exit_code == 0, result.output
