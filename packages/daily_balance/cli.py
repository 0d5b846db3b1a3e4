"""CLI for the ``daily_balance`` package.

Command handlers (``cmd_*``) return a process exit code and report failures as
``Error: ...`` on stderr; the Typer commands at the bottom are thin wrappers
that parse options and exit with that code. The root callback loads a local
``.env`` (never overriding the real environment) and configures logging once.

Every handler opens the store through ``AppContainer`` (applying pending
migrations), drives the same view-state holders the interactive UI uses, and
joins them before returning so store errors surface here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from db.models.tracker import ActionRecord, DailyExpense

from . import config
from .container import AppContainer
from .logging_setup import configure_logging, get_logger
from .timeutil import format_timestamp
from .viewmodels import is_amount_valid, normalize_category

_logger = get_logger("daily_balance.cli")

Handler = Callable[[AppContainer], Awaitable[int]]


def _execute(database_url: str | None, handler: Handler, *, what: str) -> int:
    """Open the container, run ``handler`` on a fresh event loop, always close."""

    async def _main() -> int:
        container = AppContainer.create(database_url=database_url)
        try:
            code = await handler(container)
            await container.join()
            return code
        finally:
            container.close()

    try:
        return asyncio.run(_main())
    except Exception as e:
        _logger.debug("%s failed", what, exc_info=True)
        typer.echo(f"Error: {what} failed: {e}", err=True)
        return 1


def _record_row(record: ActionRecord) -> str:
    return "\t".join(
        (str(record.id), format_timestamp(record.timestamp), record.type, record.description or "")
    )


def _expense_row(expense: DailyExpense) -> str:
    return "\t".join(
        (
            str(expense.id),
            f"{expense.amount:.2f}",
            expense.category,
            format_timestamp(expense.date),
            expense.origin or "",
            expense.note or "",
        )
    )


# ---- Command handlers --------------------------------------------------------


def cmd_ui(database_url: str | None = None) -> int:
    """Run the interactive screens until the user quits."""

    from .app import run_app

    async def _handler(c: AppContainer) -> int:
        await run_app(c)
        return 0

    return _execute(database_url, _handler, what="interactive session")


def cmd_status(database_url: str | None = None) -> int:
    from db.migrate import current_version

    from .app import smoke_free_banner
    from .timeutil import now_millis

    async def _handler(c: AppContainer) -> int:
        c.records.refresh_home_stats()
        c.records.request_records()
        c.expense_records.request_expense_records()
        await c.join()
        banner, _tone = smoke_free_banner(c.records.last_cigarette_timestamp.value, now_millis())
        typer.echo(f"database: {c.store.url} (schema v{current_version(c.store.engine)})")
        typer.echo(banner)
        typer.echo(
            f"today: {c.records.today_cigarettes_count.value} cigarettes, "
            f"{c.records.today_beers_count.value} beers"
        )
        typer.echo(
            f"records: {len(c.records.records.value)}  "
            f"expenses: {len(c.expense_records.expense_records.value)}"
        )
        typer.echo(f"dark mode: {'on' if c.theme.is_dark_mode.value else 'off'}")
        return 0

    return _execute(database_url, _handler, what="status")


def cmd_log(action_type: str, description: str | None, database_url: str | None = None) -> int:
    action_type = action_type.strip()
    if not action_type:
        typer.echo("Error: action type cannot be empty.", err=True)
        return 1

    async def _handler(c: AppContainer) -> int:
        c.records.register_action(action_type, description or None)
        await c.join()
        typer.echo(f"Logged {action_type}")
        return 0

    return _execute(database_url, _handler, what="log")


def cmd_food(description: str, database_url: str | None = None) -> int:
    async def _handler(c: AppContainer) -> int:
        c.food.set_description(description)
        c.food.register_food()
        await c.join()
        typer.echo("Logged food")
        return 0

    return _execute(database_url, _handler, what="food")


def cmd_add_expense(
    *,
    amount: str,
    category: str,
    origin: str,
    note: str | None = None,
    database_url: str | None = None,
) -> int:
    async def _handler(c: AppContainer) -> int:
        form = c.expense
        form.set_amount_text(amount)
        form.set_category(category)
        form.set_origin(origin)
        form.set_note(note or "")
        if not form.register_expense():
            typer.echo(
                "Error: invalid expense (amount must be > 0; category and origin are required).",
                err=True,
            )
            return 1
        await c.join()
        typer.echo("Expense added")
        return 0

    return _execute(database_url, _handler, what="add-expense")


def cmd_records(today: str | None = None, database_url: str | None = None) -> int:
    async def _handler(c: AppContainer) -> int:
        if today:
            c.records.request_today_records_by_type(today)
            await c.join()
            rows = c.records.today_type_records.value
        else:
            c.records.request_records()
            await c.join()
            rows = c.records.records.value
        for r in rows:
            typer.echo(_record_row(r))
        return 0

    return _execute(database_url, _handler, what="records")


def cmd_expenses(
    sort_by: str = "date", ascending: bool = False, database_url: str | None = None
) -> int:
    from .viewmodels import SORT_COLUMNS

    if sort_by not in SORT_COLUMNS:
        typer.echo(f"Error: unknown sort column '{sort_by}' (use {', '.join(SORT_COLUMNS)}).", err=True)
        return 1

    async def _handler(c: AppContainer) -> int:
        holder = c.expense_records
        holder.sort_column.set(sort_by)
        holder.sort_ascending.set(ascending)
        holder.request_expense_records()
        await c.join()
        for e in holder.sorted_records():
            typer.echo(_expense_row(e))
        return 0

    return _execute(database_url, _handler, what="expenses")


def cmd_delete_records(*, yes: bool = False, database_url: str | None = None) -> int:
    if not yes and not typer.confirm("Delete every action record?", default=False):
        typer.echo("Aborted")
        return 1

    async def _handler(c: AppContainer) -> int:
        c.records.delete_all()
        await c.join()
        typer.echo("All records deleted")
        return 0

    return _execute(database_url, _handler, what="delete-records")


def cmd_delete_record(record_id: int, database_url: str | None = None) -> int:
    async def _handler(c: AppContainer) -> int:
        if await c.actions.delete_by_id(record_id) == 0:
            typer.echo(f"Error: no record with id {record_id}", err=True)
            return 1
        typer.echo(f"Deleted record {record_id}")
        return 0

    return _execute(database_url, _handler, what="delete-record")


def cmd_delete_today(action_type: str, database_url: str | None = None) -> int:
    async def _handler(c: AppContainer) -> int:
        c.records.delete_today_records_by_type(action_type)
        await c.join()
        typer.echo(f"Deleted today's {action_type} records")
        return 0

    return _execute(database_url, _handler, what="delete-today")


def cmd_delete_expense(expense_id: int, database_url: str | None = None) -> int:
    async def _handler(c: AppContainer) -> int:
        expense = await c.expenses.get_by_id(expense_id)
        if expense is None:
            typer.echo(f"Error: no expense with id {expense_id}", err=True)
            return 1
        c.expense_records.delete_expense(expense)
        await c.join()
        typer.echo(f"Deleted expense {expense_id}")
        return 0

    return _execute(database_url, _handler, what="delete-expense")


def cmd_update_expense(
    expense_id: int,
    *,
    amount: str | None = None,
    category: str | None = None,
    origin: str | None = None,
    note: str | None = None,
    database_url: str | None = None,
) -> int:
    if amount is not None and not is_amount_valid(amount):
        typer.echo("Error: amount must be a number greater than zero.", err=True)
        return 1
    if (category is not None and not category.strip()) or (
        origin is not None and not origin.strip()
    ):
        typer.echo("Error: category and origin cannot be blank.", err=True)
        return 1

    async def _handler(c: AppContainer) -> int:
        current = await c.expenses.get_by_id(expense_id)
        if current is None:
            typer.echo(f"Error: no expense with id {expense_id}", err=True)
            return 1
        updated = DailyExpense(
            id=current.id,
            amount=float(amount) if amount is not None else current.amount,
            category=normalize_category(category) if category is not None else current.category,
            date=current.date,
            origin=origin.strip() if origin is not None else current.origin,
            note=(note.strip() or None) if note is not None else current.note,
        )
        c.expense_records.update_expense(updated)
        await c.join()
        typer.echo(f"Updated expense {expense_id}")
        return 0

    return _execute(database_url, _handler, what="update-expense")


def cmd_export_records(output: Path, database_url: str | None = None) -> int:
    from .file_save import fixed_destination, save_document

    async def _handler(c: AppContainer) -> int:
        c.records.request_records()
        await c.join()
        content = c.records.export_records_to_csv(c.records.records.value)
        saved = await save_document(
            fixed_destination(output),
            filename=config.RECORDS_EXPORT_FILENAME,
            mime_type=config.CSV_MIME_TYPE,
            content=content,
        )
        typer.echo(f"Wrote {saved}")
        return 0

    return _execute(database_url, _handler, what="export-records")


def cmd_export_expenses(
    output: Path,
    *,
    sort_by: str = "date",
    ascending: bool = False,
    database_url: str | None = None,
) -> int:
    from .file_save import fixed_destination, save_document
    from .viewmodels import SORT_COLUMNS

    if sort_by not in SORT_COLUMNS:
        typer.echo(f"Error: unknown sort column '{sort_by}' (use {', '.join(SORT_COLUMNS)}).", err=True)
        return 1

    async def _handler(c: AppContainer) -> int:
        holder = c.expense_records
        holder.sort_column.set(sort_by)
        holder.sort_ascending.set(ascending)
        holder.request_expense_records()
        await c.join()
        content = holder.export_expenses_to_csv(holder.sorted_records())
        saved = await save_document(
            fixed_destination(output),
            filename=config.EXPENSES_EXPORT_FILENAME,
            mime_type=config.CSV_MIME_TYPE,
            content=content,
        )
        typer.echo(f"Wrote {saved}")
        return 0

    return _execute(database_url, _handler, what="export-expenses")


def cmd_dark_mode(value: str | None) -> int:
    from .preferences import ThemePreferences

    if value is not None and value.lower() not in {"on", "off"}:
        typer.echo("Error: dark mode takes 'on' or 'off'.", err=True)
        return 1

    # Preferences live outside the store; no database needed here.
    async def _main() -> bool:
        prefs = ThemePreferences(config.preferences_path())
        if value is not None:
            await prefs.set_dark_mode(value.lower() == "on")
        return prefs.is_dark_mode.value

    try:
        enabled = asyncio.run(_main())
    except Exception as e:
        typer.echo(f"Error: dark-mode failed: {e}", err=True)
        return 1
    typer.echo(f"dark mode: {'on' if enabled else 'off'}")
    return 0


def cmd_migrate(database_url: str | None = None) -> int:
    from db.migrate import current_version

    async def _handler(c: AppContainer) -> int:
        typer.echo(f"schema version {current_version(c.store.engine)}")
        return 0

    return _execute(database_url, _handler, what="migrate")


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Track cigarettes, beers, food and daily expenses. "
        "Loads DAILY_BALANCE_* settings from a local .env before running."
    ),
)


def _db(ctx: typer.Context) -> str | None:
    return (ctx.obj or {}).get("database_url")


OUTPUT_OPTION: OptionInfo = typer.Option(
    ...,
    "--output",
    "-o",
    help="Destination CSV file.",
    dir_okay=False,
    file_okay=True,
)


@app.command("ui")
def ui_cmd(ctx: typer.Context) -> None:
    """Open the interactive screens."""

    raise typer.Exit(cmd_ui(_db(ctx)))


@app.command("status")
def status_cmd(ctx: typer.Context) -> None:
    """Show the smoke-free timer, today's counters and store totals."""

    raise typer.Exit(cmd_status(_db(ctx)))


@app.command("log")
def log_cmd(
    ctx: typer.Context,
    action_type: Annotated[str, typer.Argument(help="Action type, e.g. cigarette or beer.")],
    description: str | None = typer.Option(None, "--description", "-d", help="Optional note."),
) -> None:
    """Log an action now."""

    raise typer.Exit(cmd_log(action_type, description, _db(ctx)))


@app.command("food")
def food_cmd(
    ctx: typer.Context,
    description: Annotated[str, typer.Argument(help="What you ate.")],
) -> None:
    raise typer.Exit(cmd_food(description, _db(ctx)))


@app.command("add-expense")
def add_expense_cmd(
    ctx: typer.Context,
    *,
    amount: str = typer.Option(..., help="Amount, greater than zero."),
    category: str = typer.Option(..., help="Free-text category."),
    origin: str = typer.Option(..., help=f"Payment source, e.g. {', '.join(config.ORIGIN_OPTIONS)}."),
    note: str | None = typer.Option(None, help="Optional note."),
) -> None:
    """Register a daily expense dated now."""

    raise typer.Exit(
        cmd_add_expense(
            amount=amount, category=category, origin=origin, note=note, database_url=_db(ctx)
        )
    )


@app.command("records")
def records_cmd(
    ctx: typer.Context,
    today: str | None = typer.Option(None, help="Only today's records of this type."),
) -> None:
    """List action records, newest first (id, date, type, description)."""

    raise typer.Exit(cmd_records(today, _db(ctx)))


@app.command("expenses")
def expenses_cmd(
    ctx: typer.Context,
    sort_by: str = typer.Option("date", help="amount, category, date, origin or note."),
    ascending: bool = typer.Option(False, "--ascending", help="Sort ascending."),
) -> None:
    """List expenses (id, amount, category, date, origin, note)."""

    raise typer.Exit(cmd_expenses(sort_by, ascending, _db(ctx)))


@app.command("delete-records")
def delete_records_cmd(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    raise typer.Exit(cmd_delete_records(yes=yes, database_url=_db(ctx)))


@app.command("delete-record")
def delete_record_cmd(ctx: typer.Context, record_id: int) -> None:
    raise typer.Exit(cmd_delete_record(record_id, _db(ctx)))


@app.command("delete-today")
def delete_today_cmd(ctx: typer.Context, action_type: str) -> None:
    """Delete today's records of one type."""

    raise typer.Exit(cmd_delete_today(action_type, _db(ctx)))


@app.command("delete-expense")
def delete_expense_cmd(ctx: typer.Context, expense_id: int) -> None:
    raise typer.Exit(cmd_delete_expense(expense_id, _db(ctx)))


@app.command("update-expense")
def update_expense_cmd(
    ctx: typer.Context,
    expense_id: int,
    *,
    amount: str | None = typer.Option(None),
    category: str | None = typer.Option(None),
    origin: str | None = typer.Option(None),
    note: str | None = typer.Option(None),
) -> None:
    """Change fields of an existing expense; omitted fields keep their value."""

    raise typer.Exit(
        cmd_update_expense(
            expense_id,
            amount=amount,
            category=category,
            origin=origin,
            note=note,
            database_url=_db(ctx),
        )
    )


@app.command("export-records")
def export_records_cmd(ctx: typer.Context, output: Annotated[Path, OUTPUT_OPTION]) -> None:
    raise typer.Exit(cmd_export_records(output, _db(ctx)))


@app.command("export-expenses")
def export_expenses_cmd(
    ctx: typer.Context,
    output: Annotated[Path, OUTPUT_OPTION],
    sort_by: str = typer.Option("date", help="amount, category, date, origin or note."),
    ascending: bool = typer.Option(False, "--ascending"),
) -> None:
    raise typer.Exit(
        cmd_export_expenses(output, sort_by=sort_by, ascending=ascending, database_url=_db(ctx))
    )


@app.command("dark-mode")
def dark_mode_cmd(
    value: Annotated[str | None, typer.Argument(help="on or off; omit to show.")] = None,
) -> None:
    raise typer.Exit(cmd_dark_mode(value))


@app.command("migrate")
def migrate_cmd(ctx: typer.Context) -> None:
    """Apply pending schema migrations and print the resulting version."""

    raise typer.Exit(cmd_migrate(_db(ctx)))


@app.callback()
def _root(
    ctx: typer.Context,
    *,
    database_url: str | None = typer.Option(
        None, help="Override DAILY_BALANCE_DATABASE_URL (falls back to env var)."
    ),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures logging. The interactive
    UI logs to a file under the data directory instead of stderr.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    if ctx.invoked_subcommand == "ui":
        configure_logging(log_file=config.log_file_path())
    else:
        configure_logging()

    ctx.obj = {"database_url": database_url}


if __name__ == "__main__":  # pragma: no cover
    app()
