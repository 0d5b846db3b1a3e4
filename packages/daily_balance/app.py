"""Interactive screen loop.

One iteration of ``TrackerApp.step`` renders the current screen, asks for a
single choice and dispatches it to the holders. Holder work is joined before
the next render so every screen shows fresh state. Export requests are
observed through the ``MainViewModel`` one-shot channels: the handler runs the
save interaction and always acknowledges the request afterwards, whether the
user saved or cancelled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import Any

from prompt_toolkit import PromptSession, print_formatted_text
from prompt_toolkit.formatted_text import FormattedText

from db.models.tracker import ActionRecord, DailyExpense

from . import config, term_ui
from .container import AppContainer
from .file_save import SaveChooser, save_document
from .logging_setup import get_logger
from .timeutil import (
    CSV_DATE_FORMAT,
    SMOKE_FREE_WARNING_MS,
    TIME_OF_DAY_FORMAT,
    format_elapsed,
    format_timestamp,
    now_millis,
)
from .viewmodels import BEER, CIGARETTE, SORT_COLUMNS, Screen, normalize_category

Output = Callable[[str, str], None]

_logger = get_logger("daily_balance.app")

_TYPE_LABELS = {CIGARETTE: "Cigarettes", BEER: "Beers"}


def smoke_free_banner(last_cigarette_ms: int | None, now_ms: int) -> tuple[str, str]:
    """Return ``(text, style_class)`` for the home banner."""

    if last_cigarette_ms is None:
        return "No cigarettes logged yet", "class:ok"
    elapsed = max(0, now_ms - last_cigarette_ms)
    tone = "class:warning" if elapsed < SMOKE_FREE_WARNING_MS else "class:ok"
    return f"Smoke-free for {format_elapsed(elapsed)}", tone


def format_record_line(index: int, record: ActionRecord, fmt: str = CSV_DATE_FORMAT) -> str:
    line = f"{index:>3}. {format_timestamp(record.timestamp, fmt)}  {record.type}"
    if record.description:
        line += f"  {record.description}"
    return line


def format_expense_line(index: int, expense: DailyExpense) -> str:
    return (
        f"{index:>3}. {expense.amount:>10.2f}  {expense.category:<16} "
        f"{format_timestamp(expense.date)}  {expense.origin or '':<10} {expense.note or ''}"
    ).rstrip()


class TrackerApp:
    def __init__(
        self,
        container: AppContainer,
        *,
        session: PromptSession | None = None,
        chooser: SaveChooser | None = None,
        out: Output | None = None,
    ) -> None:
        self._c = container
        self._session = session
        self._chooser = chooser
        self._out = out or self._print
        self._exports: set[asyncio.Task[Any]] = set()
        self._running = True
        container.main.records_export.subscribe(
            lambda: self._spawn_export(self._export_records())
        )
        container.main.expenses_export.subscribe(
            lambda: self._spawn_export(self._export_expenses())
        )

    # -- plumbing ----------------------------------------------------------

    @property
    def _style(self):
        return term_ui.build_style(self._c.theme.is_dark_mode.value)

    def _print(self, text: str, style_class: str = "") -> None:
        output = getattr(self._session, "output", None)
        print_formatted_text(FormattedText([(style_class, text)]), style=self._style, output=output)

    def _ui_kwargs(self) -> dict[str, Any]:
        return {"session": self._session, "style": self._style}

    def _spawn_export(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._exports.add(task)
        task.add_done_callback(self._exports.discard)

    async def drain(self) -> None:
        while self._exports:
            await asyncio.gather(*list(self._exports))
        await self._c.join()

    def _save_chooser(self) -> SaveChooser:
        return self._chooser or term_ui.save_chooser(**self._ui_kwargs())

    # -- exports -----------------------------------------------------------

    async def _export(
        self, label: str, filename: str, build: Callable[[], str], handled: Callable[[], None]
    ) -> None:
        main = self._c.main
        try:
            saved = await save_document(
                self._save_chooser(),
                filename=filename,
                mime_type=config.CSV_MIME_TYPE,
                content=build(),
            )
        except OSError as e:
            _logger.error("%s export failed: %s", label, e)
            main.set_message(f"Export failed: {e}")
        else:
            main.set_message(f"{label} exported to {saved}" if saved else "Export cancelled")
        finally:
            handled()
        main.navigate_to(Screen.MESSAGE)

    async def _export_records(self) -> None:
        records = self._c.records
        await self._export(
            "Records",
            config.RECORDS_EXPORT_FILENAME,
            lambda: records.export_records_to_csv(records.records.value),
            self._c.main.records_export_handled,
        )

    async def _export_expenses(self) -> None:
        holder = self._c.expense_records
        await self._export(
            "Expenses",
            config.EXPENSES_EXPORT_FILENAME,
            lambda: holder.export_expenses_to_csv(holder.sorted_records()),
            self._c.main.expenses_export_handled,
        )

    # -- loop --------------------------------------------------------------

    async def run(self) -> None:
        self._c.records.refresh_home_stats()
        await self.drain()
        while self._running:
            await self.step()
            await self.drain()

    async def step(self) -> None:
        screen = self._c.main.current_screen.value
        handler = {
            Screen.HOME: self._home,
            Screen.FOOD: self._food,
            Screen.EXPENSE: self._expense,
            Screen.RECORDS: self._records,
            Screen.EXPENSE_RECORDS: self._expense_records,
            Screen.TODAY_RECORDS: self._today_records,
            Screen.MESSAGE: self._message,
        }[screen]
        await handler()

    def _go_home(self) -> None:
        self._c.main.navigate_to(Screen.HOME)
        self._c.records.refresh_home_stats()

    async def _choose(self, options: Sequence[tuple[str, str]]) -> str | None:
        for key, label in options:
            self._out(f"  [{key}] {label}", "class:muted")
        return await term_ui.prompt_choice(options, **self._ui_kwargs())

    async def _home(self) -> None:
        records = self._c.records
        text, tone = smoke_free_banner(records.last_cigarette_timestamp.value, now_millis())
        self._out("Daily Balance", "class:title")
        self._out(text, tone)
        self._out(
            f"Today: {records.today_cigarettes_count.value} cigarettes, "
            f"{records.today_beers_count.value} beers"
        )
        choice = await self._choose(
            [
                ("c", "Log cigarette"),
                ("b", "Log beer"),
                ("f", "Log food"),
                ("e", "Add expense"),
                ("r", "Records"),
                ("x", "Expenses"),
                ("tc", "Today's cigarettes"),
                ("tb", "Today's beers"),
                ("d", "Toggle dark mode"),
                ("q", "Quit"),
            ]
        )
        main = self._c.main
        if choice is None or choice == "q":
            self._running = False
        elif choice == "c":
            records.register_action(CIGARETTE, None)
        elif choice == "b":
            records.register_action(BEER, None)
        elif choice == "f":
            main.navigate_to(Screen.FOOD)
        elif choice == "e":
            self._c.expense.reload_categories()
            main.navigate_to(Screen.EXPENSE)
        elif choice == "r":
            records.request_records()
            main.navigate_to(Screen.RECORDS)
        elif choice == "x":
            self._c.expense_records.request_expense_records()
            main.navigate_to(Screen.EXPENSE_RECORDS)
        elif choice in ("tc", "tb"):
            records.request_today_records_by_type(CIGARETTE if choice == "tc" else BEER)
            main.navigate_to(Screen.TODAY_RECORDS)
        elif choice == "d":
            self._c.theme.toggle_dark_mode()

    async def _food(self) -> None:
        food = self._c.food
        self._out("Food", "class:title")
        description = await term_ui.prompt_text(
            "What did you eat? (Esc to go back): ", **self._ui_kwargs()
        )
        if description is not None:
            food.set_description(description)
            food.register_food()
        else:
            food.reset()
        self._go_home()

    async def _expense(self) -> None:
        holder = self._c.expense
        kw = self._ui_kwargs()
        self._out("New expense", "class:title")
        amount = await term_ui.prompt_amount(**kw)
        if amount is None:
            holder.reset_fields()
            self._go_home()
            return
        holder.set_amount_text(amount)
        category = await term_ui.prompt_category(holder.category_options.value, **kw)
        if category is None:
            holder.reset_fields()
            self._go_home()
            return
        holder.set_category(category)
        origin = await term_ui.prompt_origin(config.ORIGIN_OPTIONS, **kw)
        if origin is None:
            holder.reset_fields()
            self._go_home()
            return
        holder.set_origin(origin)
        note = await term_ui.prompt_text("Note (optional): ", **kw)
        holder.set_note(note or "")
        if holder.register_expense():
            self._go_home()
        else:
            self._out("Check the amount, category and origin.", "class:warning")

    async def _records(self) -> None:
        holder = self._c.records
        rows = holder.records.value
        self._out(f"Records ({len(rows)})", "class:title")
        for i, record in enumerate(rows, start=1):
            self._out(format_record_line(i, record))
        options = [("h", "Home"), ("x", "Export CSV"), ("a", "Delete all")]
        options += [(str(i), f"Delete #{i}") for i in range(1, len(rows) + 1)]
        choice = await self._choose(options)
        if choice is None or choice == "h":
            self._go_home()
        elif choice == "x":
            self._c.main.request_records_export()
        elif choice == "a":
            if await term_ui.prompt_confirm("Delete every record?", **self._ui_kwargs()):
                holder.delete_all()
        else:
            await self._delete_record(rows[int(choice) - 1])

    async def _expense_records(self) -> None:
        holder = self._c.expense_records
        rows = holder.sorted_records()
        arrow = "asc" if holder.sort_ascending.value else "desc"
        self._out(
            f"Expenses ({len(rows)}), sorted by {holder.sort_column.value} {arrow}", "class:title"
        )
        for i, expense in enumerate(rows, start=1):
            self._out(format_expense_line(i, expense))
        options = [("h", "Home"), ("x", "Export CSV")]
        options += [(col, f"Sort by {col}") for col in SORT_COLUMNS]
        options += [(str(i), f"Edit or delete #{i}") for i in range(1, len(rows) + 1)]
        choice = await self._choose(options)
        if choice is None or choice == "h":
            self._go_home()
        elif choice == "x":
            self._c.main.request_expenses_export()
        elif choice in SORT_COLUMNS:
            holder.sort_by(choice)
        else:
            await self._edit_expense(rows[int(choice) - 1])

    async def _edit_expense(self, expense: DailyExpense) -> None:
        holder = self._c.expense_records
        kw = self._ui_kwargs()
        action = await self._choose([("e", "Edit"), ("d", "Delete"), ("c", "Cancel")])
        if action == "d":
            if await term_ui.prompt_confirm(
                f"Delete the {expense.amount:.2f} expense in {expense.category}?", **kw
            ):
                holder.delete_expense(expense)
            return
        if action != "e":
            return
        amount = await term_ui.prompt_amount(initial=str(expense.amount), **kw)
        if amount is None:
            return
        category = await term_ui.prompt_category(
            sorted({e.category for e in holder.expense_records.value}),
            initial=expense.category,
            **kw,
        )
        if category is None:
            return
        origin = await term_ui.prompt_origin(
            config.ORIGIN_OPTIONS,
            initial=expense.origin if expense.origin in config.ORIGIN_OPTIONS else "",
            **kw,
        )
        if origin is None:
            return
        note = await term_ui.prompt_text("Note (optional): ", initial=expense.note or "", **kw)
        holder.update_expense(
            DailyExpense(
                id=expense.id,
                amount=float(amount),
                category=normalize_category(category),
                date=expense.date,
                origin=origin,
                note=note or None,
            )
        )

    async def _delete_record(self, record: ActionRecord) -> None:
        stamp = format_timestamp(record.timestamp)
        question = f"Delete the {record.type} from {stamp}?"
        if await term_ui.prompt_confirm(question, **self._ui_kwargs()):
            self._c.records.delete_record(record)

    async def _today_records(self) -> None:
        holder = self._c.records
        action_type = holder.today_type.value or CIGARETTE
        rows = holder.today_type_records.value
        label = _TYPE_LABELS.get(action_type, action_type).lower()
        self._out(f"Today's {label}", "class:title")
        for i, record in enumerate(rows, start=1):
            self._out(format_record_line(i, record, TIME_OF_DAY_FORMAT))
        options = [("h", "Home")]
        if rows:
            options.append(("a", "Delete today's records"))
        options += [(str(i), f"Delete #{i}") for i in range(1, len(rows) + 1)]
        choice = await self._choose(options)
        if choice is None or choice == "h":
            self._go_home()
        elif choice == "a":
            if await term_ui.prompt_confirm(f"Delete today's {label}?", **self._ui_kwargs()):
                holder.delete_today_records_by_type(action_type)
        else:
            await self._delete_record(rows[int(choice) - 1])

    async def _message(self) -> None:
        self._out(self._c.main.message.value)
        await term_ui.prompt_text("Press Enter to continue", **self._ui_kwargs())
        self._go_home()


async def run_app(container: AppContainer, **kwargs: Any) -> None:
    app = TrackerApp(container, **kwargs)
    try:
        await app.run()
    finally:
        await container.join()
    _logger.info("interactive session ended")


__all__ = [
    "TrackerApp",
    "format_expense_line",
    "format_record_line",
    "run_app",
    "smoke_free_banner",
]
