"""Terminal prompts for the interactive screens (prompt_toolkit-based).

Each helper runs a single ``prompt_async`` and returns the accepted value, or
``None`` when the user cancels with Esc. Validation happens inline through
prompt_toolkit validators, so callers only ever see acceptable input. All
helpers take an optional ``PromptSession``; tests pass one wired to a pipe
input and ``DummyOutput``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import PathCompleter, WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .file_save import SaveChooser
from .viewmodels.expense import is_amount_valid

_LIGHT = Style.from_dict(
    {
        "title": "bold",
        "warning": "fg:#b00020 bold",
        "ok": "fg:#2e7d32",
        "muted": "fg:#666666",
        "auto-suggestion": "fg:#888888",
    }
)

_DARK = Style.from_dict(
    {
        "title": "bold fg:#ffffff",
        "warning": "fg:#ff6e6e bold",
        "ok": "fg:#81c784",
        "muted": "fg:#9e9e9e",
        "auto-suggestion": "fg:#757575",
    }
)


def build_style(dark: bool) -> Style:
    return _DARK if dark else _LIGHT


def _cancel_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    return kb


def _session_for(session: PromptSession | None, kb: KeyBindings) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


# ----------------------------------------------------------------------------
# Menus
# ----------------------------------------------------------------------------


class _ChoiceValidator(Validator):
    def __init__(self, allowed: set[str]) -> None:
        self._allowed = allowed

    def validate(self, document) -> None:
        if document.text.strip().lower() not in self._allowed:
            raise ValidationError(message="Pick one of the listed options.")


async def prompt_choice(
    options: Sequence[tuple[str, str]],
    *,
    message: str = "> ",
    session: PromptSession | None = None,
    style: Style | None = None,
) -> str | None:
    """Ask for one of ``options`` (``(key, label)`` pairs) by key.

    Keys match case-insensitively; the canonical key is returned. Esc returns
    ``None``.
    """

    canonical = {key.lower(): key for key, _label in options}
    completer = WordCompleter([key for key, _label in options], ignore_case=True, sentence=True)
    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(
        message,
        completer=completer,
        validator=_ChoiceValidator(set(canonical)),
        validate_while_typing=False,
        style=style,
    )
    if value is None:
        return None
    return canonical[value.strip().lower()]


async def prompt_confirm(
    message: str,
    *,
    session: PromptSession | None = None,
    style: Style | None = None,
) -> bool:
    """Yes/no question; anything but an explicit yes (or Esc) means no."""

    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(f"{message} [y/N]: ", style=style)
    return bool(value) and value.strip().lower() in {"y", "yes", "s", "si"}


# ----------------------------------------------------------------------------
# Form fields
# ----------------------------------------------------------------------------


class _AmountValidator(Validator):
    def validate(self, document) -> None:
        if not is_amount_valid(document.text):
            raise ValidationError(message="Enter a number greater than zero (e.g. 10.5).")


class _NonBlankValidator(Validator):
    def __init__(self, what: str) -> None:
        self._what = what

    def validate(self, document) -> None:
        if not document.text.strip():
            raise ValidationError(message=f"{self._what} cannot be empty.")


class _OptionValidator(Validator):
    def __init__(self, options: Sequence[str]) -> None:
        self._allowed = {o.lower() for o in options}
        self._listing = ", ".join(options)

    def validate(self, document) -> None:
        if document.text.strip().lower() not in self._allowed:
            raise ValidationError(message=f"Choose one of: {self._listing}")


async def prompt_amount(
    *,
    initial: str = "",
    message: str = "Amount (Esc to cancel): ",
    session: PromptSession | None = None,
    style: Style | None = None,
) -> str | None:
    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(
        message,
        default=initial,
        validator=_AmountValidator(),
        validate_while_typing=False,
        style=style,
    )
    return None if value is None else value.strip()


async def prompt_category(
    categories: Sequence[str],
    *,
    initial: str = "",
    message: str = "Category (Tab to complete, Esc to cancel): ",
    session: PromptSession | None = None,
    style: Style | None = None,
) -> str | None:
    """Free-text category with completion over the categories already used."""

    completer = WordCompleter(list(categories), ignore_case=True, match_middle=True, sentence=True)
    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(
        message,
        default=initial,
        completer=completer,
        validator=_NonBlankValidator("Category"),
        validate_while_typing=False,
        style=style,
    )
    return None if value is None else value.strip()


async def prompt_origin(
    options: Sequence[str],
    *,
    initial: str = "",
    message: str | None = None,
    session: PromptSession | None = None,
    style: Style | None = None,
) -> str | None:
    """Pick a payment source from the fixed ``options``; returns the canonical spelling."""

    canonical = {o.lower(): o for o in options}
    completer = WordCompleter(list(options), ignore_case=True, sentence=True)
    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(
        message or f"Origin [{' / '.join(options)}]: ",
        default=initial,
        completer=completer,
        validator=_OptionValidator(options),
        validate_while_typing=False,
        style=style,
    )
    if value is None:
        return None
    return canonical[value.strip().lower()]


async def prompt_text(
    message: str,
    *,
    initial: str = "",
    session: PromptSession | None = None,
    style: Style | None = None,
) -> str | None:
    """Optional free text (note, description). Empty input returns ``""``."""

    sess = _session_for(session, _cancel_bindings())
    value = await sess.prompt_async(message, default=initial, style=style)
    return None if value is None else value.strip()


# ----------------------------------------------------------------------------
# Save dialog
# ----------------------------------------------------------------------------


def save_chooser(
    *,
    directory: Path | None = None,
    session: PromptSession | None = None,
    style: Style | None = None,
) -> SaveChooser:
    """Return a chooser that asks for a destination path in the terminal.

    The suggested file name is pre-filled (under ``directory`` when given);
    Esc or an empty answer cancels.
    """

    base = directory or Path.cwd()

    async def _choose(filename: str, mime_type: str) -> Path | None:
        sess = _session_for(session, _cancel_bindings())
        value = await sess.prompt_async(
            f"Save {mime_type} as (Esc to cancel): ",
            default=str(base / filename),
            completer=PathCompleter(expanduser=True),
            style=style,
        )
        if value is None or not value.strip():
            return None
        return Path(value.strip()).expanduser()

    return _choose


__all__ = [
    "build_style",
    "prompt_amount",
    "prompt_category",
    "prompt_choice",
    "prompt_confirm",
    "prompt_origin",
    "prompt_text",
    "save_chooser",
]
