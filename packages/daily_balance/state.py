"""Observable state containers for view-state holders.

``StateField`` holds one value and notifies subscribers when it changes
(distinct-until-changed, like a state flow). ``OneShotRequest`` is a
request/acknowledge pair for host actions such as "show the save dialog":
subscribers fire once per request and a pending request cannot fire again
until it has been handled.

All notification happens synchronously on the caller's thread. Holders only
mutate fields from the event loop, so subscribers run on the UI loop too.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class StateField(Generic[T]):
    __slots__ = ("_value", "_subscribers")

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, callback: Callable[[T], None], *, emit_current: bool = False) -> Unsubscribe:
        """Register ``callback``; returns a function that removes it again."""

        self._subscribers.append(callback)
        if emit_current:
            callback(self._value)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"StateField({self._value!r})"


class OneShotRequest:
    """Command/acknowledge channel for a single pending host action."""

    __slots__ = ("_pending", "_handlers")

    def __init__(self) -> None:
        self._pending = StateField(False)
        self._handlers: list[Callable[[], None]] = []

    @property
    def pending(self) -> bool:
        return self._pending.value

    def request(self) -> bool:
        """Ask the host to perform the action. Returns ``False`` when already pending."""

        if self._pending.value:
            return False
        self._pending.set(True)
        for handler in list(self._handlers):
            handler()
        return True

    def handled(self) -> None:
        """Acknowledge the request (success or cancellation alike)."""

        self._pending.set(False)

    def subscribe(self, handler: Callable[[], None]) -> Unsubscribe:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def watch(self, callback: Callable[[bool], None]) -> Unsubscribe:
        """Observe the raw pending flag (for rendering, not for triggering)."""

        return self._pending.subscribe(callback)


__all__ = ["OneShotRequest", "StateField", "Unsubscribe"]
