from __future__ import annotations

from daily_balance.state import OneShotRequest, StateField


def test_state_field_notifies_only_on_change() -> None:
    field = StateField(0)
    seen: list[int] = []
    unsubscribe = field.subscribe(seen.append)

    field.set(1)
    field.set(1)
    field.update(lambda v: v + 1)
    assert seen == [1, 2]
    assert field.value == 2

    unsubscribe()
    field.set(5)
    assert seen == [1, 2]


def test_state_field_emit_current() -> None:
    field = StateField("x")
    seen: list[str] = []
    field.subscribe(seen.append, emit_current=True)
    assert seen == ["x"]


def test_one_shot_request_fires_once_until_handled() -> None:
    req = OneShotRequest()
    fired: list[int] = []
    req.subscribe(lambda: fired.append(1))

    assert req.request() is True
    assert req.pending
    # A pending request never re-fires.
    assert req.request() is False
    assert fired == [1]

    req.handled()
    assert not req.pending
    assert req.request() is True
    assert fired == [1, 1]


def test_one_shot_request_watch_sees_flag_transitions() -> None:
    req = OneShotRequest()
    flags: list[bool] = []
    req.watch(flags.append)

    req.request()
    req.handled()
    req.handled()
    assert flags == [True, False]
