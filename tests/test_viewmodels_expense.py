from __future__ import annotations

import pytest

from db.client import Store
from daily_balance.repositories import DailyExpenseRepository
from daily_balance.timeutil import now_millis
from daily_balance.viewmodels import ExpenseViewModel, is_amount_valid, normalize_category

from tests.helpers.db import seed_expenses


@pytest.mark.parametrize(
    ("text", "valid"),
    [
        ("10.5", True),
        ("5", True),
        (" 3 ", True),
        ("0", False),
        ("-1", False),
        ("abc", False),
        ("", False),
        ("inf", False),
        ("1e400", False),
        ("nan", False),
        ("1_000", False),
    ],
)
def test_is_amount_valid(text: str, valid: bool) -> None:
    assert is_amount_valid(text) is valid


def test_normalize_category() -> None:
    assert normalize_category("  comida ") == "Comida"
    assert normalize_category("ocio Nocturno") == "Ocio Nocturno"
    assert normalize_category("") == ""


def test_amount_setter_recomputes_validity_and_clears_error(store: Store) -> None:
    vm = ExpenseViewModel(DailyExpenseRepository(store))
    vm.show_expense_error.set(True)

    vm.set_amount_text("10.5")
    assert vm.is_amount_valid.value is True
    assert vm.show_expense_error.value is False

    vm.set_amount_text("0")
    assert vm.is_amount_valid.value is False
    vm.set_amount_text("abc")
    assert vm.is_amount_valid.value is False


@pytest.mark.asyncio
async def test_valid_registration_inserts_one_row_and_clears_inputs(store: Store) -> None:
    repo = DailyExpenseRepository(store)
    vm = ExpenseViewModel(repo)
    vm.set_amount_text("5")
    vm.set_category("comida")
    vm.set_origin("Efectivo")

    before = now_millis()
    assert vm.register_expense() is True
    assert (vm.amount_text.value, vm.category.value, vm.origin.value) == ("", "", "")
    assert vm.show_expense_error.value is False
    await vm.join()
    after = now_millis()

    rows = await repo.get_all()
    assert len(rows) == 1
    inserted = rows[0]
    assert inserted.amount == pytest.approx(5.0)
    assert inserted.category == "Comida"
    assert inserted.origin == "Efectivo"
    assert inserted.note is None
    assert before <= inserted.date <= after
    assert vm.category_options.value == ["Comida"]
    assert vm.is_submitting.value is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("amount", "category", "origin"),
    [("0", "Comida", "Eci"), ("abc", "Comida", "Eci"), ("5", "   ", "Eci"), ("5", "Comida", "")],
)
async def test_invalid_registration_sets_error_and_inserts_nothing(
    store: Store, amount: str, category: str, origin: str
) -> None:
    repo = DailyExpenseRepository(store)
    vm = ExpenseViewModel(repo)
    vm.set_amount_text(amount)
    vm.set_category(category)
    vm.set_origin(origin)

    assert vm.register_expense() is False
    await vm.join()
    assert vm.show_expense_error.value is True
    assert vm.amount_text.value == amount
    assert await repo.get_all() == []


@pytest.mark.asyncio
async def test_second_submission_while_in_flight_is_refused(store: Store) -> None:
    repo = DailyExpenseRepository(store)
    vm = ExpenseViewModel(repo)
    vm.set_amount_text("3")
    vm.set_category("Ocio")
    vm.set_origin("Eci")
    assert vm.register_expense() is True

    # Same values again before the first write has completed.
    vm.set_amount_text("3")
    vm.set_category("Ocio")
    vm.set_origin("Eci")
    assert vm.is_submitting.value is True
    assert vm.register_expense() is False
    assert vm.show_expense_error.value is False

    await vm.join()
    assert len(await repo.get_all()) == 1


@pytest.mark.asyncio
async def test_note_is_stored_and_reload_categories(store: Store) -> None:
    repo = DailyExpenseRepository(store)
    seed_expenses(store, [(1.0, "Ocio", 1, "Eci", None), (2.0, "Casa", 2, "Eci", None)])
    vm = ExpenseViewModel(repo)

    vm.reload_categories()
    await vm.join()
    assert vm.category_options.value == ["Casa", "Ocio"]

    vm.set_amount_text("2.5")
    vm.set_category("Casa")
    vm.set_origin("Nomina")
    vm.set_note("  bombillas ")
    assert vm.register_expense()
    await vm.join()
    newest = (await repo.get_all())[0]
    assert newest.note == "bombillas"
    assert vm.note.value == ""


def test_reset_fields(store: Store) -> None:
    vm = ExpenseViewModel(DailyExpenseRepository(store))
    vm.set_amount_text("x")
    vm.set_category("c")
    vm.set_origin("o")
    vm.set_note("n")
    vm.show_expense_error.set(True)

    vm.reset_fields()
    assert (vm.amount_text.value, vm.category.value, vm.origin.value, vm.note.value) == ("", "", "", "")
    assert vm.is_amount_valid.value is True
    assert vm.show_expense_error.value is False
