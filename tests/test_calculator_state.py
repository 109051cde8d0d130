import pytest

from calculator_engine import CalculatorEngine
from calculator_state import CalculatorState, CalculatorViewModel


@pytest.fixture
def vm():
    return CalculatorViewModel(CalculatorEngine())


def press(vm, *keys):
    for key in keys:
        vm.press_key(key)
    return vm


def test_requires_engine():
    with pytest.raises(ValueError):
        CalculatorViewModel(None)


def test_initial_state(vm):
    assert vm.snapshot() == CalculatorState(
        display_value="0",
        expression_history="",
        accumulator=0.0,
        pending_operator=None,
        is_new_entry=True,
        last_operand=0.0,
        last_operator=None,
        is_equals_pressed=False,
    )


# ── Dígitos ──────────────────────────────────────────────────────

def test_digits_and_decimal(vm):
    press(vm, "1", "2", "3")
    assert vm.display_value == "123"

    vm.input_digit(".")
    assert vm.display_value == "123."

    vm.input_digit(".")
    assert vm.display_value == "123."


def test_leading_decimal_starts_with_zero(vm):
    press(vm, ".", "5")
    assert vm.display_value == "0.5"


def test_leading_zero_is_replaced(vm):
    press(vm, "0", "0", "7")
    assert vm.display_value == "7"


def test_digit_limit(vm):
    press(vm, *"1234567890123456")
    press(vm, "7")
    assert vm.display_value == "1234567890123456"

    press(vm, ".")
    assert vm.display_value == "1234567890123456"


def test_digit_limit_ignores_sign_and_point(vm):
    press(vm, "5", "±", ".")
    press(vm, *"123456789012345")
    assert vm.display_value == "-5.123456789012345"

    press(vm, "6")
    assert vm.display_value == "-5.123456789012345"


def test_empty_digit_is_ignored(vm):
    vm.input_digit("")
    assert vm.display_value == "0"
    assert vm.is_new_entry


def test_scientific_display_rejects_typing(vm):
    press(vm, "1", "%", "%", "%", "%", "%")
    shown = vm.display_value
    assert "E" in shown
    assert not vm.is_new_entry

    press(vm, ".", "5")
    assert vm.display_value == shown
    float(vm.display_value)

    press(vm, "+")
    assert vm.accumulator == pytest.approx(1e-10)


def test_backspace_on_scientific_display_resets(vm):
    press(vm, "1", "%", "%", "%", "%", "%", "⌫")
    assert vm.display_value == "0"
    assert vm.is_new_entry


def test_invalid_digit(vm):
    with pytest.raises(ValueError):
        vm.input_digit("a")


# ── Operadores e igual ───────────────────────────────────────────

def test_simple_addition(vm):
    press(vm, "5", "+", "3", "=")

    assert vm.expression_history == "5 + 3 ="
    assert vm.display_value == "8"
    assert vm.accumulator == 8
    assert vm.pending_operator is None
    assert vm.is_new_entry
    assert vm.is_equals_pressed


def test_operator_sets_history(vm):
    press(vm, "1", "2", "×")

    assert vm.expression_history == "12 ×"
    assert vm.accumulator == 12
    assert vm.pending_operator == "×"
    assert vm.is_new_entry


def test_accumulator_untouched_by_digits(vm):
    press(vm, "4", "+", "9", "9")
    assert vm.accumulator == 4


def test_chained_operators_resolve_pending(vm):
    press(vm, "2", "+", "3", "×")

    assert vm.display_value == "5"
    assert vm.expression_history == "5 ×"

    press(vm, "4", "=")
    assert vm.display_value == "20"
    assert vm.expression_history == "5 × 4 ="


def test_operator_change_without_new_value(vm):
    press(vm, "8", "+", "−", "3", "=")

    assert vm.display_value == "5"
    assert vm.expression_history == "8 − 3 ="


def test_repeat_equals(vm):
    press(vm, "5", "+", "3", "=")
    assert vm.display_value == "8"

    press(vm, "=")
    assert vm.display_value == "11"
    assert vm.expression_history == "8 + 3 ="

    press(vm, "=")
    assert vm.display_value == "14"


def test_repeat_equals_uses_displayed_value(vm):
    press(vm, "5", "+", "3", "=", "±")
    assert vm.display_value == "-8"

    press(vm, "=")
    assert vm.display_value == "-5"
    assert vm.expression_history == "-8 + 3 ="


def test_digit_after_equals_cancels_repeat(vm):
    press(vm, "2", "×", "3", "=", "CE", "5")
    # Un dígito anula la repetición
    assert not vm.is_equals_pressed

    press(vm, "=")
    assert vm.display_value == "5"


def test_equals_without_pending_operator(vm):
    press(vm, "7", "=")

    assert vm.display_value == "7"
    assert vm.expression_history == ""
    assert vm.is_equals_pressed


def test_divide_by_zero_resets(vm):
    press(vm, "1", "0", "÷", "0", "=")

    assert vm.display_value == "Cannot divide by zero"
    assert vm.expression_history == ""
    assert vm.accumulator == 0
    assert vm.pending_operator is None
    assert vm.is_new_entry
    assert not vm.is_equals_pressed


def test_error_in_chained_operator(vm):
    press(vm, "6", "÷", "0", "+")

    assert vm.display_value == "Cannot divide by zero"
    assert vm.expression_history == ""
    assert vm.pending_operator is None


def test_recovery_after_error(vm):
    press(vm, "1", "÷", "0", "=", "2", "+", "2", "=")
    assert vm.display_value == "4"


def test_error_display_reads_as_zero(vm):
    press(vm, "1", "÷", "0", "=", "+", "5", "=")
    assert vm.display_value == "5"
    assert vm.expression_history == "0 + 5 ="


# ── Borrado ──────────────────────────────────────────────────────

def test_clear(vm):
    press(vm, "5", "+", "3", "=", "C")
    assert vm.snapshot() == CalculatorViewModel(CalculatorEngine()).snapshot()


def test_clear_entry_keeps_pending_operator(vm):
    press(vm, "9", "−", "4", "CE")

    assert vm.display_value == "0"
    assert vm.pending_operator == "−"
    assert vm.accumulator == 9

    press(vm, "2", "=")
    assert vm.display_value == "7"


def test_backspace(vm):
    press(vm, "1", "2", "3", "⌫")
    assert vm.display_value == "12"
    assert not vm.is_new_entry


def test_backspace_collapses_to_zero(vm):
    press(vm, "7", "⌫")
    assert vm.display_value == "0"
    assert vm.is_new_entry


def test_backspace_collapses_bare_minus(vm):
    press(vm, "7", "±", "⌫")
    assert vm.display_value == "0"
    assert vm.is_new_entry


def test_backspace_after_result(vm):
    press(vm, "5", "+", "3", "=", "⌫")
    assert vm.display_value == "0"


def test_backspace_after_error(vm):
    press(vm, "1", "÷", "0", "=", "⌫")
    assert vm.display_value == "0"


# ── Operaciones unarias ──────────────────────────────────────────

def test_negate(vm):
    press(vm, "5", "±")
    assert vm.display_value == "-5"
    assert not vm.is_new_entry

    press(vm, "2")
    assert vm.display_value == "-52"


def test_percent_without_pending_operator(vm):
    press(vm, "5", "0", "%")
    assert vm.display_value == "0.5"
    assert not vm.is_new_entry


def test_percent_of_accumulator(vm):
    press(vm, "2", "0", "0", "+", "1", "0", "%")
    assert vm.display_value == "20"

    press(vm, "=")
    assert vm.display_value == "220"


@pytest.mark.parametrize("keys, key, display, history", [
    (["9"], "√", "3", "√(9)"),
    (["4"], "x²", "16", "sqr(4)"),
    (["4"], "1/x", "0.25", "1/(4)"),
])
def test_advanced_functions(vm, keys, key, display, history):
    press(vm, *keys)
    press(vm, key)

    assert vm.display_value == display
    assert vm.expression_history == history
    assert vm.is_new_entry


def test_advanced_function_by_name(vm):
    press(vm, "2", "5")
    vm.apply_function("sqrt")
    assert vm.display_value == "5"
    assert vm.expression_history == "√(25)"


def test_next_digit_after_function_starts_fresh(vm):
    press(vm, "9", "√", "7")
    assert vm.display_value == "7"


def test_advanced_function_error_resets(vm):
    press(vm, "4", "+", "9", "±", "√")

    assert vm.display_value == "Invalid input"
    assert vm.pending_operator is None
    assert vm.accumulator == 0
    assert vm.is_new_entry


def test_reciprocal_of_zero(vm):
    press(vm, "0", "1/x")
    assert vm.display_value == "Cannot divide by zero"


# ── Teclado y notificaciones ─────────────────────────────────────

def test_unknown_key(vm):
    with pytest.raises(ValueError):
        vm.press_key("sin")


@pytest.mark.parametrize("symbol, expected", [("-", "6"), ("*", "16"), ("/", "4")])
def test_ascii_operators(vm, symbol, expected):
    press(vm, "8", symbol, "2", "=")
    assert vm.display_value == expected
    assert vm.expression_history == f"8 {symbol} 2 ="


def test_press_keys(vm):
    vm.press_keys(["1", "+", "1", "="])
    assert vm.display_value == "2"


def test_notifications_only_on_change(vm):
    changes = []
    vm.subscribe(changes.append)

    press(vm, "0")
    assert changes == []

    press(vm, "5", "+")
    assert changes == ["display_value", "expression_history"]

    changes.clear()
    press(vm, "3", "=")
    assert changes == [
        "display_value",
        "expression_history",
        "display_value",
        "is_equals_pressed",
    ]

    vm.unsubscribe(changes.append)
    changes.clear()
    press(vm, "C")
    assert changes == []
