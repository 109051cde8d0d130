"""
Modelo de vista de la calculadora: máquina de estados de entrada.

Traduce los eventos discretos de la interfaz (dígito, operador, igual,
borrado) en llamadas al motor y en cambios de pantalla. No conoce
tkinter: la ventana se suscribe a los cambios con subscribe().
"""

import logging
from typing import Callable, NamedTuple

from calculator_engine import BinaryOperator, CalculatorEngine, UnaryOperator


logger = logging.getLogger(__name__)


class CalculatorState(NamedTuple):
    """Foto inmutable de todos los campos de la máquina de estados."""

    display_value: str
    expression_history: str
    accumulator: float
    pending_operator: str | None
    is_new_entry: bool
    last_operand: float
    last_operator: str | None
    is_equals_pressed: bool


class CalculatorViewModel:
    """Acumulador de dos operandos con operador pendiente y repetición de '='."""

    MAX_INPUT_DIGITS = 16

    DIGITS = frozenset("0123456789.")

    # Historial con forma de llamada para las funciones avanzadas
    FUNCTION_HISTORY = {
        UnaryOperator.SQRT: "√({})",
        UnaryOperator.SQUARE: "sqr({})",
        UnaryOperator.RECIPROCAL: "1/({})",
    }

    def __init__(self, engine: CalculatorEngine):
        if engine is None:
            raise ValueError("Se requiere un motor de cálculo")
        self._engine = engine
        self._listeners: list[Callable[[str], None]] = []

        self._display_value = "0"
        self._expression_history = ""

        self._accumulator = 0.0
        self._pending_operator: str | None = None
        self._is_new_entry = True
        self._last_operand = 0.0
        self._last_operator: str | None = None
        self._is_equals_pressed = False

    # ── Notificación de cambios ──────────────────────────────────

    def subscribe(self, callback: Callable[[str], None]):
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[[str], None]):
        self._listeners.remove(callback)

    def _notify(self, name: str):
        for callback in list(self._listeners):
            callback(name)

    def _set(self, name: str, value):
        attr = f"_{name}"
        if getattr(self, attr) != value:
            setattr(self, attr, value)
            self._notify(name)

    # ── Propiedades públicas ─────────────────────────────────────

    @property
    def engine(self) -> CalculatorEngine:
        return self._engine

    @property
    def display_value(self) -> str:
        return self._display_value

    @property
    def expression_history(self) -> str:
        return self._expression_history

    @property
    def is_equals_pressed(self) -> bool:
        return self._is_equals_pressed

    @property
    def accumulator(self) -> float:
        return self._accumulator

    @property
    def pending_operator(self) -> str | None:
        return self._pending_operator

    @property
    def is_new_entry(self) -> bool:
        return self._is_new_entry

    def snapshot(self) -> CalculatorState:
        return CalculatorState(
            display_value=self._display_value,
            expression_history=self._expression_history,
            accumulator=self._accumulator,
            pending_operator=self._pending_operator,
            is_new_entry=self._is_new_entry,
            last_operand=self._last_operand,
            last_operator=self._last_operator,
            is_equals_pressed=self._is_equals_pressed,
        )

    # ── Entrada de dígitos ───────────────────────────────────────

    def input_digit(self, digit: str):
        if not digit:
            return
        if digit not in self.DIGITS:
            raise ValueError(f"Dígito no válido: {digit!r}")

        self._engine.clear_error()
        self._set("is_equals_pressed", False)

        if self._is_new_entry:
            self._is_new_entry = False
            self._set("display_value", "0." if digit == "." else digit)
            return

        current = self._display_value
        # En notación científica solo se admite una entrada nueva
        if "E" in current:
            return
        if digit == "." and "." in current:
            return

        if len(current.replace(".", "").replace("-", "")) >= self.MAX_INPUT_DIGITS:
            return

        if current == "0" and digit != ".":
            self._set("display_value", digit)
        else:
            self._set("display_value", current + digit)

    # ── Operadores binarios ──────────────────────────────────────

    def press_operator(self, symbol: str):
        if not symbol:
            return

        self._engine.clear_error()
        self._set("is_equals_pressed", False)

        current = self._parse_display()

        if self._pending_operator is not None and not self._is_new_entry:
            result = self._engine.calculate(self._accumulator, self._pending_operator, current)
            if self._engine.has_error:
                self._show_error()
                return
            self._accumulator = result
            self._set("display_value", self._engine.format_number(result))
        else:
            self._accumulator = current

        self._pending_operator = symbol
        self._is_new_entry = True
        self._set(
            "expression_history",
            f"{self._engine.format_number(self._accumulator)} {symbol}",
        )

    def equals(self):
        self._engine.clear_error()

        if self._is_equals_pressed and self._last_operator is not None:
            # Repetir la última operación sobre el valor mostrado
            operand = self._last_operand
            operator = self._last_operator
            self._accumulator = self._parse_display()
        elif self._pending_operator is not None:
            operand = self._parse_display()
            operator = self._pending_operator
            self._last_operand = operand
            self._last_operator = operator
        else:
            self._set("is_equals_pressed", True)
            return

        result = self._engine.calculate(self._accumulator, operator, operand)
        if self._engine.has_error:
            self._show_error()
            return

        fmt = self._engine.format_number
        self._set(
            "expression_history",
            f"{fmt(self._accumulator)} {operator} {fmt(operand)} =",
        )
        self._set("display_value", fmt(result))
        self._accumulator = result
        self._pending_operator = None
        self._is_new_entry = True
        self._set("is_equals_pressed", True)

    # ── Borrado ──────────────────────────────────────────────────

    def clear(self):
        self._reset_state()
        self._set("display_value", "0")
        self._set("expression_history", "")
        self._engine.clear_error()

    def clear_entry(self):
        self._set("display_value", "0")
        self._is_new_entry = True
        self._engine.clear_error()

    def backspace(self):
        if self._is_new_entry or self._engine.has_error or "E" in self._display_value:
            self._is_new_entry = True
            self._set("display_value", "0")
            return

        trimmed = self._display_value[:-1]
        if trimmed in ("", "-"):
            self._is_new_entry = True
            trimmed = "0"
        self._set("display_value", trimmed)

    # ── Operaciones unarias ──────────────────────────────────────

    def negate(self):
        result = self._engine.calculate_unary(UnaryOperator.NEGATE, self._parse_display())
        self._set("display_value", self._engine.format_number(result))
        self._is_new_entry = False

    def percent(self):
        current = self._parse_display()
        if self._pending_operator is not None:
            result = self._engine.calculate(self._accumulator, BinaryOperator.PERCENT, current)
        else:
            result = self._engine.calculate_unary(UnaryOperator.PERCENT, current)
        self._set("display_value", self._engine.format_number(result))
        self._is_new_entry = False

    def apply_function(self, name: str):
        """Aplica √, x² o 1/x al valor mostrado y deja el historial como llamada."""
        if not name:
            return

        current = self._parse_display()
        result = self._engine.calculate_unary(name, current)

        if self._engine.has_error:
            self._set("display_value", self._engine.error_message or "Error")
            self._reset_state()
            return

        template = self.FUNCTION_HISTORY.get(UnaryOperator.from_symbol(name))
        if template is not None:
            history = template.format(self._engine.format_number(current))
        else:
            history = name
        self._set("expression_history", history)
        self._set("display_value", self._engine.format_number(result))
        self._is_new_entry = True

    # ── Teclado ──────────────────────────────────────────────────

    def press_key(self, key: str):
        """Despacha una tecla del teclado en pantalla."""
        if key in self.DIGITS:
            self.input_digit(key)
        elif key == "=":
            self.equals()
        elif key == "C":
            self.clear()
        elif key == "CE":
            self.clear_entry()
        elif key == "⌫":
            self.backspace()
        elif key == "±":
            self.negate()
        elif key == "%":
            self.percent()
        elif key in ("√", "x²", "1/x"):
            self.apply_function(key)
        elif BinaryOperator.from_symbol(key) is not None:
            self.press_operator(key)
        else:
            logger.warning("Tecla desconocida: %r", key)
            raise ValueError(f"Tecla desconocida: {key!r}")

    def press_keys(self, keys):
        for key in keys:
            self.press_key(key)

    # ── Auxiliares ───────────────────────────────────────────────

    def _parse_display(self) -> float:
        try:
            return float(self._display_value)
        except ValueError:
            return 0.0

    def _show_error(self):
        self._set("display_value", self._engine.error_message or "Error")
        self._set("expression_history", "")
        self._reset_state()

    def _reset_state(self):
        logger.debug("Reinicio de estado (pantalla=%r)", self._display_value)
        self._accumulator = 0.0
        self._pending_operator = None
        self._is_new_entry = True
        self._last_operand = 0.0
        self._last_operator = None
        self._set("is_equals_pressed", False)
