"""
Motor aritmético de la calculadora de escritorio.

Este módulo provee la clase CalculatorEngine, que resuelve operaciones
binarias y unarias de dos operandos a la vez y formatea el resultado
para la pantalla. Está diseñado como módulo independiente que se
inyecta en el modelo de vista (ver calculator_state.py).

Contrato de interfaz:
    - calculate(left, operator, right) -> float
    - calculate_unary(operator, value) -> float
    - format_number(value) -> str
    - clear_error()
    - has_error / error_message / error_kind / last_result

Los errores no se lanzan como excepciones: se devuelve NaN y se deja
un mensaje consultable, para que quien llama decida si reinicia.
"""

import logging
import math
from enum import Enum
from typing import NamedTuple


logger = logging.getLogger(__name__)


# ── Vocabulario de operadores ────────────────────────────────────

class _SymbolEnum(Enum):
    """Enum cuyos miembros aceptan varios símbolos de entrada."""

    def __init__(self, *symbols):
        self.symbols = symbols

    @property
    def symbol(self) -> str:
        return self.symbols[0]

    @classmethod
    def from_symbol(cls, symbol):
        if isinstance(symbol, cls):
            return symbol
        for member in cls:
            if symbol in member.symbols:
                return member
        return None


class BinaryOperator(_SymbolEnum):
    ADD = ("+",)
    SUBTRACT = ("−", "-")
    MULTIPLY = ("×", "*")
    DIVIDE = ("÷", "/")
    PERCENT = ("%",)


class UnaryOperator(_SymbolEnum):
    SQRT = ("√", "sqrt")
    NEGATE = ("±", "negate")
    RECIPROCAL = ("1/x", "reciprocal")
    SQUARE = ("x²", "square")
    PERCENT = ("%", "percent")


class ErrorKind(Enum):
    DIVIDE_BY_ZERO = "divide-by-zero"
    INVALID_INPUT = "invalid-input"
    UNKNOWN_OPERATOR = "unknown-operator"


class EngineResult(NamedTuple):
    """Valor de la última operación, o el error que la invalidó."""

    value: float
    error: ErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not math.isnan(self.value)


class CalculatorEngine:
    """Resuelve operaciones de calculadora de escritorio con doble precisión."""

    MAX_DISPLAY_DIGITS = 16
    SCIENTIFIC_DIGITS = 10
    MAX_ROUND_DECIMALS = 15

    DIVIDE_BY_ZERO_MESSAGE = "Cannot divide by zero"
    INVALID_INPUT_MESSAGE = "Invalid input"

    def __init__(self):
        self._error_kind: ErrorKind | None = None
        self._error_message: str | None = None
        self._last_value = 0.0

    # ── Estado de error ──────────────────────────────────────────

    @property
    def has_error(self) -> bool:
        return self._error_kind is not None

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def error_kind(self) -> ErrorKind | None:
        return self._error_kind

    @property
    def last_result(self) -> EngineResult:
        return EngineResult(self._last_value, self._error_kind, self._error_message)

    def clear_error(self):
        self._error_kind = None
        self._error_message = None
        if math.isnan(self._last_value):
            self._last_value = 0.0

    def _fail(self, kind: ErrorKind, message: str) -> float:
        self._error_kind = kind
        self._error_message = message
        self._last_value = math.nan
        logger.debug("Error del motor: %s (%s)", message, kind.value)
        return math.nan

    def _succeed(self, value: float) -> float:
        self._last_value = value
        return value

    # ── Operaciones binarias ─────────────────────────────────────

    def calculate(self, left: float, operator, right: float) -> float:
        """Aplica un operador binario; ante error devuelve NaN."""
        self.clear_error()

        op = BinaryOperator.from_symbol(operator)
        if op is None:
            return self._fail(ErrorKind.UNKNOWN_OPERATOR, f"Unknown operator: {operator}")

        if op is BinaryOperator.ADD:
            return self._succeed(left + right)
        if op is BinaryOperator.SUBTRACT:
            return self._succeed(left - right)
        if op is BinaryOperator.MULTIPLY:
            return self._succeed(left * right)
        if op is BinaryOperator.DIVIDE:
            if right == 0:
                return self._fail(ErrorKind.DIVIDE_BY_ZERO, self.DIVIDE_BY_ZERO_MESSAGE)
            return self._succeed(left / right)
        # Porcentaje de: 200 % 25 -> 50, no módulo.
        return self._succeed(left * (right / 100))

    # ── Operaciones unarias ──────────────────────────────────────

    def calculate_unary(self, operator, value: float) -> float:
        """Aplica un operador unario; ante error devuelve NaN."""
        self.clear_error()

        op = UnaryOperator.from_symbol(operator)
        if op is None:
            return self._fail(
                ErrorKind.UNKNOWN_OPERATOR, f"Unknown unary operator: {operator}"
            )

        if op is UnaryOperator.SQRT:
            if value < 0:
                return self._fail(ErrorKind.INVALID_INPUT, self.INVALID_INPUT_MESSAGE)
            return self._succeed(math.sqrt(value))
        if op is UnaryOperator.NEGATE:
            return self._succeed(-value)
        if op is UnaryOperator.RECIPROCAL:
            if value == 0:
                return self._fail(ErrorKind.DIVIDE_BY_ZERO, self.DIVIDE_BY_ZERO_MESSAGE)
            return self._succeed(1 / value)
        if op is UnaryOperator.SQUARE:
            return self._succeed(value * value)
        return self._succeed(value / 100)

    # ── Formato del resultado ────────────────────────────────────

    def format_number(self, value: float) -> str:
        if math.isnan(value):
            return self._error_message or "Error"

        if math.isinf(value):
            return "Overflow"

        if value == 0:
            return "0"

        magnitude = abs(value)
        if magnitude >= 1e16 or magnitude < 1e-16:
            return f"{value:.{self.SCIENTIFIC_DIGITS}G}"

        formatted = f"{value:.{self.MAX_DISPLAY_DIGITS}G}"

        if len(formatted) > self.MAX_DISPLAY_DIGITS and "." in formatted:
            decimals = self.MAX_DISPLAY_DIGITS - formatted.index(".") - 1
            if decimals > 0:
                rounded = round(value, min(decimals, self.MAX_ROUND_DECIMALS))
                formatted = f"{rounded:.{self.MAX_DISPLAY_DIGITS}G}"

        return formatted
