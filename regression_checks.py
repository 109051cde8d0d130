from calculator_engine import CalculatorEngine
from calculator_state import CalculatorViewModel
import math
import sys


def _tokenize(sequence: str) -> list[str]:
	"""Separa una secuencia como "5 + 3 = =" en teclas."""
	keys = []
	for part in sequence.split():
		if part in ("CE", "1/x", "x²"):
			keys.append(part)
		elif part.replace(".", "").isdigit():
			keys.extend(part)
		else:
			keys.append(part)
	return keys


def _walk(sequence: str):
	vm = CalculatorViewModel(CalculatorEngine())
	states = []

	for key in _tokenize(sequence):
		vm.press_key(key)
		states.append((key, vm.snapshot()))

	return vm, states


def inspect_key_states(sequence: str, *, show: int = 0) -> None:
	"""Imprime el estado tras cada tecla de la secuencia."""
	vm, states = _walk(sequence)

	print("Key inspection")
	print(f"sequence:       {sequence}")
	print(f"keys pressed:   {len(states)}")

	limit = len(states) if show <= 0 else show
	for i, (key, state) in enumerate(states[:limit], start=1):
		print(
			f"  {i}. {key:>3}  display={state.display_value!r}"
			f"  history={state.expression_history!r}"
			f"  acc={state.accumulator!r}  pending={state.pending_operator!r}"
			f"  new={state.is_new_entry}  eq={state.is_equals_pressed}"
		)

	print(f"final display:  {vm.display_value}")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	engine = CalculatorEngine()
	checks.append(("5 + 3 adds", engine.calculate(5, "+", 3) == 8))
	checks.append(("10 − 3 keeps order", engine.calculate(10, "−", 3) == 7))
	checks.append(("200 % 25 is percentage-of", engine.calculate(200, "%", 25) == 50))

	value = engine.calculate(7, "÷", 0)
	checks.append(("divide by zero gives NaN", math.isnan(value)))
	checks.append(("divide by zero message", engine.format_number(value) == "Cannot divide by zero"))

	engine.calculate_unary("sqrt", -4)
	checks.append(("sqrt of negative is invalid input", engine.error_message == "Invalid input"))
	checks.append(("infinity formats as Overflow", engine.format_number(math.inf) == "Overflow"))

	engine.clear_error()
	expected_actual.append(("format 1/3", "0.33333333333333", engine.format_number(1 / 3)))
	expected_actual.append(("format 1e16", "1E+16", engine.format_number(1e16)))
	expected_actual.append(("format 0.1 + 0.2", "0.3", engine.format_number(0.1 + 0.2)))

	vm, _ = _walk("123 . .")
	expected_actual.append(("123 . .", "123.", vm.display_value))

	vm, _ = _walk("5 + 3 =")
	expected_actual.append(("5 + 3 = display", "8", vm.display_value))
	expected_actual.append(("5 + 3 = history", "5 + 3 =", vm.expression_history))

	vm, _ = _walk("5 + 3 = =")
	expected_actual.append(("5 + 3 = = repeats +3", "11", vm.display_value))

	vm, _ = _walk("10 ÷ 0 =")
	expected_actual.append(("10 ÷ 0 =", "Cannot divide by zero", vm.display_value))
	checks.append(("divide by zero clears history", vm.expression_history == ""))
	checks.append(("divide by zero drops pending operator", vm.pending_operator is None))

	vm, _ = _walk("2 + 3 × 4 =")
	expected_actual.append(("2 + 3 × 4 = (no precedence)", "20", vm.display_value))

	vm, _ = _walk("200 + 10 %")
	expected_actual.append(("200 + 10 %", "20", vm.display_value))

	vm, _ = _walk("9 √")
	expected_actual.append(("9 √ display", "3", vm.display_value))
	expected_actual.append(("9 √ history", "√(9)", vm.expression_history))

	vm, _ = _walk("12 ⌫ ⌫")
	expected_actual.append(("12 ⌫ ⌫", "0", vm.display_value))
	checks.append(("backspace to empty starts new entry", vm.is_new_entry))

	for label, expected, actual in expected_actual:
		checks.append((label, expected == actual))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_checks.py
	#   python regression_checks.py --inspect "5 + 3 = ="
	#   python regression_checks.py --inspect "10 ÷ 0 =" --show 2
	if "--inspect" in sys.argv:
		try:
			sequence = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing key sequence after --inspect")

		def _read_int(flag: str, default: int) -> int:
			if flag not in sys.argv:
				return default
			idx = sys.argv.index(flag)
			try:
				return int(sys.argv[idx + 1])
			except (ValueError, IndexError):
				raise SystemExit(f"Invalid value for {flag}")

		inspect_key_states(sequence, show=_read_int("--show", 0))
	else:
		run_regressions()
