"""
Interfaz gráfica de la calculadora de escritorio.

Usa tkinter. Toda la lógica vive en CalculatorViewModel; la ventana
solo reenvía pulsaciones y se suscribe a los cambios de pantalla.
"""

import logging
import tkinter as tk
from tkinter import font as tkfont

from calculator_engine import CalculatorEngine
from calculator_state import CalculatorViewModel


logger = logging.getLogger(__name__)


class CalculatorApp:
    """Ventana principal de la calculadora."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "pressed":    "#A6E3A1",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#A6E3A1",
    }

    # ── Definiciones del teclado ─────────────────────────────────
    #  Cada fila es una lista de (texto, tecla, tipo_color)
    #  tipo_color: "num", "op", "func", "special", "equals"

    KEYPAD = [
        [("%",  "%",  "func"),    ("CE", "CE", "special"),
         ("C",  "C",  "special"), ("⌫", "⌫", "special")],

        [("1/x", "1/x", "func"), ("x²", "x²", "func"),
         ("√", "√", "func"), ("÷", "÷", "op")],

        [("7", "7", "num"), ("8", "8", "num"),
         ("9", "9", "num"), ("×", "×", "op")],

        [("4", "4", "num"), ("5", "5", "num"),
         ("6", "6", "num"), ("−", "−", "op")],

        [("1", "1", "num"), ("2", "2", "num"),
         ("3", "3", "num"), ("+", "+", "op")],

        [("±", "±", "num"), ("0", "0", "num"),
         (".", ".", "num"), ("=", "=", "equals")],
    ]

    # Teclas físicas -> tecla del teclado en pantalla
    KEY_BINDINGS = {
        "<Return>": "=",
        "<KP_Enter>": "=",
        "<equal>": "=",
        "<BackSpace>": "⌫",
        "<Escape>": "C",
        "<Delete>": "CE",
        "<plus>": "+",
        "<KP_Add>": "+",
        "<minus>": "−",
        "<KP_Subtract>": "−",
        "<asterisk>": "×",
        "<KP_Multiply>": "×",
        "<slash>": "÷",
        "<KP_Divide>": "÷",
        "<period>": ".",
        "<comma>": ".",
        "<KP_Decimal>": ".",
        "<percent>": "%",
    }

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, view_model: CalculatorViewModel = None):
        self.root = root
        self.root.title("Calculadora")
        self.root.configure(bg=self.C["bg"])

        if view_model is None:
            view_model = CalculatorViewModel(CalculatorEngine())
        self.view_model = view_model
        self._equals_button = None

        self._init_fonts()
        self._create_display()
        self._create_keypad()
        self._bind_keyboard()

        self.view_model.subscribe(self._on_state_changed)
        self._refresh()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr   = tkfont.Font(family="Consolas", size=13)
        self._f_result = tkfont.Font(family="Consolas", size=26, weight="bold")
        self._f_btn    = tkfont.Font(family="Segoe UI", size=15)
        self._f_small  = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        # Historial de la expresión (solo lectura)
        self.history_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.history_var,
            font=self._f_expr, bg=self.C["display_bg"],
            fg=self.C["expr_fg"], anchor="e",
        ).pack(fill="x", pady=(4, 0))

        # Fila del resultado + botón copiar
        row = tk.Frame(frame, bg=self.C["display_bg"])
        row.pack(fill="x", pady=(2, 4))

        tk.Button(
            row, text="Copiar", font=self._f_small,
            bg=self.C["func"], fg=self.C["func_fg"],
            activebackground=self.C["special"], relief="flat",
            cursor="hand2", command=self._copy_result, padx=8,
        ).pack(side="left", padx=(0, 6))

        self.display_var = tk.StringVar(value="0")
        tk.Label(
            row, textvariable=self.display_var,
            font=self._f_result, bg=self.C["display_bg"],
            fg=self.C["result_fg"], anchor="e",
        ).pack(side="right", fill="x", expand=True)

    # ── Teclado numérico / operadores ────────────────────────────

    def _create_keypad(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="both", expand=True, padx=6, pady=(2, 6))

        max_cols = max(len(row) for row in self.KEYPAD)
        for c in range(max_cols):
            frame.columnconfigure(c, weight=1, uniform="key")

        for r, row_def in enumerate(self.KEYPAD):
            spans = self._compute_spans(len(row_def), max_cols)
            col_pos = 0
            for idx, (text, key, kind) in enumerate(row_def):
                btn = tk.Button(
                    frame, text=text, font=self._f_btn,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda k=key: self._on_key(k),
                )
                btn.grid(row=r, column=col_pos, columnspan=spans[idx],
                         sticky="nsew", padx=2, pady=2, ipady=8)
                if kind == "equals":
                    self._equals_button = btn
                col_pos += spans[idx]

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    @staticmethod
    def _compute_spans(cols_in_row: int, max_cols: int) -> list[int]:
        """Reparte max_cols entre cols_in_row botones."""
        base, extra = divmod(max_cols, cols_in_row)
        spans = [base] * cols_in_row
        spans[-1] += extra
        return spans

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        for digit in "0123456789":
            self.root.bind(digit, lambda _e, d=digit: self._on_key(d))
            self.root.bind(f"<KP_{digit}>", lambda _e, d=digit: self._on_key(d))
        for sequence, key in self.KEY_BINDINGS.items():
            self.root.bind(sequence, lambda _e, k=key: self._on_key(k))
        self.root.bind("<Control-c>", lambda _e: self._copy_result())

    # ── Acciones ─────────────────────────────────────────────────

    def _on_key(self, key: str):
        self.view_model.press_key(key)
        return "break"

    def _on_state_changed(self, name: str):
        if name == "display_value":
            self.display_var.set(self.view_model.display_value)
        elif name == "expression_history":
            self.history_var.set(self.view_model.expression_history)
        elif name == "is_equals_pressed":
            self._update_equals_feedback()

    def _refresh(self):
        self.display_var.set(self.view_model.display_value)
        self.history_var.set(self.view_model.expression_history)
        self._update_equals_feedback()

    def _update_equals_feedback(self):
        if self._equals_button is None:
            return
        kind = "pressed" if self.view_model.is_equals_pressed else "equals"
        self._equals_button.config(bg=self.C[kind])

    # ── Copiar resultado ─────────────────────────────────────────

    def _copy_result(self):
        text = self.view_model.display_value
        self.root.clipboard_clear()
        self.root.clipboard_append(text)
        logger.debug("Copiado al portapapeles: %s", text)
        return "break"
