"""Punto de entrada de la calculadora de escritorio."""

import logging
import sys
import tkinter as tk

from calculator_engine import CalculatorEngine
from calculator_state import CalculatorViewModel
from calculator_ui import CalculatorApp


WINDOW_GEOMETRY = "340x520"
WINDOW_MIN_SIZE = (300, 460)
DEBUG = False


def main():
    debug = DEBUG or "--debug" in sys.argv
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    root = tk.Tk()
    root.geometry(WINDOW_GEOMETRY)
    root.minsize(*WINDOW_MIN_SIZE)

    engine = CalculatorEngine()
    view_model = CalculatorViewModel(engine)
    CalculatorApp(root, view_model=view_model)
    root.mainloop()


if __name__ == "__main__":
    main()
