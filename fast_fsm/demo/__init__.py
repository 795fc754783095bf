"""Example machines built on fast-fsm."""

from .printer import PrinterEvent, PrinterState, build_printer_machine

__all__ = ["PrinterEvent", "PrinterState", "build_printer_machine"]
