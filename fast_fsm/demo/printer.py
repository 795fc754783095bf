"""Printer controller: the reference example machine.

A printer waits in READY, prints pages in PRINTING and stops in ERROR
when it runs out of paper. A job is done after ``PAGES_PER_JOB`` pages.
"""

import logging
from enum import Enum, auto
from typing import Any

from ..core.state import State
from ..core.types import Event
from ..machine import Machine

logger = logging.getLogger(__name__)

PAGES_PER_JOB = 5


class PrinterState(Enum):
    READY = auto()
    PRINTING = auto()
    ERROR = auto()


class PrinterEvent(Enum):
    PRINT_REQUEST = auto()
    ERROR_NO_PAPER = auto()
    CANCEL_COMMAND = auto()
    CONTINUE_PRINTING = auto()
    CLEAR_ERROR = auto()


def ready(machine: Machine, event: Event) -> PrinterState:
    """Idle, waiting for a print job."""
    if event.type is PrinterEvent.PRINT_REQUEST:
        return PrinterState.PRINTING
    if event.type is PrinterEvent.ERROR_NO_PAPER:
        return PrinterState.ERROR
    return PrinterState.READY


def printing(machine: Machine, event: Event) -> PrinterState:
    """Printing the pages of the current job."""
    if event.type is PrinterEvent.ERROR_NO_PAPER:
        return PrinterState.ERROR
    if event.type is PrinterEvent.CANCEL_COMMAND:
        return PrinterState.READY
    if event.type is PrinterEvent.CONTINUE_PRINTING:
        machine.context["pages_printed"] += 1
        logger.debug("Printed page %d", machine.context["pages_printed"])
        if machine.context["pages_printed"] >= PAGES_PER_JOB:
            return PrinterState.READY
    return PrinterState.PRINTING


def error(machine: Machine, event: Event) -> PrinterState:
    """Out of paper; only CLEAR_ERROR gets out."""
    if event.type is PrinterEvent.CLEAR_ERROR:
        return PrinterState.READY
    return PrinterState.ERROR


def start_job(machine: Machine) -> None:
    machine.context["pages_printed"] = 0
    machine.context["jobs_started"] = machine.context.get("jobs_started", 0) + 1


def finish_job(machine: Machine) -> None:
    logger.debug("Job ended after %d pages", machine.context["pages_printed"])


def raise_alarm(machine: Machine) -> None:
    machine.context["errors"] = machine.context.get("errors", 0) + 1


PRINTER_STATES = [
    State(
        id=PrinterState.READY,
        name="Ready",
        handler=ready,
        transitions={
            PrinterEvent.PRINT_REQUEST: PrinterState.PRINTING,
            PrinterEvent.ERROR_NO_PAPER: PrinterState.ERROR,
        },
    ),
    State(
        id=PrinterState.PRINTING,
        name="Printing",
        handler=printing,
        on_entry=start_job,
        on_exit=finish_job,
        transitions={
            PrinterEvent.CONTINUE_PRINTING: PrinterState.READY,
            PrinterEvent.CANCEL_COMMAND: PrinterState.READY,
            PrinterEvent.ERROR_NO_PAPER: PrinterState.ERROR,
        },
    ),
    State(
        id=PrinterState.ERROR,
        name="Error",
        handler=error,
        on_entry=raise_alarm,
        transitions={PrinterEvent.CLEAR_ERROR: PrinterState.READY},
    ),
]


def build_printer_machine(**kwargs: Any) -> Machine:
    """Build a fresh printer machine in READY."""
    kwargs.setdefault("name", "printer")
    return Machine(PRINTER_STATES, PrinterState.READY, **kwargs)
