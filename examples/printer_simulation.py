"""Example driving the printer machine through a simulated session."""

import logging
import threading
import time

from fast_fsm import EventQueue
from fast_fsm.demo.printer import PrinterEvent, build_printer_machine


def scripted_session():
    """Replay a fixed event script and print every transition."""
    print("=== Scripted Session ===\n")

    printer = build_printer_machine()
    printer.add_listener(lambda record: print(f"  {record}"))

    script = [
        PrinterEvent.PRINT_REQUEST,
        *[PrinterEvent.CONTINUE_PRINTING] * 3,
        PrinterEvent.ERROR_NO_PAPER,
        PrinterEvent.PRINT_REQUEST,  # ignored while in ERROR
        PrinterEvent.CLEAR_ERROR,
        PrinterEvent.PRINT_REQUEST,
        *[PrinterEvent.CONTINUE_PRINTING] * 5,
    ]
    printer.handle_events(script)

    print(f"\nFinal state: {printer.current.name}")
    print(f"Jobs started: {printer.context['jobs_started']}")
    print(f"Paper errors: {printer.context['errors']}")


def threaded_session():
    """Feed the printer from a timer thread through an EventQueue."""
    print("\n=== Threaded Session ===\n")

    printer = build_printer_machine()
    events = EventQueue()

    def paper_feed():
        # Each tick is a synthetic CONTINUE_PRINTING event
        for _ in range(5):
            time.sleep(0.05)
            events.publish(PrinterEvent.CONTINUE_PRINTING)

    events.publish(PrinterEvent.PRINT_REQUEST)
    feeder = threading.Thread(target=paper_feed)
    feeder.start()

    for _ in range(6):
        record = events.dispatch_next(printer, timeout=1.0)
        if record is not None:
            print(f"  {record}")

    feeder.join()
    print(f"\nFinal state: {printer.current.name}")


def diagram():
    """Print the printer's state diagram."""
    print("\n=== Diagram ===\n")
    print(build_printer_machine().to_mermaid())


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    scripted_session()
    threaded_session()
    diagram()
