"""Example demonstrating machine serialization capabilities."""

import tempfile
from pathlib import Path

from fast_fsm import Machine
from fast_fsm.demo.printer import PrinterEvent, PrinterState, build_printer_machine


def definition_roundtrip(tmpdir: Path):
    """Save the printer's state table and build a new machine from it."""
    print("=== Definition ===\n")

    printer = build_printer_machine()
    for suffix in ("json", "yaml", "msgpack"):
        path = tmpdir / f"printer.{suffix}"
        printer.save(str(path))
        loaded = Machine.load(str(path))
        print(f"{suffix}: {path.stat().st_size} bytes, states={loaded.state_ids}")

    print((tmpdir / "printer.yaml").read_text())


def snapshot_roundtrip(tmpdir: Path):
    """Persist a printer halfway through a job and resume it elsewhere."""
    print("=== Snapshot ===\n")

    printer = build_printer_machine()
    printer.handle_events(
        [PrinterEvent.PRINT_REQUEST, PrinterEvent.CONTINUE_PRINTING, PrinterEvent.CONTINUE_PRINTING]
    )
    path = tmpdir / "printer-state.json"
    printer.save_snapshot(str(path))
    print(path.read_text())

    resumed = build_printer_machine()
    resumed.load_snapshot(str(path))
    assert resumed.current_state is PrinterState.PRINTING
    print(f"Resumed with {resumed.context['pages_printed']} pages printed")


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        definition_roundtrip(Path(tmp))
        snapshot_roundtrip(Path(tmp))
