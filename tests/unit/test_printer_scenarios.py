"""
Tests for the printer example machine.
"""

import pytest

from fast_fsm.demo.printer import (
    PAGES_PER_JOB,
    PrinterEvent,
    PrinterState,
    build_printer_machine,
)


@pytest.fixture
def printer():
    return build_printer_machine()


@pytest.fixture
def printing(printer):
    printer.handle_event(PrinterEvent.PRINT_REQUEST)
    return printer


class TestPrinterScenarios:
    """Walk the printer through its documented scenarios"""

    def test_starts_ready(self, printer):
        """Test the printer starts in READY."""
        assert printer.current_state is PrinterState.READY
        assert printer.name == "printer"

    def test_print_request_starts_printing(self, printer):
        """Test PRINT_REQUEST moves READY to PRINTING."""
        printer.handle_event(PrinterEvent.PRINT_REQUEST)

        assert printer.current_state is PrinterState.PRINTING
        assert printer.previous_state is PrinterState.READY

    def test_entry_resets_page_counter(self, printing):
        """Test entering PRINTING resets the page counter."""
        assert printing.context["pages_printed"] == 0
        assert printing.context["jobs_started"] == 1

    def test_pages_below_threshold_stay_printing(self, printing):
        """Test the printer keeps printing below the page limit."""
        for page in range(1, PAGES_PER_JOB):
            record = printing.handle_event(PrinterEvent.CONTINUE_PRINTING)

            assert record.is_self_loop
            assert printing.current_state is PrinterState.PRINTING
            assert printing.context["pages_printed"] == page

    def test_threshold_page_returns_to_ready(self, printing):
        """Test the last page returns the printer to READY."""
        printing.handle_events([PrinterEvent.CONTINUE_PRINTING] * (PAGES_PER_JOB - 1))

        record = printing.handle_event(PrinterEvent.CONTINUE_PRINTING)

        assert not record.is_self_loop
        assert printing.current_state is PrinterState.READY
        assert printing.context["pages_printed"] == PAGES_PER_JOB

    @pytest.mark.parametrize("pages", [0, 2, 4])
    def test_no_paper_goes_to_error(self, printing, pages):
        """Test ERROR_NO_PAPER moves the printer to ERROR."""
        printing.handle_events([PrinterEvent.CONTINUE_PRINTING] * pages)

        printing.handle_event(PrinterEvent.ERROR_NO_PAPER)

        assert printing.current_state is PrinterState.ERROR
        assert printing.previous_state is PrinterState.PRINTING
        assert printing.context["errors"] == 1

    @pytest.mark.parametrize(
        "event",
        [
            PrinterEvent.PRINT_REQUEST,
            PrinterEvent.CONTINUE_PRINTING,
            PrinterEvent.CANCEL_COMMAND,
            PrinterEvent.ERROR_NO_PAPER,
        ],
    )
    def test_error_ignores_everything_but_clear(self, printing, event):
        """Test ERROR ignores every event except CLEAR_ERROR."""
        printing.handle_event(PrinterEvent.ERROR_NO_PAPER)

        record = printing.handle_event(event)

        assert record.is_self_loop
        assert printing.current_state is PrinterState.ERROR
        assert printing.context["errors"] == 1

    def test_clear_error_returns_to_ready(self, printing):
        """Test CLEAR_ERROR returns the printer to READY."""
        printing.handle_event(PrinterEvent.ERROR_NO_PAPER)

        printing.handle_event(PrinterEvent.CLEAR_ERROR)

        assert printing.current_state is PrinterState.READY
        assert printing.previous_state is PrinterState.ERROR

    def test_cancel_returns_to_ready(self, printing):
        """Test CANCEL_COMMAND stops the job."""
        printing.handle_event(PrinterEvent.CONTINUE_PRINTING)

        printing.handle_event(PrinterEvent.CANCEL_COMMAND)

        assert printing.current_state is PrinterState.READY

    def test_second_job_starts_from_zero(self, printing):
        """Test a second job counts pages from zero."""
        printing.handle_events(
            [
                PrinterEvent.CONTINUE_PRINTING,
                PrinterEvent.CANCEL_COMMAND,
                PrinterEvent.PRINT_REQUEST,
            ]
        )

        assert printing.context["pages_printed"] == 0
        assert printing.context["jobs_started"] == 2

    def test_ready_ignores_continue(self, printer):
        """Test READY ignores CONTINUE_PRINTING."""
        record = printer.handle_event(PrinterEvent.CONTINUE_PRINTING)

        assert record.is_self_loop
        assert "pages_printed" not in printer.context

    def test_printers_do_not_share_context(self):
        """Test printers do not share context data."""
        first = build_printer_machine()
        second = build_printer_machine()

        first.handle_event(PrinterEvent.PRINT_REQUEST)

        assert second.current_state is PrinterState.READY
        assert "pages_printed" not in second.context

    def test_printers_do_not_share_states(self):
        """Test state metadata edits stay on one printer."""
        first = build_printer_machine()
        second = build_printer_machine()

        first.get_state(PrinterState.READY).metadata["tray"] = "empty"

        assert second.get_state(PrinterState.READY).metadata == {}
        assert build_printer_machine().get_state(PrinterState.READY).metadata == {}
