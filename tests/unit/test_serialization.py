"""
Tests for machine definition and snapshot serialization.
"""

from unittest.mock import MagicMock, mock_open, patch

import msgspec
import pytest
import yaml

from fast_fsm import Machine, SerializationError, State
from fast_fsm.demo.printer import (
    PrinterEvent,
    PrinterState,
    build_printer_machine,
    printing,
    ready,
)
from fast_fsm.serialization import (
    FunctionRegistry,
    MsgspecSerializer,
    SerializableSnapshot,
    SerializerRegistry,
    detect_format,
)
from fast_fsm.serialization.registry import decode_identifier, encode_identifier


class TestDefinitionSerialization:
    """Test saving and loading state tables"""

    @pytest.mark.parametrize("suffix", ["json", "yaml", "msgpack"])
    def test_save_and_load(self, tmp_path, suffix):
        """Test a definition survives save and load in each format."""
        path = tmp_path / f"printer.{suffix}"
        build_printer_machine().save(str(path))

        loaded = Machine.load(str(path))

        assert loaded.name == "printer"
        assert loaded.state_ids == list(PrinterState)
        assert loaded.current_state is PrinterState.READY
        assert loaded.get_state(PrinterState.PRINTING).handler is printing
        assert loaded.get_state(PrinterState.ERROR).transitions == {
            PrinterEvent.CLEAR_ERROR: PrinterState.READY
        }

    def test_loaded_machine_runs(self, tmp_path):
        """Test a loaded machine handles events."""
        path = tmp_path / "printer.json"
        build_printer_machine().save(str(path))
        loaded = Machine.load(str(path))

        loaded.handle_events([PrinterEvent.PRINT_REQUEST, PrinterEvent.CONTINUE_PRINTING])

        assert loaded.current_state is PrinterState.PRINTING
        assert loaded.context["pages_printed"] == 1

    def test_json_layout(self):
        """Test the JSON layout of a saved definition."""
        data = MsgspecSerializer().serialize(build_printer_machine(), format="json")
        raw = msgspec.json.decode(data)

        assert raw["initial_state"] == "READY"
        assert raw["state_type"] == "fast_fsm.demo.printer.PrinterState"
        assert raw["event_type"] == "fast_fsm.demo.printer.PrinterEvent"
        assert raw["states"][0]["handler"] == "fast_fsm.demo.printer.ready"
        assert raw["states"][1]["on_entry"] == "fast_fsm.demo.printer.start_job"

    def test_yaml_layout(self):
        """Test the YAML layout keeps state order."""
        data = MsgspecSerializer().serialize(build_printer_machine(), format="yaml")
        raw = yaml.safe_load(data)

        assert [s["id"] for s in raw["states"]] == ["READY", "PRINTING", "ERROR"]

    def test_string_ids(self, tmp_path):
        """Test string state ids and metadata survive a save."""
        machine = Machine([State(id="idle", handler=ready)], "idle", metadata={"v": 2})
        path = tmp_path / "idle.yaml"
        machine.save(str(path))

        loaded = Machine.load(str(path))

        assert loaded.current_state == "idle"
        assert loaded.metadata == {"v": 2}

    def test_lambda_handler_cannot_be_saved(self):
        """Test lambda handlers cannot be saved."""
        machine = Machine([State(id="a", handler=lambda m, e: "a")], "a")

        with pytest.raises(SerializationError, match="Lambda functions cannot be serialized"):
            MsgspecSerializer().serialize(machine)

    def test_local_handler_cannot_be_saved(self):
        """Test local function handlers cannot be saved."""
        def local(machine, event):
            return "a"

        machine = Machine([State(id="a", handler=local)], "a")

        with pytest.raises(SerializationError, match="Local functions"):
            MsgspecSerializer().serialize(machine)

    def test_integer_ids_cannot_be_saved(self):
        """Test integer state ids cannot be saved."""
        machine = Machine([State(id=1, handler=ready)], 1)

        with pytest.raises(SerializationError, match="Only Enum members and strings"):
            MsgspecSerializer().serialize(machine)

    def test_unknown_format(self):
        """Test unknown formats are rejected by the serializer."""
        with pytest.raises(SerializationError, match="Unknown format: xml"):
            MsgspecSerializer().serialize(build_printer_machine(), format="xml")

        with pytest.raises(SerializationError, match="Unknown format: xml"):
            MsgspecSerializer().deserialize("", Machine, format="xml")

    def test_unsupported_types(self):
        """Test unsupported object types are rejected."""
        with pytest.raises(SerializationError, match="Cannot serialize type"):
            MsgspecSerializer().serialize(object())

        with pytest.raises(SerializationError, match="Cannot deserialize to type"):
            MsgspecSerializer().deserialize("{}", dict)

    def test_malformed_definition(self):
        """Test malformed definitions raise SerializationError."""
        with pytest.raises(SerializationError, match="Malformed Machine data"):
            MsgspecSerializer().deserialize('{"name": "x"}', Machine)

    def test_save_detects_yaml_format(self):
        """Test save picks YAML from the file suffix."""
        machine = build_printer_machine()
        mock_serializer = MagicMock(formats=("yaml",))
        mock_serializer.serialize.return_value = "yaml content"

        with (
            patch.object(SerializerRegistry, "get", return_value=mock_serializer),
            patch("builtins.open", mock_open()) as mock_file,
        ):
            machine.save("printer.yml")

            mock_serializer.serialize.assert_called_once_with(machine, format="yaml")
            mock_file.assert_called_once_with("printer.yml", "w")
            mock_file().write.assert_called_once_with("yaml content")

    def test_save_msgpack_writes_bytes(self):
        """Test msgpack files are written in binary mode."""
        machine = build_printer_machine()
        mock_serializer = MagicMock(formats=("msgpack",))
        mock_serializer.serialize.return_value = "as text"

        with (
            patch.object(SerializerRegistry, "get", return_value=mock_serializer),
            patch("builtins.open", mock_open()) as mock_file,
        ):
            machine.save("printer.bin", format="msgpack")

            mock_file.assert_called_once_with("printer.bin", "wb")
            mock_file().write.assert_called_once_with(b"as text")


class TestSnapshots:
    """Test runtime snapshots"""

    def test_snapshot_contents(self):
        """Test snapshot captures runtime state."""
        machine = build_printer_machine()
        machine.handle_events([PrinterEvent.PRINT_REQUEST, PrinterEvent.CONTINUE_PRINTING])

        snapshot = machine.snapshot()

        assert snapshot.current_state == "PRINTING"
        assert snapshot.previous_state == "READY"
        assert snapshot.state_history == ["READY", "PRINTING"]
        assert snapshot.event_count == 2
        assert snapshot.data == {"pages_printed": 1, "jobs_started": 1}
        assert snapshot.faulted is False

    def test_restore_runs_no_hooks(self):
        """Test restore runs no entry or exit hooks."""
        source = build_printer_machine()
        source.handle_events([PrinterEvent.PRINT_REQUEST] + [PrinterEvent.CONTINUE_PRINTING] * 3)
        target = build_printer_machine()

        target.restore(source.snapshot())

        assert target.current_state is PrinterState.PRINTING
        assert target.previous_state is PrinterState.READY
        # on_entry would have reset the counter to 0
        assert target.context["pages_printed"] == 3
        assert len(target.history) == 0

    def test_restored_machine_continues(self):
        """Test a restored machine keeps handling events."""
        source = build_printer_machine()
        source.handle_events([PrinterEvent.PRINT_REQUEST] + [PrinterEvent.CONTINUE_PRINTING] * 4)
        target = build_printer_machine()
        target.restore(source.snapshot())

        target.handle_event(PrinterEvent.CONTINUE_PRINTING)

        assert target.current_state is PrinterState.READY

    @pytest.mark.parametrize("suffix", ["json", "yaml", "msgpack"])
    def test_save_and_load_snapshot(self, tmp_path, suffix):
        """Test snapshots survive save and load in each format."""
        source = build_printer_machine()
        source.handle_events([PrinterEvent.PRINT_REQUEST, PrinterEvent.ERROR_NO_PAPER])
        path = tmp_path / f"state.{suffix}"
        source.save_snapshot(str(path))

        target = build_printer_machine()
        target.load_snapshot(str(path))

        assert target.current_state is PrinterState.ERROR
        assert target.previous_state is PrinterState.PRINTING
        assert target.context.state_history == [
            PrinterState.READY,
            PrinterState.PRINTING,
            PrinterState.ERROR,
        ]
        assert target.context["errors"] == 1

    def test_restore_unknown_state(self):
        """Test restoring an unknown state fails without changes."""
        machine = build_printer_machine()
        snapshot = SerializableSnapshot(
            name="printer", current_state="JAMMED", previous_state="READY"
        )

        with pytest.raises(SerializationError, match="unknown state 'JAMMED'"):
            machine.restore(snapshot)

        assert machine.current_state is PrinterState.READY


class TestFunctionRegistry:
    """Test import path resolution"""

    def setup_method(self):
        FunctionRegistry.clear()

    def teardown_method(self):
        FunctionRegistry.clear()

    def test_get_imports_and_caches(self):
        """Test get imports by path and caches the result."""
        assert FunctionRegistry.get("fast_fsm.demo.printer.ready") is ready
        assert "fast_fsm.demo.printer.ready" in FunctionRegistry.list_registered()

    def test_register_custom_name(self):
        """Test registering under a custom name."""
        FunctionRegistry.register(printing, name="printer:printing")

        assert FunctionRegistry.get("printer:printing") is printing

    def test_unresolvable_path(self):
        """Test unresolvable paths raise SerializationError."""
        with pytest.raises(SerializationError, match="Cannot resolve 'nowhere.to.be.found'"):
            FunctionRegistry.get("nowhere.to.be.found")

    def test_get_enum(self):
        """Test get_enum resolves Enum classes only."""
        assert FunctionRegistry.get_enum("fast_fsm.demo.printer.PrinterState") is PrinterState

        with pytest.raises(SerializationError, match="is not an Enum"):
            FunctionRegistry.get_enum("fast_fsm.demo.printer.ready")

    def test_identifier_roundtrip(self):
        """Test Enum identifiers encode to name and path."""
        key, path = encode_identifier(PrinterState.ERROR)

        assert (key, path) == ("ERROR", "fast_fsm.demo.printer.PrinterState")
        assert decode_identifier(key, path) is PrinterState.ERROR
        assert decode_identifier("idle", None) == "idle"

    def test_unknown_enum_member(self):
        """Test unknown Enum members are rejected."""
        with pytest.raises(SerializationError, match="not a member"):
            decode_identifier("JAMMED", "fast_fsm.demo.printer.PrinterState")


class TestRegistryAndFormats:
    """Test serializer registry and format detection"""

    def test_default_serializer(self):
        """Test msgspec is the default serializer."""
        assert isinstance(SerializerRegistry.get(), MsgspecSerializer)
        assert "msgspec" in SerializerRegistry.list()

    def test_unknown_serializer(self):
        """Test unknown serializer names are rejected."""
        with pytest.raises(SerializationError, match="Unknown serializer: pickle"):
            SerializerRegistry.get("pickle")

    def test_format_not_supported_by_serializer(self, tmp_path):
        """Test formats the serializer lacks are rejected before writing."""
        path = tmp_path / "printer.json"

        with pytest.raises(
            SerializationError, match="MsgspecSerializer does not support format 'xml'"
        ):
            build_printer_machine().save(str(path), format="xml")

        assert not path.exists()

    def test_load_with_unknown_serializer(self, tmp_path):
        """Test load with an unknown serializer name fails."""
        path = tmp_path / "printer.json"
        build_printer_machine().save(str(path))

        with pytest.raises(SerializationError, match="Unknown serializer: pickle"):
            Machine.load(str(path), serializer="pickle")

    def test_dump_and_load_snapshot(self, tmp_path):
        """Test the registry file layer with a binary format."""
        path = tmp_path / "printer.mp"
        machine = build_printer_machine()
        machine.handle_event(PrinterEvent.PRINT_REQUEST)

        SerializerRegistry.dump(machine.snapshot(), str(path))
        snapshot = SerializerRegistry.load(str(path), SerializableSnapshot)

        assert snapshot.current_state == "PRINTING"
        assert msgspec.msgpack.decode(path.read_bytes())["name"] == "printer"

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("a.json", "json"),
            ("a.yaml", "yaml"),
            ("a.yml", "yaml"),
            ("a.msgpack", "msgpack"),
            ("a.mp", "msgpack"),
            ("a.txt", "json"),
        ],
    )
    def test_detect_format(self, path, expected):
        """Test format detection from file suffixes."""
        assert detect_format(path) == expected
