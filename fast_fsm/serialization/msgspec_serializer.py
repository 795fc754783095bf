"""msgspec-based serializer implementation."""

from collections.abc import Hashable
from typing import TYPE_CHECKING, Any

import msgspec
import yaml  # type: ignore[import-untyped]

from ..core.exceptions import SerializationError
from ..core.state import State
from .base import Serializer
from .registry import (
    FunctionRegistry,
    decode_identifier,
    encode_identifier,
    get_object_path,
)
from .types import SerializableMachine, SerializableSnapshot, SerializableState

if TYPE_CHECKING:
    from ..machine import Machine


class MsgspecSerializer(Serializer):
    """Serializer using msgspec for json/msgpack and PyYAML for yaml."""

    formats = ("json", "msgpack", "yaml")

    def serialize(self, obj: Any, format: str = "json") -> bytes | str:
        """Serialize a machine definition or a snapshot."""
        from ..machine.core import CoreMachine

        serializable: SerializableMachine | SerializableSnapshot
        if isinstance(obj, CoreMachine):
            serializable = self._machine_to_serializable(obj)  # type: ignore[arg-type]
        elif isinstance(obj, SerializableSnapshot):
            serializable = obj
        else:
            raise SerializationError(f"Cannot serialize type: {type(obj)}")

        if format == "json":
            return msgspec.json.Encoder().encode(serializable).decode("utf-8")
        elif format == "msgpack":
            return msgspec.msgpack.Encoder().encode(serializable)
        elif format == "yaml":
            data = msgspec.to_builtins(serializable)
            return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        else:
            raise SerializationError(f"Unknown format: {format}")

    def deserialize(
        self, data: bytes | str, target_type: type, format: str = "json"
    ) -> Any:
        """Deserialize data into a machine (of ``target_type``) or a snapshot."""
        from ..machine.core import CoreMachine

        if format == "json":
            if isinstance(data, str):
                data = data.encode("utf-8")
            raw = msgspec.json.Decoder().decode(data)
        elif format == "msgpack":
            if isinstance(data, str):
                data = data.encode("utf-8")
            raw = msgspec.msgpack.Decoder().decode(data)
        elif format == "yaml":
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            raw = yaml.safe_load(data)
        else:
            raise SerializationError(f"Unknown format: {format}")

        try:
            if isinstance(target_type, type) and issubclass(target_type, CoreMachine):
                definition = msgspec.convert(raw, SerializableMachine)
                return self._serializable_to_machine(definition, target_type)
            elif target_type is SerializableSnapshot:
                return msgspec.convert(raw, SerializableSnapshot)
        except msgspec.ValidationError as e:
            raise SerializationError(f"Malformed {target_type.__name__} data: {e}") from e

        raise SerializationError(f"Cannot deserialize to type: {target_type}")

    def _machine_to_serializable(self, machine: "Machine") -> SerializableMachine:
        """Convert a machine's state table to its serializable representation."""
        state_type: str | None = None
        event_type: str | None = None
        states = []

        for state in machine.states.values():
            key, path = encode_identifier(state.id)
            state_type = state_type or path

            transitions = {}
            for event, target in state.transitions.items():
                event_key, event_path = encode_identifier(event)
                event_type = event_type or event_path
                transitions[event_key] = encode_identifier(target)[0]

            states.append(
                SerializableState(
                    id=key,
                    handler=get_object_path(state.handler),
                    name=state.name,
                    on_entry=get_object_path(state.on_entry) if state.on_entry else None,
                    on_exit=get_object_path(state.on_exit) if state.on_exit else None,
                    description=state.description,
                    transitions=transitions,
                    metadata=state.metadata,
                )
            )

        return SerializableMachine(
            name=machine.name,
            initial_state=encode_identifier(machine.initial_state)[0],
            states=states,
            state_type=state_type,
            event_type=event_type,
            history_size=machine.history_size,
            metadata=dict(machine.metadata),
        )

    def _serializable_to_machine(
        self, serializable: SerializableMachine, target_type: type
    ) -> "Machine":
        """Build a new machine from a serializable definition.

        Building a machine runs the initial state's entry hook.
        """

        def state_id(key: str) -> Hashable:
            return decode_identifier(key, serializable.state_type)

        states = []
        for data in serializable.states:
            states.append(
                State(
                    id=state_id(data.id),
                    handler=FunctionRegistry.get(data.handler),
                    name=data.name,
                    on_entry=FunctionRegistry.get(data.on_entry) if data.on_entry else None,
                    on_exit=FunctionRegistry.get(data.on_exit) if data.on_exit else None,
                    description=data.description,
                    transitions={
                        decode_identifier(event, serializable.event_type): state_id(target)
                        for event, target in data.transitions.items()
                    },
                    metadata=data.metadata,
                )
            )

        return target_type(
            states,
            state_id(serializable.initial_state),
            name=serializable.name,
            history_size=serializable.history_size,
            metadata=dict(serializable.metadata),
        )

