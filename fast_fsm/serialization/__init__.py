"""Serialization support for fast-fsm machines."""

from .base import Serializer, SerializerRegistry, detect_format
from .msgspec_serializer import MsgspecSerializer
from .registry import FunctionRegistry, get_object_path
from .types import SerializableMachine, SerializableSnapshot, SerializableState

__all__ = [
    "Serializer",
    "SerializerRegistry",
    "MsgspecSerializer",
    "FunctionRegistry",
    "SerializableMachine",
    "SerializableSnapshot",
    "SerializableState",
    "detect_format",
    "get_object_path",
]

SerializerRegistry.register("msgspec", MsgspecSerializer(), default=True)
