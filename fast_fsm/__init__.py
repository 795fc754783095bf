"""Fast FSM is a library for building event-driven state machines in Python."""

__version__ = "0.1.0"

from .core import (
    ContractError,
    Event,
    FastFSMError,
    InvalidInitialState,
    InvalidTargetState,
    MachineContext,
    MachineFaultedError,
    ReentrantDispatchError,
    SerializationError,
    State,
    TransitionRecord,
    ValidationError,
)
from .machine import Machine, MachineBuilder
from .queue import EventQueue

__all__ = [
    "__version__",
    "Event",
    "State",
    "MachineContext",
    "TransitionRecord",
    "Machine",
    "MachineBuilder",
    "EventQueue",
    "FastFSMError",
    "ContractError",
    "InvalidInitialState",
    "InvalidTargetState",
    "ReentrantDispatchError",
    "MachineFaultedError",
    "ValidationError",
    "SerializationError",
]
