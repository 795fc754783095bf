"""Core components of fast-fsm."""

from .context import MachineContext
from .exceptions import (
    ContractError,
    FastFSMError,
    InvalidInitialState,
    InvalidTargetState,
    MachineFaultedError,
    ReentrantDispatchError,
    SerializationError,
    ValidationError,
)
from .state import State
from .types import Event, TransitionRecord, state_key

__all__ = [
    "MachineContext",
    "State",
    "Event",
    "TransitionRecord",
    "state_key",
    "FastFSMError",
    "ContractError",
    "InvalidInitialState",
    "InvalidTargetState",
    "ReentrantDispatchError",
    "MachineFaultedError",
    "ValidationError",
    "SerializationError",
]
