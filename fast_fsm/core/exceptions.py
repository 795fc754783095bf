"""Exception hierarchy for fast-fsm."""

from typing import Any

from .types import state_key


class FastFSMError(Exception):
    """Base exception for all fast-fsm errors."""


class ContractError(FastFSMError):
    """A state table or handler broke the engine contract.

    Contract errors are programming mistakes, not runtime conditions.
    The engine never retries or recovers from them.
    """


class InvalidInitialState(ContractError):
    """Raised when a machine is created with an unregistered initial state."""

    def __init__(self, state_id: Any, known: list[str] | None = None):
        self.state_id = state_id
        message = f"Initial state '{state_key(state_id)}' is not registered"
        if known:
            message += f" (registered: {', '.join(known)})"
        super().__init__(message)


class InvalidTargetState(ContractError):
    """Raised when a handler returns a state id absent from the table."""

    def __init__(self, source: Any, target: Any, event_type: Any = None):
        self.source = source
        self.target = target
        self.event_type = event_type
        message = (
            f"Handler of state '{state_key(source)}' returned "
            f"unregistered state '{state_key(target)}'"
        )
        if event_type is not None:
            message += f" for event '{state_key(event_type)}'"
        super().__init__(message)


class ReentrantDispatchError(ContractError):
    """Raised when handle_event is called while an event is in flight."""


class MachineFaultedError(ContractError):
    """Raised when dispatching on a machine that already broke its contract."""


class ValidationError(FastFSMError):
    """Raised when a state table is malformed."""


class SerializationError(FastFSMError):
    """Raised when a machine or snapshot cannot be (de)serialized."""
