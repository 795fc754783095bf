"""Value types exchanged with the engine."""

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Any


def state_key(state_id: Hashable) -> str:
    """Return the canonical text key of a state or event identifier.

    Enum members map to their member name, everything else to ``str()``.
    """
    if isinstance(state_id, Enum):
        return state_id.name
    return str(state_id)


@dataclass(frozen=True)
class Event:
    """A discrete event delivered to a machine.

    ``payload`` is opaque to the engine and is only handed to the handler
    for the duration of the dispatch call.
    """

    type: Hashable
    payload: Any = None

    @classmethod
    def of(cls, value: "Event | Hashable", payload: Any = None) -> "Event":
        """Wrap a bare event type into an Event, pass Events through."""
        if isinstance(value, Event):
            return value
        return cls(type=value, payload=payload)

    def __str__(self) -> str:
        return state_key(self.type)


@dataclass(frozen=True)
class TransitionRecord:
    """Outcome of dispatching one event."""

    event_type: Hashable
    source: Hashable
    target: Hashable
    source_name: str
    target_name: str

    @property
    def is_self_loop(self) -> bool:
        """True when the handler kept the machine in the same state."""
        return self.source == self.target

    def __str__(self) -> str:
        return f"{self.source_name} -> {self.target_name} [{state_key(self.event_type)}]"
