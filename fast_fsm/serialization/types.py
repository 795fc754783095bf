"""Serializable type definitions for fast-fsm."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SerializableState:
    """Serializable representation of a State."""

    id: str
    handler: str  # Import path of the handler (e.g., "mymodule.ready")
    name: str | None = None
    on_entry: str | None = None
    on_exit: str | None = None
    description: str | None = None
    transitions: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SerializableMachine:
    """Serializable representation of a machine definition."""

    name: str
    initial_state: str
    states: list[SerializableState]
    state_type: str | None = None  # Import path of the state id Enum
    event_type: str | None = None  # Import path of the event type Enum
    history_size: int = 64
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SerializableSnapshot:
    """Serializable runtime state of a machine."""

    name: str
    current_state: str
    previous_state: str
    state_history: list[str] = field(default_factory=list)
    event_count: int = 0
    data: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    faulted: bool = False
