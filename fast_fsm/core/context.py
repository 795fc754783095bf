"""Application context owned by a machine."""

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class MachineContext:
    """Context carried by a machine between events.

    ``data`` holds the application's own fields (counters, buffers, ...).
    Handlers and hooks read and mutate it; the engine only appends to
    ``state_history`` and bumps ``event_count``. Dict-like access goes to
    ``data``.
    """

    data: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    state_history: list[Hashable] = field(default_factory=list)
    event_count: int = 0

    def get(self, key: str, default: Any = None) -> Any:
        """Get a context field with a default value if not found."""
        return self.data.get(key, default)

    def update(self, values: dict[str, Any] | None = None, **kwargs: Any) -> None:
        """Set several context fields at once."""
        if values:
            self.data.update(values)
        self.data.update(kwargs)

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def visits(self, state_id: Hashable) -> int:
        """Count how many times a state has been entered."""
        return sum(1 for s in self.state_history if s == state_id)
