"""State definitions."""

import inspect
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field, replace
from typing import Any

from .types import Event, state_key

Handler = Callable[[Any, Event], Hashable]
Hook = Callable[..., None]


def _takes_machine(func: Callable[..., Any]) -> bool:
    """Check whether a hook expects the machine as its first argument."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without a signature get the machine
        return True
    for param in sig.parameters.values():
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


@dataclass
class State:
    """A registered state: an id, a handler and optional entry/exit hooks.

    The handler receives ``(machine, event)`` and returns the id of the
    state that should be active afterwards. Returning the current id is a
    self-loop and does not run any hooks.

    ``transitions`` is a declared ``event_type -> target_id`` map used for
    validation and diagrams only. Dispatch always goes through ``handler``.
    """

    id: Hashable
    handler: Handler
    name: str | None = None
    on_entry: Hook | None = None
    on_exit: Hook | None = None
    description: str | None = None
    transitions: dict[Hashable, Hashable] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    _entry_takes_machine: bool = field(default=True, init=False, repr=False)
    _exit_takes_machine: bool = field(default=True, init=False, repr=False)

    def __post_init__(self):
        if self.name is None:
            self.name = state_key(self.id)
        if self.description is None and callable(self.handler):
            doc = inspect.getdoc(self.handler)
            if doc:
                self.description = doc.split("\n")[0]
        if callable(self.on_entry):
            self._entry_takes_machine = _takes_machine(self.on_entry)
        if callable(self.on_exit):
            self._exit_takes_machine = _takes_machine(self.on_exit)

    def copy(self) -> "State":
        """Return a copy with its own transitions and metadata dicts."""
        return replace(
            self, transitions=dict(self.transitions), metadata=dict(self.metadata)
        )

    @property
    def key(self) -> str:
        """Canonical text key of this state's id."""
        return state_key(self.id)

    def validate(self) -> list[str]:
        """Return authoring errors for this state."""
        errors = []
        if not callable(self.handler):
            errors.append(f"State '{self.name}' has no callable handler")
        if self.on_entry is not None and not callable(self.on_entry):
            errors.append(f"State '{self.name}' on_entry is not callable")
        if self.on_exit is not None and not callable(self.on_exit):
            errors.append(f"State '{self.name}' on_exit is not callable")
        return errors

    def handle(self, machine: Any, event: Event) -> Hashable:
        """Run the handler for an event."""
        return self.handler(machine, event)

    def enter(self, machine: Any) -> None:
        """Run the entry hook, if any."""
        if self.on_entry is None:
            return
        if self._entry_takes_machine:
            self.on_entry(machine)
        else:
            self.on_entry()

    def exit(self, machine: Any) -> None:
        """Run the exit hook, if any."""
        if self.on_exit is None:
            return
        if self._exit_takes_machine:
            self.on_exit(machine)
        else:
            self.on_exit()
