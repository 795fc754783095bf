"""Decorator-based construction of state tables."""

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any

from ..core.context import MachineContext
from ..core.exceptions import InvalidInitialState, ValidationError
from ..core.state import Handler, Hook, State
from ..core.types import state_key

if TYPE_CHECKING:
    from . import Machine


class MachineBuilder:
    """Collects states through decorators and builds machines from them.

    Example:
        builder = MachineBuilder("printer")

        @builder.state(Printer.READY, initial=True)
        def ready(machine, event):
            ...

        @builder.on_entry(Printer.READY)
        def enter_ready(machine):
            ...

        machine = builder.build()

    Every call to ``build`` returns an independent machine sharing only the
    (immutable) handler callables.
    """

    def __init__(self, name: str = "machine", **defaults: Any):
        self.name = name
        self.defaults = defaults
        self._handlers: dict[Hashable, dict[str, Any]] = {}
        self._entries: dict[Hashable, Hook] = {}
        self._exits: dict[Hashable, Hook] = {}
        self._initial: list[Hashable] = []

    def state(
        self,
        state_id: Hashable,
        *,
        name: str | None = None,
        description: str | None = None,
        initial: bool = False,
        transitions: dict[Hashable, Hashable] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering a function as the handler of a state.

        Args:
            state_id: Identifier of the state
            name: Diagnostic label (defaults to the id's key)
            description: State description (defaults to the docstring)
            initial: Mark this as the initial state
            transitions: Declared event -> target map for diagrams/validation
            metadata: Free-form state metadata
        """

        def decorator(func: Handler) -> Handler:
            if state_id in self._handlers:
                raise ValidationError(f"Duplicate state id '{state_key(state_id)}'")
            self._handlers[state_id] = {
                "handler": func,
                "name": name,
                "description": description,
                "transitions": dict(transitions or {}),
                "metadata": dict(metadata or {}),
            }
            if initial:
                self._initial.append(state_id)
            return func

        return decorator

    def on_entry(self, state_id: Hashable) -> Callable[[Hook], Hook]:
        """Decorator registering the entry hook of a state."""

        def decorator(func: Hook) -> Hook:
            self._entries[state_id] = func
            return func

        return decorator

    def on_exit(self, state_id: Hashable) -> Callable[[Hook], Hook]:
        """Decorator registering the exit hook of a state."""

        def decorator(func: Hook) -> Hook:
            self._exits[state_id] = func
            return func

        return decorator

    def add_state(self, state: State, *, initial: bool = False) -> "MachineBuilder":
        """Register a ready-made State. Returns self for chaining."""
        if state.id in self._handlers:
            raise ValidationError(f"Duplicate state id '{state.key}'")
        self._handlers[state.id] = {
            "handler": state.handler,
            "name": state.name,
            "description": state.description,
            "transitions": dict(state.transitions),
            "metadata": dict(state.metadata),
        }
        if state.on_entry is not None:
            self._entries[state.id] = state.on_entry
        if state.on_exit is not None:
            self._exits[state.id] = state.on_exit
        if initial:
            self._initial.append(state.id)
        return self

    def states(self) -> dict[Hashable, State]:
        """Assemble a fresh state table from the registered pieces."""
        orphans = (set(self._entries) | set(self._exits)) - set(self._handlers)
        if orphans:
            names = ", ".join(sorted(state_key(s) for s in orphans))
            raise ValidationError(f"Hooks registered for states without handler: {names}")

        return {
            state_id: State(
                id=state_id,
                on_entry=self._entries.get(state_id),
                on_exit=self._exits.get(state_id),
                **config,
            )
            for state_id, config in self._handlers.items()
        }

    def build(
        self,
        initial_state: Hashable | None = None,
        *,
        context: MachineContext | dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> "Machine":
        """Build a new machine.

        Args:
            initial_state: Initial state id (defaults to the one marked initial)
            context: Machine context or a dict of initial context fields
            **kwargs: Extra Machine fields (name, history_size)
        """
        from . import Machine

        if initial_state is None:
            if len(self._initial) > 1:
                names = ", ".join(state_key(s) for s in self._initial)
                raise ValidationError(f"Multiple initial states defined: {names}")
            if not self._initial:
                raise InvalidInitialState(None)
            initial_state = self._initial[0]

        options = {"name": self.name, **self.defaults, **kwargs}
        if isinstance(context, dict):
            context = MachineContext(data=dict(context))
        return Machine(self.states(), initial_state, context=context, **options)
