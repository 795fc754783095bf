"""Core machine class: state table, active state and validation."""

import logging
from collections import deque
from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.context import MachineContext
from ..core.exceptions import InvalidInitialState, ValidationError
from ..core.state import State
from ..core.types import TransitionRecord, state_key

logger = logging.getLogger(__name__)


def _normalize_states(
    states: Mapping[Hashable, State] | Iterable[State],
) -> dict[Hashable, State]:
    """Copy a state table into a dict keyed by state id.

    Each State is copied too, so machines built from one table never share
    mutable state records.
    """
    table: dict[Hashable, State] = {}
    if isinstance(states, Mapping):
        for key, state in states.items():
            if not isinstance(state, State):
                raise ValidationError(
                    f"Entry '{state_key(key)}' is not a State: {type(state).__name__}"
                )
            if key != state.id:
                raise ValidationError(
                    f"State table key '{state_key(key)}' does not match "
                    f"state id '{state.key}'"
                )
            table[key] = state.copy()
        return table

    for state in states:
        if not isinstance(state, State):
            raise ValidationError(
                f"Expected State, got {type(state).__name__}: {state!r}"
            )
        if state.id in table:
            raise ValidationError(f"Duplicate state id '{state.key}'")
        table[state.id] = state.copy()
    return table


@dataclass(eq=False)
class CoreMachine:
    """Core machine with the state table and the active state.

    The state table is complete and fixed once the machine is built. The
    initial state's entry hook runs before the constructor returns.
    """

    states: dict[Hashable, State] = field(repr=False)
    initial_state: Hashable
    name: str = "machine"
    context: MachineContext | None = None
    history_size: int = 64
    metadata: dict[str, Any] = field(default_factory=dict)

    # Runtime state
    current_state: Hashable = field(default=None, init=False)
    previous_state: Hashable = field(default=None, init=False)
    history: deque[TransitionRecord] = field(init=False, repr=False)
    _listeners: list[Callable[[TransitionRecord], None]] = field(
        default_factory=list, init=False, repr=False
    )
    _faulted: bool = field(default=False, init=False, repr=False)
    _dispatching: bool = field(default=False, init=False, repr=False)

    def __post_init__(self):
        self.states = _normalize_states(self.states)
        if self.context is None:
            self.context = MachineContext()
        elif isinstance(self.context, Mapping):
            self.context = MachineContext(data=dict(self.context))
        self.history = deque(maxlen=self.history_size)

        errors = self.validate()
        if errors:
            raise ValidationError(f"Machine '{self.name}' validation failed: {errors}")

        initial = self._registered(self.initial_state)
        if initial is None:
            logger.error(
                "Machine '%s': initial state '%s' is not registered",
                self.name,
                state_key(self.initial_state),
            )
            raise InvalidInitialState(
                self.initial_state, [s.key for s in self.states.values()]
            )

        self.initial_state = initial.id
        self.current_state = initial.id
        self.previous_state = initial.id
        self.context.state_history.append(initial.id)
        logger.debug(
            "Machine '%s' created in state '%s'", self.name, self.current.name
        )
        self.current.enter(self)

    @classmethod
    def create(
        cls,
        states: Mapping[Hashable, State] | Iterable[State],
        initial_state: Hashable,
        **kwargs: Any,
    ):
        """Create a machine from a complete state table and an initial id."""
        return cls(states, initial_state, **kwargs)  # type: ignore[arg-type]

    def validate(self) -> list[str]:
        """Validate the state table.

        Declared transitions must point at registered states. Handlers are
        opaque, so their actual return values are only checked at dispatch.
        """
        errors = []

        if not self.states:
            errors.append("No states")
            return errors

        for state in self.states.values():
            errors.extend(state.validate())
            for event_type, target in state.transitions.items():
                if target not in self.states:
                    errors.append(
                        f"State '{state.name}' declares transition on "
                        f"'{state_key(event_type)}' to unknown state '{state_key(target)}'"
                    )

        return errors

    def _registered(self, state_id: Any) -> State | None:
        """Look up a registered state, or None if the id is not registered."""
        try:
            return self.states.get(state_id)
        except TypeError:
            # Unhashable values never name a registered state
            return None

    @property
    def current(self) -> State:
        """The active State."""
        return self.states[self.current_state]

    @property
    def previous(self) -> State:
        """The State active before the last transition."""
        return self.states[self.previous_state]

    @property
    def faulted(self) -> bool:
        """True once a handler returned an unregistered state."""
        return self._faulted

    @property
    def state_ids(self) -> list[Hashable]:
        """Registered state ids, in registration order."""
        return list(self.states)

    def get_state(self, state_id: Hashable) -> State:
        """Look up a registered State by id."""
        try:
            return self.states[state_id]
        except KeyError:
            raise KeyError(f"State '{state_key(state_id)}' not found") from None

    def is_in(self, state_id: Hashable) -> bool:
        """Check whether the given state is active."""
        return self.current_state == state_id

    def __contains__(self, state_id: Hashable) -> bool:
        return state_id in self.states

    def __len__(self) -> int:
        return len(self.states)

    def __str__(self) -> str:
        return f"Machine(name='{self.name}', state='{self.current.name}')"
