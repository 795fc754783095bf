"""Event dispatch and transitions."""

import logging
from collections.abc import Callable, Hashable, Iterable

from ..core.exceptions import (
    InvalidTargetState,
    MachineFaultedError,
    ReentrantDispatchError,
)
from ..core.types import Event, TransitionRecord, state_key
from .core import CoreMachine

logger = logging.getLogger(__name__)

Listener = Callable[[TransitionRecord], None]


class MachineExecutor(CoreMachine):
    """Event dispatch for a machine.

    Dispatch is synchronous and single-threaded: one event at a time,
    delivered strictly in call order. Concurrent producers must funnel
    their events through a single consumer (see ``fast_fsm.queue``).
    """

    def handle_event(self, event: Event | Hashable) -> TransitionRecord:
        """Dispatch one event to the active state's handler.

        Args:
            event: An Event, or a bare event type which is wrapped into one

        Returns:
            The TransitionRecord describing what happened

        Raises:
            InvalidTargetState: The handler returned an unregistered state.
                The machine is left in its previous state and marked faulted.
            MachineFaultedError: The machine already raised InvalidTargetState.
            ReentrantDispatchError: Called from inside a handler or hook.
        """
        if self._faulted:
            raise MachineFaultedError(
                f"Machine '{self.name}' is faulted and cannot handle events"
            )
        if self._dispatching:
            raise ReentrantDispatchError(
                f"Machine '{self.name}' is already handling an event"
            )

        event = Event.of(event)
        source = self.current_state
        state = self.states[source]

        self._dispatching = True
        try:
            logger.debug(
                "Machine '%s': event '%s' received in state '%s'",
                self.name,
                event,
                state.name,
            )
            self.context.event_count += 1  # type: ignore[union-attr]

            returned = state.handle(self, event)

            arriving = self._registered(returned)
            if arriving is None:
                self._faulted = True
                logger.error(
                    "Machine '%s': handler of '%s' returned unregistered state '%s'",
                    self.name,
                    state.name,
                    state_key(returned),
                )
                raise InvalidTargetState(state.id, returned, event.type)

            # Keep the registered id, not an equal value from the handler
            target = arriving.id
            if target != source:
                self._transition(state, target)
        finally:
            self._dispatching = False

        record = TransitionRecord(
            event_type=event.type,
            source=source,
            target=target,
            source_name=state.name or state.key,
            target_name=self.states[target].name or state_key(target),
        )
        self.history.append(record)
        self._notify(record)
        return record

    def _transition(self, departing, target: Hashable) -> None:
        """Exit the departing state, switch, then enter the target.

        Each step completes before the next starts, so hooks always see a
        consistent current/previous pair.
        """
        departing.exit(self)

        self.previous_state = self.current_state
        self.current_state = target
        self.context.state_history.append(target)  # type: ignore[union-attr]

        arriving = self.states[target]
        logger.debug(
            "Machine '%s': %s -> %s", self.name, departing.name, arriving.name
        )
        arriving.enter(self)

    def handle_events(self, events: Iterable[Event | Hashable]) -> list[TransitionRecord]:
        """Dispatch several events in order.

        Stops at the first exception, which propagates to the caller.
        """
        return [self.handle_event(event) for event in events]

    def add_listener(self, listener: Listener) -> None:
        """Register a listener that receives every TransitionRecord."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Remove a previously registered listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, record: TransitionRecord) -> None:
        for listener in list(self._listeners):
            listener(record)

    @property
    def transitions_taken(self) -> list[TransitionRecord]:
        """Recorded dispatches that actually changed state."""
        return [r for r in self.history if not r.is_self_loop]
