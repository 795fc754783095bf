"""Machine serialization functionality."""

import logging
from typing import TYPE_CHECKING

from ..core.exceptions import ReentrantDispatchError, SerializationError
from ..core.types import state_key
from .visualization import MachineVisualization

if TYPE_CHECKING:
    from ..serialization.types import SerializableSnapshot
    from . import Machine

logger = logging.getLogger(__name__)


class MachineSerialization(MachineVisualization):
    """Machine serialization functionality.

    ``save``/``load`` handle the state table definition; handlers and hooks
    are stored as import paths. ``snapshot``/``restore`` handle the
    runtime state (active state, context) of an existing machine.
    """

    def save(self, filepath: str, *, format: str | None = None) -> None:
        """Save the machine definition to a file.

        Args:
            filepath: File path to save to
            format: Serialization format (json, yaml, msgpack)
        """
        from ..serialization import SerializerRegistry

        SerializerRegistry.dump(self, filepath, format=format)

    @classmethod
    def load(
        cls, filename: str, format: str | None = None, serializer: str | None = None
    ) -> "Machine":
        """Load a machine definition from a file and build a new machine.

        The new machine starts in its initial state and runs its entry hook.
        """
        from ..serialization import SerializerRegistry

        return SerializerRegistry.load(
            filename, cls, format=format, serializer=serializer
        )

    def snapshot(self) -> "SerializableSnapshot":
        """Capture the runtime state of this machine."""
        from ..serialization.types import SerializableSnapshot

        return SerializableSnapshot(
            name=self.name,
            current_state=state_key(self.current_state),
            previous_state=state_key(self.previous_state),
            state_history=[state_key(s) for s in self.context.state_history],  # type: ignore[union-attr]
            event_count=self.context.event_count,  # type: ignore[union-attr]
            data=dict(self.context.data),  # type: ignore[union-attr]
            metadata=dict(self.context.metadata),  # type: ignore[union-attr]
            faulted=self._faulted,
        )

    def restore(self, snapshot: "SerializableSnapshot") -> None:
        """Restore runtime state from a snapshot.

        No entry or exit hooks run. The transition history is cleared since
        its records no longer describe how the restored state was reached.
        """
        if self._dispatching:
            raise ReentrantDispatchError(
                f"Machine '{self.name}' cannot restore while handling an event"
            )

        by_key = {state.key: state.id for state in self.states.values()}

        def resolve(key: str):
            if key not in by_key:
                raise SerializationError(
                    f"Snapshot refers to unknown state '{key}' in machine '{self.name}'"
                )
            return by_key[key]

        current = resolve(snapshot.current_state)
        previous = resolve(snapshot.previous_state)
        history = [resolve(key) for key in snapshot.state_history]

        self.current_state = current
        self.previous_state = previous
        self.context.data = dict(snapshot.data)  # type: ignore[union-attr]
        self.context.metadata = dict(snapshot.metadata)  # type: ignore[union-attr]
        self.context.state_history = history  # type: ignore[union-attr]
        self.context.event_count = snapshot.event_count  # type: ignore[union-attr]
        self._faulted = snapshot.faulted
        self.history.clear()
        logger.debug(
            "Machine '%s' restored to state '%s'", self.name, self.current.name
        )

    def save_snapshot(self, filepath: str, *, format: str | None = None) -> None:
        """Save the runtime state to a file."""
        from ..serialization import SerializerRegistry

        SerializerRegistry.dump(self.snapshot(), filepath, format=format)

    def load_snapshot(
        self, filepath: str, format: str | None = None, serializer: str | None = None
    ) -> None:
        """Restore the runtime state from a file written by save_snapshot."""
        from ..serialization import SerializerRegistry
        from ..serialization.types import SerializableSnapshot

        snapshot = SerializerRegistry.load(
            filepath, SerializableSnapshot, format=format, serializer=serializer
        )
        self.restore(snapshot)
