"""Machine module combining all functionality."""

from .builder import MachineBuilder
from .serialization import MachineSerialization


class Machine(MachineSerialization):
    """Complete event-driven state machine.

    This class combines all machine mixins:
    - State table, active state and validation (CoreMachine)
    - Event dispatch and transitions (MachineExecutor)
    - Visualization (MachineVisualization)
    - Serialization (MachineSerialization)
    """

    pass


__all__ = ["Machine", "MachineBuilder"]
