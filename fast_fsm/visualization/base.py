"""Base classes for state-diagram backends."""

from abc import ABC, abstractmethod
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any

from ..core.state import State
from ..core.types import state_key


@dataclass
class VisualizationOptions:
    """Options for rendering state diagrams."""

    direction: str = "TB"
    node_shape: str = "box"
    show_current: bool = True
    show_visited: bool = False
    show_event_labels: bool = True
    show_observed: bool = True
    show_description: bool = False
    current_color: str = "#90EE90"
    visited_color: str = "#ADD8E6"
    error_color: str = "#FFB6C1"
    node_color: str | None = None


class VisualizationBackend(ABC):
    """Base class for visualization backends."""

    def __init__(self, options: VisualizationOptions | None = None):
        self.options = options or VisualizationOptions()

    @abstractmethod
    def visualize_machine(self, machine: Any, **kwargs: Any) -> str:
        """Render a machine's state table as a diagram source string."""
        ...

    @abstractmethod
    def save(self, content: str, filename: str, format: str = "png") -> None:
        """Save diagram source and render it if the tool is available."""
        ...

    def get_edges(self, machine: Any) -> list[tuple[Hashable, Hashable, list[str]]]:
        """Collect edges from declared and observed transitions.

        Returns (source, target, event labels) triples in first-seen order.
        Self-loops are kept when declared but never added from history.
        """
        edges: dict[tuple[Hashable, Hashable], list[str]] = {}

        for state in machine.states.values():
            for event_type, target in state.transitions.items():
                labels = edges.setdefault((state.id, target), [])
                label = state_key(event_type)
                if label not in labels:
                    labels.append(label)

        if self.options.show_observed:
            for record in machine.history:
                if record.is_self_loop:
                    continue
                labels = edges.setdefault((record.source, record.target), [])
                label = state_key(record.event_type)
                if label not in labels:
                    labels.append(label)

        return [(src, dst, labels) for (src, dst), labels in edges.items()]

    def get_state_label(self, state: State) -> str:
        """Get the display label for a state."""
        label = state.name or state.key
        if self.options.show_description and state.description:
            desc = state.description
            if len(desc) > 50:
                desc = desc[:50] + "..."
            label += f"\\n{desc}"
        return label

    def get_state_style(self, state: State, machine: Any | None = None) -> dict[str, str]:
        """Get fill styling for a state."""
        style: dict[str, str] = {}

        if machine is not None:
            if self.options.show_current and machine.current_state == state.id:
                color = self.options.error_color if machine.faulted else self.options.current_color
                return {"fillcolor": color, "style": "filled"}
            if self.options.show_visited and state.id in machine.context.state_history:
                return {"fillcolor": self.options.visited_color, "style": "filled"}

        if self.options.node_color:
            style["fillcolor"] = self.options.node_color
            style["style"] = "filled"

        return style
