"""Machine visualization functionality."""

from typing import Any

from ..visualization import (
    GraphvizBackend,
    MermaidBackend,
    VisualizationBackend,
    VisualizationOptions,
)
from .execution import MachineExecutor


class MachineVisualization(MachineExecutor):
    """Machine visualization functionality."""

    def visualize(
        self,
        *,
        backend: str = "mermaid",
        show_current: bool = True,
        **kwargs: Any,
    ) -> str:
        """Visualize the machine as a state diagram.

        Args:
            backend: Visualization backend ("mermaid" or "graphviz")
            show_current: Highlight the active state
            **kwargs: Additional visualization options (filename, format, options)

        Returns:
            String representation of the visualization
        """
        options = kwargs.get("options")
        filename = kwargs.get("filename")
        format = kwargs.get("format", "png")

        if options is None:
            options = VisualizationOptions()
            options.show_current = show_current

        if backend.lower() == "mermaid":
            viz: VisualizationBackend = MermaidBackend(options)
        elif backend.lower() == "graphviz":
            viz = GraphvizBackend(options)
        else:
            raise ValueError(f"Unknown backend: {backend}")

        content = viz.visualize_machine(self)

        if filename:
            viz.save(content, filename, format)

        return content

    def to_mermaid(self, **kwargs: Any) -> str:
        """Generate a Mermaid state diagram."""
        return self.visualize(backend="mermaid", **kwargs)

    def to_graphviz(self, **kwargs: Any) -> str:
        """Generate a Graphviz DOT diagram."""
        return self.visualize(backend="graphviz", **kwargs)

    def save_visualization(
        self,
        filepath: str,
        *,
        backend: str = "mermaid",
        show_current: bool = True,
        **kwargs: Any,
    ) -> None:
        """Write diagram source to a file without rendering it."""
        content = self.visualize(backend=backend, show_current=show_current, **kwargs)

        with open(filepath, "w") as f:
            f.write(content)
