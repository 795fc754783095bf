"""Graphviz DOT backend."""

import subprocess
from pathlib import Path
from typing import Any

from .base import VisualizationBackend

_START = "__start__"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def _warn_unrendered(dot_file: Path) -> None:
    print("Warning: Could not render Graphviz diagram. Install graphviz.")
    print(f"DOT source saved to {dot_file}")


class GraphvizBackend(VisualizationBackend):
    """Render machines as Graphviz DOT source."""

    def visualize_machine(self, machine: Any, **kwargs: Any) -> str:  # noqa: ARG002
        rankdir = {"TD": "TB"}.get(self.options.direction, self.options.direction)
        lines = [f"digraph {_quote(machine.name)} {{"]
        lines.append(f"    rankdir={rankdir};")
        lines.append(f"    node [shape={self.options.node_shape}];")
        lines.append(f"    {_quote(_START)} [shape=point];")

        for state in machine.states.values():
            attrs = [f"label={_quote(self.get_state_label(state))}"]
            style = self.get_state_style(state, machine)
            if style:
                attrs.append(f"style={style['style']}")
                attrs.append(f"fillcolor={_quote(style['fillcolor'])}")
            lines.append(f"    {_quote(state.key)} [{', '.join(attrs)}];")

        initial = machine.states[machine.initial_state]
        lines.append(f"    {_quote(_START)} -> {_quote(initial.key)};")

        for source, target, labels in self.get_edges(machine):
            src = _quote(machine.states[source].key)
            dst = _quote(machine.states[target].key)
            if self.options.show_event_labels and labels:
                lines.append(f"    {src} -> {dst} [label={_quote(', '.join(labels))}];")
            else:
                lines.append(f"    {src} -> {dst};")

        lines.append("}")
        return "\n".join(lines)

    def save(self, content: str, filename: str, format: str = "png") -> None:
        """Save DOT source and render it when possible.

        Rendering uses the ``dot`` tool and falls back to the ``graphviz``
        package. If neither is available only the ``.dot`` file is written.
        """
        base = Path(filename)
        dot_file = Path(f"{base}.dot")
        dot_file.write_text(content)

        if format == "dot":
            return

        try:
            subprocess.run(
                ["dot", f"-T{format}", str(dot_file), "-o", f"{base}.{format}"],
                check=True,
                capture_output=True,
            )
        except (FileNotFoundError, subprocess.CalledProcessError):
            # No usable dot binary; try the graphviz package from the viz extra
            try:
                import graphviz
            except ImportError:
                _warn_unrendered(dot_file)
                return

            try:
                graphviz.Source(content).render(str(base), format=format, cleanup=True)
            except (graphviz.ExecutableNotFound, graphviz.CalledProcessError):
                _warn_unrendered(dot_file)
