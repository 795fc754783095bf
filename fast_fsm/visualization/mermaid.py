"""Mermaid state-diagram backend."""

import subprocess
from pathlib import Path
from typing import Any

from .base import VisualizationBackend


class MermaidBackend(VisualizationBackend):
    """Render machines as Mermaid ``stateDiagram-v2`` source."""

    def visualize_machine(self, machine: Any, **kwargs: Any) -> str:  # noqa: ARG002
        lines = ["stateDiagram-v2"]
        lines.append(f"    direction {self.options.direction}")

        for state in machine.states.values():
            label = self.get_state_label(state)
            if label != state.key:
                lines.append(f'    state "{label}" as {state.key}')

        initial = machine.states[machine.initial_state]
        lines.append(f"    [*] --> {initial.key}")

        for source, target, labels in self.get_edges(machine):
            src = machine.states[source].key
            dst = machine.states[target].key
            if self.options.show_event_labels and labels:
                lines.append(f"    {src} --> {dst}: {', '.join(labels)}")
            else:
                lines.append(f"    {src} --> {dst}")

        classes: dict[str, list[str]] = {}
        for state in machine.states.values():
            style = self.get_state_style(state, machine)
            if style and "fillcolor" in style:
                classes.setdefault(style["fillcolor"], []).append(state.key)

        for index, (color, keys) in enumerate(classes.items()):
            lines.append(f"    classDef style{index} fill:{color}")
            lines.append(f"    class {','.join(keys)} style{index}")

        return "\n".join(lines)

    def save(self, content: str, filename: str, format: str = "png") -> None:
        """Save Mermaid source and render it with mermaid-cli when possible."""
        base = Path(filename)
        mmd_file = Path(f"{base}.mmd")
        mmd_file.write_text(content)

        if format == "mmd":
            return

        try:
            subprocess.run(
                ["mmdc", "-i", str(mmd_file), "-o", f"{base}.{format}"],
                check=True,
                capture_output=True,
            )
        except (FileNotFoundError, subprocess.CalledProcessError):
            print(
                "Warning: Could not render Mermaid diagram. Install mermaid-cli "
                "with 'npm install -g @mermaid-js/mermaid-cli'"
            )
            print(f"Mermaid source saved to {mmd_file}")
