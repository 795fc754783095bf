"""State-diagram rendering for fast-fsm machines."""

from .base import VisualizationBackend, VisualizationOptions
from .graphviz import GraphvizBackend
from .mermaid import MermaidBackend

__all__ = [
    "VisualizationBackend",
    "VisualizationOptions",
    "MermaidBackend",
    "GraphvizBackend",
]
