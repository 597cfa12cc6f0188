"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from sankey_dsl.diagram import CompiledDiagram
from sankey_dsl.state import DiagramState


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, diagram: CompiledDiagram, state: DiagramState) -> str:
        """Render a compiled diagram to an output string."""
        ...
