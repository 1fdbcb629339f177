"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from snapshot_graph.layout.types import GraphLayout


@runtime_checkable
class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, layout: GraphLayout) -> str:
        """Render a laid-out snapshot graph to an output string.

        An empty layout (no history yet) renders as an empty string.
        """
        ...
