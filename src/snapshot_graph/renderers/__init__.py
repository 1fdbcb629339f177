"""Renderers turning a GraphLayout into output documents."""

from snapshot_graph.renderers.base import Renderer
from snapshot_graph.renderers.svg import SvgRenderer, format_relative_time

__all__ = ["Renderer", "SvgRenderer", "format_relative_time"]
