"""Public API for snapshot_graph."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime

import structlog

from snapshot_graph.layout import (
    DEFAULT_STYLE,
    GraphLayout,
    GraphStyle,
    RowKind,
    SnapshotNode,
    TimelineInfo,
    full_layout,
)
from snapshot_graph.renderers.svg import SvgRenderer

logger = structlog.get_logger(__name__)

ActivateCallback = Callable[[str, bool], None]


def layout_history(
    nodes: Iterable[SnapshotNode],
    is_current_dirty: bool = False,
    is_viewing_past_snapshot: bool = False,
    style: GraphStyle = DEFAULT_STYLE,
) -> GraphLayout:
    """Lay out a snapshot history. See ``snapshot_graph.layout.full_layout``."""
    return full_layout(nodes, is_current_dirty, is_viewing_past_snapshot, style)


def render_svg(
    nodes: Iterable[SnapshotNode],
    is_current_dirty: bool = False,
    is_viewing_past_snapshot: bool = False,
    timeline_labels: Mapping[str, TimelineInfo] | None = None,
    style: GraphStyle = DEFAULT_STYLE,
    now: datetime | None = None,
) -> str:
    """Lay out and render a snapshot history to SVG ("" when there is no history)."""
    layout = full_layout(nodes, is_current_dirty, is_viewing_past_snapshot, style)
    return SvgRenderer(timeline_labels=timeline_labels, now=now).render(layout)


def activate(layout: GraphLayout, node_id: str, on_activate: ActivateCallback) -> bool:
    """Report that the user selected ``node_id``'s row.

    Only non-current snapshot rows are actionable; ``on_activate(node_id, was_current)``
    is invoked for them and True returned. Navigation is the caller's job.
    """
    for row in layout.rows:
        if row.kind is RowKind.NODE and row.node is not None and row.node.id == node_id:
            was_current = node_id == layout.current_id
            if was_current:
                return False
            on_activate(node_id, was_current)
            return True
    logger.debug("activation for unknown snapshot ignored", node_id=node_id)
    return False
