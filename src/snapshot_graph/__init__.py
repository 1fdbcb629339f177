"""snapshot_graph — `git log --graph` style layout for branching snapshot histories."""

from snapshot_graph.api import activate, layout_history, render_svg
from snapshot_graph.errors import InvalidTimestampError, SnapshotGraphError
from snapshot_graph.layout import (
    ConnectorKind,
    ConnectorPath,
    DisplayRow,
    GraphLayout,
    GraphStyle,
    Point,
    RowKind,
    SnapshotNode,
    TimelineInfo,
    full_layout,
)

__all__ = [
    "ConnectorKind",
    "ConnectorPath",
    "DisplayRow",
    "GraphLayout",
    "GraphStyle",
    "InvalidTimestampError",
    "Point",
    "RowKind",
    "SnapshotGraphError",
    "SnapshotNode",
    "TimelineInfo",
    "activate",
    "full_layout",
    "layout_history",
    "render_svg",
]
