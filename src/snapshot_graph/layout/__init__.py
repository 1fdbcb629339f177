"""Layout module — snapshot graph layout pipeline.

Phases:
  1. Deduplication  (primary nodes vs. aliases of a shared tip)
  2. Lane resolution (trunk = current node's ancestry, branches remapped 1..n)
  3. Display order (trunk newest-first, branches inserted at fork points)
  4. Rows (node rows plus uncommitted / ghost / alias indicator rows)
  5. Connectors (rails, branch curves, dashed indicator links)
"""

from snapshot_graph.layout.connectors import build_connectors, parent_connector
from snapshot_graph.layout.dedup import DedupResult, deduplicate
from snapshot_graph.layout.lanes import (
    TRUNK_LANE,
    LaneAssignment,
    build_ancestry_graph,
    compute_display_lanes,
    trunk_ancestry,
)
from snapshot_graph.layout.ordering import find_fork_point, newest_first, sort_for_display, timestamp_key
from snapshot_graph.layout.pipeline import clear_layout_cache, full_layout, resolve_current_id
from snapshot_graph.layout.rows import build_rows, row_midpoints, total_height
from snapshot_graph.layout.types import (
    CURRENT_RADIUS,
    DEFAULT_PALETTE,
    DEFAULT_STYLE,
    GRAPH_PADDING,
    INDICATOR_ROW_HEIGHT,
    LANE_SPACING,
    MARKER_RADIUS,
    NODE_RADIUS,
    ROW_HEIGHT,
    STROKE_WIDTH,
    AliasRef,
    ConnectorKind,
    ConnectorPath,
    DisplayRow,
    GraphLayout,
    GraphStyle,
    Point,
    RowKind,
    SnapshotNode,
    TimelineInfo,
)

__all__ = [
    "CURRENT_RADIUS",
    "DEFAULT_PALETTE",
    "DEFAULT_STYLE",
    "GRAPH_PADDING",
    "INDICATOR_ROW_HEIGHT",
    "LANE_SPACING",
    "MARKER_RADIUS",
    "NODE_RADIUS",
    "ROW_HEIGHT",
    "STROKE_WIDTH",
    "TRUNK_LANE",
    "AliasRef",
    "ConnectorKind",
    "ConnectorPath",
    "DedupResult",
    "DisplayRow",
    "GraphLayout",
    "GraphStyle",
    "LaneAssignment",
    "Point",
    "RowKind",
    "SnapshotNode",
    "TimelineInfo",
    "build_ancestry_graph",
    "build_connectors",
    "build_rows",
    "clear_layout_cache",
    "compute_display_lanes",
    "deduplicate",
    "find_fork_point",
    "full_layout",
    "newest_first",
    "parent_connector",
    "resolve_current_id",
    "row_midpoints",
    "sort_for_display",
    "timestamp_key",
    "total_height",
    "trunk_ancestry",
]
