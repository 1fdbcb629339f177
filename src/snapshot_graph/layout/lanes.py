"""Phase 2: lane resolution.

The current node's whole ancestry, plus everything on its backend lane, is
drawn on the trunk (display lane 0) so the active line of work is always the
leftmost rail, like ``git log --graph``. Every other backend lane is remapped
onto display lanes 1..n in first-seen order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import networkx as nx
import structlog

from snapshot_graph.layout.types import SnapshotNode

logger = structlog.get_logger(__name__)

TRUNK_LANE = 0


@dataclass(frozen=True)
class LaneAssignment:
    """Result of lane resolution.

    Attributes:
        display_lane: Maps node id → display lane (0 = trunk).
        lane_count: 1 + number of distinct non-trunk lane hints.
        trunk_ids: Ids drawn on lane 0.
    """

    display_lane: dict[str, int] = field(default_factory=dict, hash=False)
    lane_count: int = 1
    trunk_ids: frozenset[str] = frozenset()


def build_ancestry_graph(primary_nodes: Sequence[SnapshotNode]) -> nx.DiGraph:
    """Build a child → parent DiGraph over the primary nodes.

    Edges to ids outside the node set are dropped: partial or streaming history
    views legitimately reference parents that are not loaded. Self references
    are dropped as well.
    """
    graph: nx.DiGraph = nx.DiGraph()
    for node in primary_nodes:
        graph.add_node(node.id, data=node)

    for node in primary_nodes:
        for parent_id in node.parent_ids:
            if parent_id == node.id:
                logger.debug("self parent ignored", node_id=node.id)
                continue
            if parent_id not in graph:
                logger.debug("dangling parent ignored", node_id=node.id, parent_id=parent_id)
                continue
            graph.add_edge(node.id, parent_id)

    return graph


def trunk_ancestry(graph: nx.DiGraph, current_id: str) -> set[str]:
    """Breadth-first walk from ``current_id`` over parent edges (inclusive)."""
    if current_id not in graph:
        return set()
    return set(nx.bfs_tree(graph, current_id).nodes)


def compute_display_lanes(
    primary_nodes: Sequence[SnapshotNode],
    current: SnapshotNode | None,
    graph: nx.DiGraph | None = None,
) -> LaneAssignment:
    """Assign a display lane to every primary node.

    Without a current node everything collapses onto the trunk.
    """
    if current is None or not primary_nodes:
        return LaneAssignment(
            display_lane={n.id: TRUNK_LANE for n in primary_nodes},
            lane_count=1,
            trunk_ids=frozenset(n.id for n in primary_nodes),
        )

    if graph is None:
        graph = build_ancestry_graph(primary_nodes)

    trunk_ids = trunk_ancestry(graph, current.id)
    # Nodes ahead of the current position on its own lane (newer, not discarded).
    trunk_ids.update(n.id for n in primary_nodes if n.lane_hint == current.lane_hint)

    display_lane: dict[str, int] = {}
    hint_to_lane: dict[int | str, int] = {}
    for node in primary_nodes:
        if node.id in trunk_ids:
            display_lane[node.id] = TRUNK_LANE
            continue
        if node.lane_hint not in hint_to_lane:
            hint_to_lane[node.lane_hint] = len(hint_to_lane) + 1
        display_lane[node.id] = hint_to_lane[node.lane_hint]

    return LaneAssignment(
        display_lane=display_lane,
        lane_count=1 + len(hint_to_lane),
        trunk_ids=frozenset(trunk_ids),
    )
