"""Tests for layout/lanes.py — trunk-first lane remapping."""

from __future__ import annotations

import networkx as nx
from histories import linear_nodes, node, three_branch_nodes, two_branch_nodes

from snapshot_graph.layout import (
    TRUNK_LANE,
    LaneAssignment,
    build_ancestry_graph,
    compute_display_lanes,
    trunk_ancestry,
)


def current_of(nodes):
    return next(n for n in nodes if n.is_current)


# ─── Ancestry Graph ───────────────────────────────────────────────────────────


class TestBuildAncestryGraph:
    def test_child_to_parent_edges(self):
        """Edges point from child to parent."""
        graph = build_ancestry_graph(linear_nodes())
        assert set(graph.edges()) == {("c3", "c2"), ("c2", "c1")}
        assert nx.is_directed_acyclic_graph(graph)

    def test_dangling_parent_dropped(self):
        """A parent id missing from the node set produces no edge and no node."""
        graph = build_ancestry_graph([node("a", 0, parents=("ghost-parent",))])
        assert list(graph.nodes) == ["a"]
        assert graph.number_of_edges() == 0

    def test_self_parent_dropped(self):
        """A node naming itself as parent gets no self-loop."""
        graph = build_ancestry_graph([node("a", 0, parents=("a",))])
        assert graph.number_of_edges() == 0

    def test_node_data_attached(self):
        """Each graph node carries its SnapshotNode."""
        nodes = linear_nodes()
        graph = build_ancestry_graph(nodes)
        assert graph.nodes["c2"]["data"] is nodes[1]


class TestTrunkAncestry:
    def test_includes_start(self):
        graph = build_ancestry_graph(linear_nodes())
        assert trunk_ancestry(graph, "c2") == {"c2", "c1"}

    def test_unknown_start(self):
        """Unknown start id → empty set."""
        graph = build_ancestry_graph(linear_nodes())
        assert trunk_ancestry(graph, "nope") == set()


# ─── Lane Assignment ──────────────────────────────────────────────────────────


class TestComputeDisplayLanes:
    def test_empty(self):
        """No nodes → empty map, one lane."""
        lanes = compute_display_lanes([], None)
        assert lanes == LaneAssignment(display_lane={}, lane_count=1, trunk_ids=frozenset())

    def test_no_current_collapses_to_trunk(self):
        """Without a current node every node sits on lane 0."""
        nodes = two_branch_nodes()
        lanes = compute_display_lanes(nodes, None)
        assert set(lanes.display_lane.values()) == {TRUNK_LANE}
        assert lanes.lane_count == 1

    def test_linear(self):
        """c1 ← c2 ← c3 with c3 current → all on the trunk."""
        nodes = linear_nodes()
        lanes = compute_display_lanes(nodes, current_of(nodes))
        assert lanes.display_lane == {"c1": 0, "c2": 0, "c3": 0}
        assert lanes.lane_count == 1

    def test_current_fork_takes_trunk(self):
        """Current on the fork → fork + shared ancestry is the trunk, main's tip moves to lane 1."""
        nodes = two_branch_nodes()
        lanes = compute_display_lanes(nodes, current_of(nodes))
        assert lanes.trunk_ids == frozenset({"f2", "f1", "c2", "c1"})
        assert lanes.display_lane["m3"] == 1
        assert lanes.lane_count == 2

    def test_branch_lanes_in_first_seen_order(self):
        """Non-trunk lane hints get 1, 2, … in the order they are first met."""
        nodes = three_branch_nodes()
        lanes = compute_display_lanes(nodes, current_of(nodes))
        assert lanes.display_lane["m3"] == 1
        assert lanes.display_lane["b1"] == 2
        assert lanes.lane_count == 3

    def test_nodes_ahead_on_current_lane_join_trunk(self):
        """After rewinding, newer snapshots on the same backend lane stay on the trunk."""
        nodes = [
            node("c3", 0, parents=("c2",)),
            node("c2", 1, parents=("c1",), current=True),
            node("c1", 2),
        ]
        lanes = compute_display_lanes(nodes, nodes[1])
        assert lanes.display_lane["c3"] == 0
        assert lanes.lane_count == 1

    def test_disconnected_root_gets_own_lane(self):
        """A root unreachable from the current node and on another hint gets its own lane."""
        nodes = [
            node("c2", 0, parents=("c1",), current=True),
            node("c1", 1),
            node("r1", 2, "island", (), lane=7),
        ]
        lanes = compute_display_lanes(nodes, nodes[0])
        assert lanes.display_lane["r1"] == 1
        assert lanes.lane_count == 2

    def test_shared_hint_shares_lane(self):
        """All nodes with the same non-trunk hint land on the same display lane."""
        nodes = [
            node("c2", 0, parents=("c1",), current=True),
            node("b2", 1, "b", ("b1",), lane="b"),
            node("c1", 2),
            node("b1", 3, "b", ("c1",), lane="b"),
        ]
        lanes = compute_display_lanes(nodes, nodes[0])
        assert lanes.display_lane["b1"] == lanes.display_lane["b2"] == 1

    def test_dangling_parent_does_not_break_trunk(self):
        """A missing parent id ends the ancestry walk without error."""
        nodes = [node("c2", 0, parents=("missing",), current=True), node("x", 1, "x", (), lane=3)]
        lanes = compute_display_lanes(nodes, nodes[0])
        assert lanes.display_lane == {"c2": 0, "x": 1}

    def test_accepts_prebuilt_graph(self):
        """A graph built once by the pipeline gives the same answer."""
        nodes = three_branch_nodes()
        graph = build_ancestry_graph(nodes)
        assert compute_display_lanes(nodes, current_of(nodes), graph) == compute_display_lanes(
            nodes, current_of(nodes)
        )
