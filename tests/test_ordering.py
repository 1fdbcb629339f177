"""Tests for layout/ordering.py — timestamps and trunk-with-fork-insertion order."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

import pytest
from histories import BASE, node, three_branch_nodes, two_branch_nodes

from snapshot_graph.errors import InvalidTimestampError, SnapshotGraphError
from snapshot_graph.layout import (
    SnapshotNode,
    compute_display_lanes,
    find_fork_point,
    newest_first,
    sort_for_display,
    timestamp_key,
)


def ids(nodes):
    return [n.id for n in nodes]


def stamped(value) -> SnapshotNode:
    return SnapshotNode(id="s", message="m", timestamp=value, timeline_id="main")


def display_order(nodes):
    current = next((n for n in nodes if n.is_current), None)
    lanes = compute_display_lanes(nodes, current)
    return ids(sort_for_display(nodes, lanes.display_lane))


# ─── Timestamps ───────────────────────────────────────────────────────────────


class TestTimestampKey:
    def test_float_passthrough(self):
        assert timestamp_key(stamped(BASE)) == BASE

    def test_int_accepted(self):
        assert timestamp_key(stamped(10)) == 10.0

    def test_iso_zulu(self):
        """The backend's ``...Z`` form parses as UTC."""
        assert timestamp_key(stamped("2026-02-27T05:00:00Z")) == BASE

    def test_iso_offset(self):
        assert timestamp_key(stamped("2026-02-27T06:00:00+01:00")) == BASE

    def test_naive_datetime_is_utc(self):
        assert timestamp_key(stamped(datetime(2026, 2, 27, 5, 0, 0))) == BASE

    def test_aware_datetime(self):
        tz = timezone(timedelta(hours=-5))
        assert timestamp_key(stamped(datetime(2026, 2, 27, 0, 0, 0, tzinfo=tz))) == BASE

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf, "not a date", None, True])
    def test_invalid_raises(self, value):
        """Non-finite, unparseable or non-time values are hard errors."""
        with pytest.raises(InvalidTimestampError) as exc_info:
            timestamp_key(stamped(value))
        assert exc_info.value.node_id == "s"
        assert isinstance(exc_info.value, SnapshotGraphError)
        assert isinstance(exc_info.value, ValueError)


class TestNewestFirst:
    def test_descending(self):
        nodes = [node("old", 5), node("new", 0), node("mid", 2)]
        assert ids(newest_first(nodes)) == ["new", "mid", "old"]

    def test_ties_keep_input_order(self):
        nodes = [node("b", 1), node("a", 1), node("c", 1)]
        assert ids(newest_first(nodes)) == ["b", "a", "c"]


# ─── Fork Points ──────────────────────────────────────────────────────────────


class TestFindForkPoint:
    def test_oldest_node_parent(self):
        branch = [node("f2", 0, parents=("f1",)), node("f1", 1, parents=("c2",))]
        assert find_fork_point(branch, {"c1", "c2"}) == "c2"

    def test_scans_upward_from_oldest(self):
        """If the oldest node has no trunk parent, newer branch nodes are checked."""
        branch = [node("b2", 0, parents=("b1", "c1")), node("b1", 1, parents=("gone",))]
        assert find_fork_point(branch, {"c1"}) == "c1"

    def test_orphan(self):
        branch = [node("x", 0, parents=("gone",))]
        assert find_fork_point(branch, {"c1"}) is None

    def test_empty_branch(self):
        assert find_fork_point([], {"c1"}) is None


# ─── Display Order ────────────────────────────────────────────────────────────


class TestSortForDisplay:
    def test_empty(self):
        assert sort_for_display([], {}) == ()

    def test_linear_newest_first(self):
        """c1 ← c2 ← c3 → [c3, c2, c1] regardless of input order."""
        nodes = [node("c1", 2), node("c3", 0, parents=("c2",), current=True), node("c2", 1, parents=("c1",))]
        assert display_order(nodes) == ["c3", "c2", "c1"]

    def test_two_branches(self):
        """Main's tip is inserted directly above the fork point c2."""
        assert display_order(two_branch_nodes()) == ["f2", "f1", "m3", "c2", "c1"]

    def test_three_branches(self):
        """Each branch sits above its own fork point."""
        assert display_order(three_branch_nodes()) == ["a2", "a1", "m3", "c2", "b1", "c1"]

    def test_branch_is_contiguous_block(self):
        """A multi-node branch is emitted whole, newest first, before its fork point."""
        nodes = [
            node("c3", 0, parents=("c2",), current=True),
            node("b2", 1, "b", ("b1",), lane=1),
            node("c2", 2, parents=("c1",)),
            node("b1", 3, "b", ("c1",), lane=1),
            node("c1", 4),
        ]
        # Strict time order would interleave b2, c2, b1.
        assert display_order(nodes) == ["c3", "c2", "b2", "b1", "c1"]

    def test_shared_fork_point_in_lane_order(self):
        """Two branches forking at the same trunk node come out in lane order."""
        nodes = [
            node("c2", 0, parents=("c1",), current=True),
            node("y1", 1, "y", ("c1",), lane="y"),
            node("x1", 1, "x", ("c1",), lane="x"),
            node("c1", 2),
        ]
        lanes = compute_display_lanes(nodes, nodes[0])
        assert lanes.display_lane["y1"] == 1
        assert display_order(nodes) == ["c2", "y1", "x1", "c1"]

    def test_orphan_branch_appended(self):
        """A branch with no trunk parent goes after the whole trunk."""
        nodes = [
            node("o1", 0, "orphan", ("missing",), lane=5),
            node("c2", 1, parents=("c1",), current=True),
            node("c1", 2),
        ]
        assert display_order(nodes) == ["c2", "c1", "o1"]

    def test_orphans_in_lane_order(self):
        nodes = [
            node("c1", 0, current=True),
            node("p1", 1, "p", (), lane="p"),
            node("q2", 2, "q", ("q1",), lane="q"),
            node("q1", 3, "q", (), lane="q"),
        ]
        assert display_order(nodes) == ["c1", "p1", "q2", "q1"]

    def test_unmapped_nodes_appended_in_input_order(self):
        """Nodes missing from the lane map fall through to the end."""
        nodes = [node("z", 5), node("c2", 0, parents=("c1",)), node("y", 6), node("c1", 1)]
        order = sort_for_display(nodes, {"c2": 0, "c1": 0})
        assert ids(order) == ["c2", "c1", "z", "y"]

    def test_every_node_once(self):
        nodes = three_branch_nodes()
        order = display_order(nodes)
        assert sorted(order) == sorted(ids(nodes))
