"""Phase 3: display order (trunk with branches inserted at their fork points).

A branch is emitted as one contiguous block directly above the trunk node it
forked from, instead of interleaving strictly by time, which would scatter a
branch's snapshots away from its fork.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

import structlog

from snapshot_graph.errors import InvalidTimestampError
from snapshot_graph.layout.types import SnapshotNode

logger = structlog.get_logger(__name__)


def timestamp_key(node: SnapshotNode) -> float:
    """Return the node's timestamp as POSIX seconds.

    Accepts datetimes (naive ones are taken as UTC), numbers and ISO-8601
    strings. Raises InvalidTimestampError for anything non-finite or unparseable.
    """
    value = node.timestamp
    if isinstance(value, datetime):
        dt = value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestampError(node.id, value) from exc
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTimestampError(node.id, value)
    if not math.isfinite(value):
        raise InvalidTimestampError(node.id, value)
    return float(value)


def newest_first(nodes: Sequence[SnapshotNode]) -> list[SnapshotNode]:
    """Sort by timestamp descending. Stable, so ties keep input order."""
    return sorted(nodes, key=timestamp_key, reverse=True)


def find_fork_point(branch: Sequence[SnapshotNode], trunk_ids: set[str]) -> str | None:
    """Return the trunk id the branch descends from, or None for an orphan.

    ``branch`` is newest-first; scanning starts from its oldest node.
    """
    for node in reversed(branch):
        for parent_id in node.parent_ids:
            if parent_id in trunk_ids:
                return parent_id
    return None


def sort_for_display(
    primary_nodes: Sequence[SnapshotNode],
    display_lane: Mapping[str, int],
) -> tuple[SnapshotNode, ...]:
    """Compute the top-to-bottom render order."""
    if not primary_nodes:
        return ()

    trunk = newest_first([n for n in primary_nodes if display_lane.get(n.id) == 0])

    groups: dict[int, list[SnapshotNode]] = {}
    for node in primary_nodes:
        lane = display_lane.get(node.id)
        if lane is not None and lane != 0:
            groups.setdefault(lane, []).append(node)
    branches = {lane: newest_first(groups[lane]) for lane in sorted(groups)}

    trunk_ids = {n.id for n in trunk}
    at_fork: dict[str, list[list[SnapshotNode]]] = {}
    orphans: list[list[SnapshotNode]] = []
    for lane, branch in branches.items():
        fork_id = find_fork_point(branch, trunk_ids)
        if fork_id is None:
            logger.debug("orphan branch appended", lane=lane, size=len(branch))
            orphans.append(branch)
        else:
            at_fork.setdefault(fork_id, []).append(branch)

    result: list[SnapshotNode] = []
    placed: set[str] = set()

    def emit(node: SnapshotNode) -> None:
        if node.id not in placed:
            result.append(node)
            placed.add(node.id)

    for trunk_node in trunk:
        for branch in at_fork.get(trunk_node.id, ()):
            for node in branch:
                emit(node)
        emit(trunk_node)

    for branch in orphans:
        for node in branch:
            emit(node)

    # Only reachable with a lane map that does not cover every node.
    for node in primary_nodes:
        emit(node)

    return tuple(result)
