"""Phase 1: split raw snapshot occurrences into primary nodes and aliases."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from snapshot_graph.layout.types import AliasRef, SnapshotNode


@dataclass(frozen=True)
class DedupResult:
    """Primary nodes in input order plus ``id → aliases`` for repeated ids.

    ``len(primary_nodes) + alias_count == len(input)`` always holds.
    """

    primary_nodes: tuple[SnapshotNode, ...] = ()
    alias_map: dict[str, tuple[AliasRef, ...]] = field(default_factory=dict, hash=False)

    @property
    def alias_count(self) -> int:
        return sum(len(refs) for refs in self.alias_map.values())


def deduplicate(nodes: Iterable[SnapshotNode]) -> DedupResult:
    """Keep the first occurrence of each id; record every later one as an alias.

    A snapshot that is the tip of two timelines which have not diverged yet
    arrives twice. It renders once, annotated with the other timelines.
    """
    seen: set[str] = set()
    primary: list[SnapshotNode] = []
    aliases: dict[str, list[AliasRef]] = {}

    for node in nodes:
        if node.id in seen:
            aliases.setdefault(node.id, []).append(AliasRef(timeline_id=node.timeline_id, lane_hint=node.lane_hint))
            continue
        seen.add(node.id)
        primary.append(node)

    return DedupResult(
        primary_nodes=tuple(primary),
        alias_map={node_id: tuple(refs) for node_id, refs in aliases.items()},
    )
