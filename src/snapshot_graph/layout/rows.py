"""Phase 4: expand the ordered nodes into display rows.

Besides one row per snapshot this inserts the compressed indicator rows:

- ``uncommitted`` above the current node when there are unsaved changes on
  the current line,
- ``ghost`` above the current node, one lane to the right, when there are
  unsaved changes after rewinding (saving would start a new branch),
- ``alias_note`` below a node for every other timeline pointing at it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from snapshot_graph.layout.types import DEFAULT_STYLE, AliasRef, DisplayRow, GraphStyle, RowKind, SnapshotNode


def build_rows(
    ordered: Sequence[SnapshotNode],
    display_lane: Mapping[str, int],
    alias_map: Mapping[str, Sequence[AliasRef]],
    current_id: str | None,
    has_uncommitted_changes: bool,
    is_viewing_past_snapshot: bool,
    style: GraphStyle = DEFAULT_STYLE,
) -> tuple[DisplayRow, ...]:
    rows: list[DisplayRow] = []
    small = style.indicator_row_height

    for node in ordered:
        lane = display_lane.get(node.id, 0)
        is_current = node.id == current_id

        if is_current and has_uncommitted_changes:
            if is_viewing_past_snapshot:
                rows.append(DisplayRow(kind=RowKind.GHOST, display_lane=lane + 1, height=small, owner_id=node.id))
            else:
                rows.append(DisplayRow(kind=RowKind.UNCOMMITTED, display_lane=lane, height=small, owner_id=node.id))

        rows.append(DisplayRow(kind=RowKind.NODE, display_lane=lane, height=style.row_height, node=node))

        for alias in alias_map.get(node.id, ()):
            rows.append(
                DisplayRow(
                    kind=RowKind.ALIAS_NOTE,
                    display_lane=lane + 1,
                    height=small,
                    alias=alias,
                    owner_id=node.id,
                )
            )

    return tuple(rows)


def row_midpoints(rows: Sequence[DisplayRow]) -> tuple[float, ...]:
    """Vertical centre of each row: heights of all rows above plus half its own."""
    ys: list[float] = []
    top = 0.0
    for row in rows:
        ys.append(top + row.height / 2)
        top += row.height
    return tuple(ys)


def total_height(rows: Sequence[DisplayRow]) -> float:
    return sum(r.height for r in rows)
