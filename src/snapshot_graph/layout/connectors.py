"""Phase 5: connector geometry between rows.

Coordinates are pure functions of (lane, row): ``x = padding + lane * spacing``
and ``y`` is the row midpoint. Rails stop at the edge of each dot rather than
its centre.
"""

from __future__ import annotations

from collections.abc import Sequence

from snapshot_graph.layout.types import (
    DEFAULT_STYLE,
    ConnectorKind,
    ConnectorPath,
    DisplayRow,
    GraphStyle,
    Point,
    RowKind,
)


def _dot_radius(row: DisplayRow, current_id: str | None, style: GraphStyle) -> float:
    if row.node is not None and row.node.id == current_id:
        return style.current_radius
    return style.node_radius


def parent_connector(
    child: DisplayRow,
    child_y: float,
    parent: DisplayRow,
    parent_y: float,
    current_id: str | None,
    style: GraphStyle = DEFAULT_STYLE,
) -> ConnectorPath:
    """Straight rail on the same lane, S-curve across lanes."""
    cx = style.lane_x(child.display_lane)
    px = style.lane_x(parent.display_lane)
    start = Point(cx, child_y + _dot_radius(child, current_id, style))
    end = Point(px, parent_y - _dot_radius(parent, current_id, style))

    if child.display_lane == parent.display_lane:
        return ConnectorPath(kind=ConnectorKind.RAIL, start=start, end=end, lane=child.display_lane)

    mid_y = (child_y + parent_y) / 2
    return ConnectorPath(
        kind=ConnectorKind.BRANCH,
        start=start,
        end=end,
        lane=child.display_lane,
        controls=(Point(cx, mid_y), Point(px, mid_y)),
        opacity=0.6,
    )


def build_connectors(
    rows: Sequence[DisplayRow],
    row_y: Sequence[float],
    current_id: str | None,
    style: GraphStyle = DEFAULT_STYLE,
) -> tuple[ConnectorPath, ...]:
    """Derive every connector for the given rows.

    Parent ids without a row (not loaded, or dropped) produce no connector.
    """
    node_row_idx: dict[str, int] = {}
    for i, row in enumerate(rows):
        if row.kind is RowKind.NODE and row.node is not None:
            node_row_idx[row.node.id] = i

    paths: list[ConnectorPath] = []

    # Rails and branch connectors.
    for i, row in enumerate(rows):
        if row.kind is not RowKind.NODE or row.node is None:
            continue
        for parent_id in row.node.parent_ids:
            pi = node_row_idx.get(parent_id)
            if pi is None or pi == i:
                continue
            paths.append(parent_connector(row, row_y[i], rows[pi], row_y[pi], current_id, style))

    # Indicator connectors.
    for i, row in enumerate(rows):
        if row.kind is RowKind.NODE or row.owner_id is None:
            continue
        oi = node_row_idx.get(row.owner_id)
        if oi is None:
            continue
        owner = rows[oi]
        ox = style.lane_x(owner.display_lane)
        oy = row_y[oi]
        x = style.lane_x(row.display_lane)
        y = row_y[i]

        if row.kind is RowKind.UNCOMMITTED:
            paths.append(
                ConnectorPath(
                    kind=ConnectorKind.UNCOMMITTED,
                    start=Point(x, y + style.marker_radius),
                    end=Point(ox, oy - _dot_radius(owner, current_id, style)),
                    lane=row.display_lane,
                    dashed=True,
                    opacity=0.4,
                )
            )
        elif row.kind is RowKind.GHOST:
            # Leaves the current dot sideways and bends up into the ghost marker.
            paths.append(
                ConnectorPath(
                    kind=ConnectorKind.GHOST,
                    start=Point(ox + _dot_radius(owner, current_id, style), oy),
                    end=Point(x, y + style.marker_radius),
                    lane=owner.display_lane,
                    controls=(Point(x, oy),),
                    dashed=True,
                    opacity=0.5,
                )
            )
        elif row.kind is RowKind.ALIAS_NOTE:
            paths.append(
                ConnectorPath(
                    kind=ConnectorKind.ALIAS,
                    start=Point(ox + _dot_radius(owner, current_id, style), oy),
                    end=Point(x, y - style.marker_radius),
                    lane=owner.display_lane,
                    controls=(Point(x, oy),),
                    dashed=True,
                    opacity=0.4,
                )
            )

    return tuple(paths)
