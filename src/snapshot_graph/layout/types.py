"""Layout IR types: snapshot input nodes, display rows, connectors and the final GraphLayout.

Every type here is immutable so phase outputs can be shared between phases and
memoized without copying.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

# ─── Geometry Constants ─────────────────────────────────────────────────────

ROW_HEIGHT: float = 40  # px per snapshot row
INDICATOR_ROW_HEIGHT: float = 28  # px for uncommitted/ghost/alias rows
LANE_SPACING: float = 16  # px between lane centres
GRAPH_PADDING: float = 14  # left padding to the first lane centre
NODE_RADIUS: float = 5
CURRENT_RADIUS: float = 6.5
MARKER_RADIUS: float = 4  # indicator row markers
STROKE_WIDTH: float = 2

DEFAULT_PALETTE: tuple[str, ...] = (
    "#cba6f7",  # trunk
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#3b82f6",
    "#ec4899",
    "#14b8a6",
    "#8b5cf6",
)
NEUTRAL_COLOR = "#a6adc8"


@dataclass(frozen=True)
class GraphStyle:
    """Geometry and colour settings for one layout pass.

    Hashable, so it can take part in the memoization key of ``full_layout``.
    """

    row_height: float = ROW_HEIGHT
    indicator_row_height: float = INDICATOR_ROW_HEIGHT
    lane_spacing: float = LANE_SPACING
    padding: float = GRAPH_PADDING
    node_radius: float = NODE_RADIUS
    current_radius: float = CURRENT_RADIUS
    marker_radius: float = MARKER_RADIUS
    stroke_width: float = STROKE_WIDTH
    palette: tuple[str, ...] = DEFAULT_PALETTE
    neutral_color: str = NEUTRAL_COLOR

    def lane_x(self, lane: int) -> float:
        return self.padding + lane * self.lane_spacing

    def lane_color(self, lane: int) -> str:
        return self.palette[lane % len(self.palette)]

    def graph_width(self, lane_count: int) -> float:
        return self.padding + max(lane_count, 1) * self.lane_spacing + 4


DEFAULT_STYLE = GraphStyle()


# ─── Input ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SnapshotNode:
    """One occurrence of a snapshot on a timeline.

    The same ``id`` may occur on several timelines (a shared tip); only the
    first occurrence is laid out, later ones become aliases.
    """

    id: str
    message: str
    timestamp: datetime | float | str
    timeline_id: str
    parent_ids: tuple[str, ...] = ()
    lane_hint: int | str = 0
    is_current: bool = False
    is_tip: bool = False

    def __post_init__(self) -> None:
        # Lists from JSON payloads would make the node unhashable.
        if not isinstance(self.parent_ids, tuple):
            object.__setattr__(self, "parent_ids", tuple(self.parent_ids))


@dataclass(frozen=True)
class TimelineInfo:
    label: str
    color_slot: int = 0


# ─── Derived ────────────────────────────────────────────────────────────────


class RowKind(enum.Enum):
    NODE = "node"
    UNCOMMITTED = "uncommitted"
    GHOST = "ghost"
    ALIAS_NOTE = "alias_note"


@dataclass(frozen=True)
class AliasRef:
    """A secondary timeline that also points at an already-seen snapshot id."""

    timeline_id: str
    lane_hint: int | str


@dataclass(frozen=True)
class DisplayRow:
    """A single rendered row.

    ``node`` is set only for NODE rows, ``alias`` only for ALIAS_NOTE rows.
    ``owner_id`` names the snapshot a synthetic row is attached to.
    """

    kind: RowKind
    display_lane: int
    height: float
    node: SnapshotNode | None = None
    alias: AliasRef | None = None
    owner_id: str | None = None


@dataclass(frozen=True)
class Point:
    """A 2D point in pixel coordinates."""

    x: float
    y: float


class ConnectorKind(enum.Enum):
    RAIL = "rail"  # same-lane parent link
    BRANCH = "branch"  # cross-lane parent link
    UNCOMMITTED = "uncommitted"
    GHOST = "ghost"
    ALIAS = "alias"


def fmt_num(v: float) -> str:
    """Format a coordinate for path data: integers without a trailing ``.0``."""
    if float(v).is_integer():
        return str(int(v))
    return f"{v:.2f}".rstrip("0").rstrip(".")


def _fmt_point(p: Point) -> str:
    return f"{fmt_num(p.x)} {fmt_num(p.y)}"


@dataclass(frozen=True)
class ConnectorPath:
    """A connector between two rows.

    ``controls`` holds zero (straight line), one (quadratic) or two (cubic)
    control points between ``start`` and ``end``.
    """

    kind: ConnectorKind
    start: Point
    end: Point
    lane: int
    controls: tuple[Point, ...] = ()
    dashed: bool = False
    opacity: float = 0.7

    @property
    def d(self) -> str:
        """SVG path data for this connector."""
        head = f"M {_fmt_point(self.start)}"
        if not self.controls:
            return f"{head} L {_fmt_point(self.end)}"
        if len(self.controls) == 1:
            return f"{head} Q {_fmt_point(self.controls[0])}, {_fmt_point(self.end)}"
        c1, c2 = self.controls
        return f"{head} C {_fmt_point(c1)}, {_fmt_point(c2)}, {_fmt_point(self.end)}"


@dataclass(frozen=True)
class GraphLayout:
    """Full output of one layout pass, consumed by renderers.

    ``rows`` is empty when there is no history yet.
    """

    rows: tuple[DisplayRow, ...]
    total_height: float
    lane_count: int
    connectors: tuple[ConnectorPath, ...]
    row_y: tuple[float, ...] = ()
    graph_width: float = 0
    current_id: str | None = None
    alias_map: Mapping[str, tuple[AliasRef, ...]] = field(default_factory=dict, hash=False, compare=False)
    has_multiple_timelines: bool = False
    style: GraphStyle = DEFAULT_STYLE

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def node_rows(self) -> list[DisplayRow]:
        return [r for r in self.rows if r.kind is RowKind.NODE]
