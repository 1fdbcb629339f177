"""SVG renderer — renders a snapshot GraphLayout to an SVG string."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from snapshot_graph.layout.ordering import timestamp_key
from snapshot_graph.layout.types import (
    ConnectorKind,
    ConnectorPath,
    DisplayRow,
    GraphLayout,
    GraphStyle,
    RowKind,
    TimelineInfo,
    fmt_num,
)

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 12
META_FONT_SIZE = 10
FONT_FAMILY = "system-ui, sans-serif"
LABEL_WIDTH = 220  # text column to the right of the rails
BADGE_GAP = 6
HALO_GAP = 3  # ring around the current dot

BACKGROUND = "#1e1e2e"
TEXT_COLOR = "#cdd6f4"
MUTED_COLOR = "#a6adc8"
BRANCHING_COLOR = "#f59e0b"


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def format_relative_time(timestamp: float, now: float) -> str:
    """Short age label: ``just now``, ``5m ago``, ``3h ago``, ``2d ago`` or a date."""
    minutes = int((now - timestamp) // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


# ─── Connectors ─────────────────────────────────────────────────────────────


def _render_connector(path: ConnectorPath, style: GraphStyle) -> str:
    color = style.neutral_color if path.kind is ConnectorKind.UNCOMMITTED else style.lane_color(path.lane)
    dash = ' stroke-dasharray="3 2"' if path.dashed else ""
    return (
        f'<path d="{path.d}" stroke="{color}" stroke-width="{fmt_num(style.stroke_width)}" '
        f'stroke-opacity="{fmt_num(path.opacity)}" fill="none" stroke-linecap="round"{dash}/>'
    )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a GraphLayout, produces an SVG string.

    Node rows are emitted as ``<g data-node-id=... data-current=...>`` groups so
    the host can route pointer events to ``snapshot_graph.api.activate``.
    """

    def __init__(
        self,
        timeline_labels: Mapping[str, TimelineInfo] | None = None,
        now: datetime | None = None,
        label_width: float = LABEL_WIDTH,
    ) -> None:
        self.timeline_labels = dict(timeline_labels or {})
        self.now = now
        self.label_width = label_width

    def _timeline_label(self, timeline_id: str) -> str:
        info = self.timeline_labels.get(timeline_id)
        return info.label if info is not None else timeline_id

    def _now(self) -> float:
        now = self.now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.timestamp()

    def render(self, layout: GraphLayout) -> str:
        if layout.is_empty:
            return ""

        style = layout.style
        svg_w = layout.graph_width + self.label_width
        svg_h = layout.total_height
        w, h = fmt_num(svg_w), fmt_num(svg_h)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">',
            f'<rect width="{w}" height="{h}" fill="{BACKGROUND}"/>',
            '<g class="connectors">',
        ]
        # Rails behind dots.
        for path in layout.connectors:
            parts.append(_render_connector(path, style))
        parts.append("</g>")

        now = self._now()
        text_x = fmt_num(layout.graph_width)
        for row, y in zip(layout.rows, layout.row_y):
            x = style.lane_x(row.display_lane)
            if row.kind is RowKind.NODE:
                parts.append(self._render_node(row, x, y, text_x, layout, now))
            elif row.kind is RowKind.UNCOMMITTED:
                parts.append(self._render_marker(x, y, style.neutral_color, style))
                parts.append(self._label(text_x, y, "Unsaved changes", MUTED_COLOR, italic=True))
            elif row.kind is RowKind.GHOST:
                color = style.lane_color(max(row.display_lane - 1, 0))
                parts.append(self._render_marker(x, y, color, style))
                parts.append(
                    f'<text x="{text_x}" y="{fmt_num(y)}" dominant-baseline="central" {_font(META_FONT_SIZE)} '
                    f'font-style="italic" fill="{MUTED_COLOR}">New direction'
                    f'<tspan dx="{BADGE_GAP}" font-style="normal" fill="{BRANCHING_COLOR}">branching</tspan></text>'
                )
            elif row.kind is RowKind.ALIAS_NOTE and row.alias is not None:
                color = style.lane_color(max(row.display_lane - 1, 0))
                parts.append(self._render_marker(x, y, color, style))
                label = f"+{self._timeline_label(row.alias.timeline_id)}"
                parts.append(self._label(text_x, y, label, MUTED_COLOR))

        parts.append("</svg>")
        return "\n".join(parts)

    # ─── Rows ───────────────────────────────────────────────────────────────

    def _render_node(
        self,
        row: DisplayRow,
        x: float,
        y: float,
        text_x: str,
        layout: GraphLayout,
        now: float,
    ) -> str:
        node = row.node
        assert node is not None
        style = layout.style
        color = style.lane_color(row.display_lane)
        is_current = node.id == layout.current_id
        cx, cy = fmt_num(x), fmt_num(y)

        parts = [f'<g class="node" data-node-id="{_escape(node.id)}" data-current="{str(is_current).lower()}">']
        if is_current:
            halo = fmt_num(style.current_radius + HALO_GAP)
            parts.append(f'<circle cx="{cx}" cy="{cy}" r="{halo}" fill="none" stroke="{color}" stroke-opacity="0.3"/>')
            parts.append(f'<circle cx="{cx}" cy="{cy}" r="{fmt_num(style.current_radius)}" fill="{color}"/>')
        else:
            parts.append(
                f'<circle cx="{cx}" cy="{cy}" r="{fmt_num(style.node_radius)}" fill="{BACKGROUND}" '
                f'stroke="{color}" stroke-width="{fmt_num(style.stroke_width)}"/>'
            )

        weight = ' font-weight="600"' if is_current else ""
        message_color = TEXT_COLOR if is_current else MUTED_COLOR
        parts.append(
            f'<text x="{text_x}" y="{fmt_num(y - 4)}" {_font()}{weight} fill="{message_color}">'
            f"{_escape(node.message)}</text>"
        )

        meta = _escape(format_relative_time(timestamp_key(node), now))
        if layout.has_multiple_timelines:
            badge = _escape(self._timeline_label(node.timeline_id))
            meta += f'<tspan dx="{BADGE_GAP}" fill="{color}">{badge}</tspan>'
        parts.append(
            f'<text x="{text_x}" y="{fmt_num(y + 10)}" {_font(META_FONT_SIZE)} fill="{MUTED_COLOR}">{meta}</text>'
        )
        parts.append("</g>")
        return "\n".join(parts)

    @staticmethod
    def _render_marker(x: float, y: float, color: str, style: GraphStyle) -> str:
        return (
            f'<circle cx="{fmt_num(x)}" cy="{fmt_num(y)}" r="{fmt_num(style.marker_radius)}" fill="{BACKGROUND}" '
            f'stroke="{color}" stroke-width="1.5" stroke-dasharray="2 1.5" stroke-opacity="0.5"/>'
        )

    @staticmethod
    def _label(text_x: str, y: float, text: str, color: str, italic: bool = False) -> str:
        italic_attr = ' font-style="italic"' if italic else ""
        return (
            f'<text x="{text_x}" y="{fmt_num(y)}" dominant-baseline="central" {_font(META_FONT_SIZE)}'
            f'{italic_attr} fill="{color}">{_escape(text)}</text>'
        )
