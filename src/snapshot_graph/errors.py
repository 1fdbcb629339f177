"""Errors raised by the layout engine.

Only inputs that make a layout impossible raise. Data-shape problems inside the
documented model (dangling parents, duplicate current flags, orphan branches)
are absorbed and logged instead.
"""

from __future__ import annotations


class SnapshotGraphError(ValueError):
    """Base class for layout errors."""


class InvalidTimestampError(SnapshotGraphError):
    """A snapshot timestamp is non-finite or cannot be parsed."""

    def __init__(self, node_id: str, value: object) -> None:
        super().__init__(f"snapshot {node_id!r} has an invalid timestamp: {value!r}")
        self.node_id = node_id
        self.value = value
