from __future__ import annotations

import pytest

from snapshot_graph.layout import clear_layout_cache


@pytest.fixture(autouse=True)
def _fresh_layout_cache():
    """Layouts are memoized; start every test from an empty cache."""
    clear_layout_cache()
    yield
    clear_layout_cache()
