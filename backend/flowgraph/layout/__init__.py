"""
Automatic and incremental layout for flow graphs.
"""

from flowgraph.layout.engine import (
    LayoutEngine,
    LayoutEngineError,
    LayoutRequest,
    SugiyamaEngine,
)
from flowgraph.layout.fallback import compute_levels, fallback_layout
from flowgraph.layout.placement import (
    append_anchor,
    find_free_position,
    grid_search,
    is_cell_free,
    is_position_free,
    radial_search,
)
from flowgraph.layout.primary import layout_primary

__all__ = [
    "LayoutEngine",
    "LayoutEngineError",
    "LayoutRequest",
    "SugiyamaEngine",
    "append_anchor",
    "compute_levels",
    "fallback_layout",
    "find_free_position",
    "grid_search",
    "is_cell_free",
    "is_position_free",
    "layout_primary",
    "radial_search",
]
