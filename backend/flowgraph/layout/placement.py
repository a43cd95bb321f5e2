"""
Position allocation for nodes added by hand (palette add, drag & drop).

Two interchangeable strategies:

- radial: test the anchor, then a fixed list of offsets of growing
  radius on a ``min_distance`` lattice.
- grid: snap to ``grid_x`` x ``grid_y`` cells and scan a ``grid_size``
  square around the anchor cell, ring by ring, row-major inside a ring.

When the documented probes are exhausted both strategies keep scanning
whole rings of the same lattice. A node can only block a bounded number
of lattice points, so once a square holds more points than
``blocked_per_node * len(nodes)`` one of them is free. The far-offset
fallback is only reachable with an explicit, smaller ``max_search_rings``.
"""

import logging
import math
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from flowgraph.config import FLOW_EDITOR_CONFIG, LayoutConfig
from flowgraph.graph.types import Node, Position

logger = logging.getLogger(__name__)

# Offsets in units of min_distance: neighbours, diagonals, then distance 2
RADIAL_PROBES: Tuple[Tuple[int, int], ...] = (
    (1, 0), (0, 1), (-1, 0), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
    (2, 0), (0, 2), (-2, 0), (0, -2),
    (2, 1), (1, 2), (-2, 1), (1, -2),
    (-1, 2), (2, -1), (-2, -1), (-1, -2),
)

STRATEGIES = ("radial", "grid")


# ------------------------------------------------------------------ #
# Occupancy checks
# ------------------------------------------------------------------ #

def is_position_free(x: float, y: float, nodes: Sequence[Node], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> bool:
    """True when no node lies strictly within ``min_distance`` of (x, y)."""
    return not any(
        math.hypot(n.position.x - x, n.position.y - y) < config.min_distance
        for n in nodes
    )


def is_cell_free(x: float, y: float, nodes: Sequence[Node], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> bool:
    """True when the grid cell centred at (x, y) holds no node and keeps min distance."""
    box_taken = any(
        abs(n.position.x - x) < config.grid_x / 2 and abs(n.position.y - y) < config.grid_y / 2
        for n in nodes
    )
    return not box_taken and is_position_free(x, y, nodes, config)


# ------------------------------------------------------------------ #
# Lattice walking
# ------------------------------------------------------------------ #

def ring_offsets(radius: int) -> Iterator[Tuple[int, int]]:
    """Cells at Chebyshev distance ``radius`` from the origin, row-major."""
    if radius == 0:
        yield (0, 0)
        return
    for row in range(-radius, radius + 1):
        for col in range(-radius, radius + 1):
            if max(abs(row), abs(col)) == radius:
                yield (col, row)


def _blocked_per_node(step_x: float, step_y: float, reach_x: float, reach_y: float) -> int:
    return (math.floor(2 * reach_x / step_x) + 1) * (math.floor(2 * reach_y / step_y) + 1)


def _ring_cap(node_count: int, blocked_per_node: int, configured: Optional[int]) -> int:
    if configured is not None:
        return configured
    radius = 0
    while (2 * radius + 1) ** 2 <= blocked_per_node * node_count:
        radius += 1
    return radius


def _expand(
    anchor: Position,
    step_x: float,
    step_y: float,
    first_ring: int,
    last_ring: int,
    is_free: Callable[[float, float], bool],
) -> Optional[Position]:
    for radius in range(first_ring, last_ring + 1):
        for col, row in ring_offsets(radius):
            x, y = anchor.x + col * step_x, anchor.y + row * step_y
            if is_free(x, y):
                return Position(x, y)
    return None


# ------------------------------------------------------------------ #
# Strategies
# ------------------------------------------------------------------ #

def radial_search(anchor: Position, nodes: Sequence[Node], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> Position:
    if not nodes:
        return Position(anchor.x, anchor.y)

    d = config.min_distance

    def free(x, y):
        return is_position_free(x, y, nodes, config)

    if free(anchor.x, anchor.y):
        return Position(anchor.x, anchor.y)

    for dx, dy in RADIAL_PROBES:
        x, y = anchor.x + dx * d, anchor.y + dy * d
        if free(x, y):
            return Position(x, y)

    cap = _ring_cap(len(nodes), _blocked_per_node(d, d, d, d), config.max_search_rings)
    found = _expand(anchor, d, d, 2, cap, free)
    if found:
        return found

    dx, dy = config.radial_fallback_offset
    logger.warning("[PLACE] Radial search exhausted after %d rings, using far offset", cap)
    return Position(anchor.x + dx, anchor.y + dy)


def grid_search(anchor: Position, nodes: Sequence[Node], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> Position:
    if not nodes:
        return Position(anchor.x, anchor.y)

    def free(x, y):
        return is_cell_free(x, y, nodes, config)

    half = config.grid_size // 2

    found = _expand(anchor, config.grid_x, config.grid_y, 0, half, free)
    if found:
        return found

    per_node = _blocked_per_node(
        config.grid_x,
        config.grid_y,
        max(config.grid_x / 2, config.min_distance),
        max(config.grid_y / 2, config.min_distance),
    )
    cap = _ring_cap(len(nodes), per_node, config.max_search_rings)
    found = _expand(anchor, config.grid_x, config.grid_y, half + 1, cap, free)
    if found:
        return found

    cells = config.grid_fallback_cells
    logger.warning("[PLACE] Grid search exhausted after %d rings, using far offset", max(cap, half))
    return Position(anchor.x + cells * config.grid_x, anchor.y + cells * config.grid_y)


def find_free_position(
    anchor: Position,
    nodes: Sequence[Node],
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
    strategy: str = "radial",
) -> Position:
    if strategy not in STRATEGIES:
        logger.warning("[PLACE] Unknown strategy %r, using radial search", strategy)
    if strategy == "grid":
        return grid_search(anchor, nodes, config)
    return radial_search(anchor, nodes, config)


def append_anchor(nodes: List[Node], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> Position:
    """Anchor right of the most recently added node, or the canvas centre."""
    if not nodes:
        return Position(*config.canvas_center)
    last = nodes[-1].position
    return Position(last.x + config.node_width + config.append_gap, last.y)
