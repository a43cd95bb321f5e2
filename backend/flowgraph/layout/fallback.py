"""
Fallback layout: breadth-first leveling from the graph topology alone.

Used whenever the layered layout engine fails. It has no failure mode
of its own: cycles, disconnected components, duplicate and dangling
edges all produce a position for every node.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from flowgraph.config import FLOW_EDITOR_CONFIG, LayoutConfig
from flowgraph.graph.types import Edge, Node, Position

logger = logging.getLogger(__name__)


def compute_levels(nodes: Sequence[Node], edges: Sequence[Edge]) -> Dict[str, int]:
    """
    Assign a level to every node id.

    Level 0 holds the entry points (connected nodes without incoming
    edges, or the first node when every connected node has one). Each
    following level holds the not-yet-leveled targets of the previous
    one. Unreached nodes get one trailing level each, in input order.
    """
    node_ids = [n.id for n in nodes]
    known = set(node_ids)

    in_degree: Dict[str, int] = {nid: 0 for nid in node_ids}
    successors: Dict[str, List[str]] = defaultdict(list)
    connected = set()

    for edge in edges:
        if edge.source not in known or edge.target not in known:
            continue
        if edge.source == edge.target:
            continue
        in_degree[edge.target] += 1
        successors[edge.source].append(edge.target)
        connected.update((edge.source, edge.target))

    entry_points = [nid for nid in node_ids if nid in connected and in_degree[nid] == 0]
    if not entry_points and node_ids:
        entry_points = [node_ids[0]]

    levels: Dict[str, int] = {}
    current = []
    for nid in entry_points:
        if nid not in levels:
            levels[nid] = 0
            current.append(nid)

    level = 0
    while current:
        following = []
        for nid in current:
            for target in successors[nid]:
                if target not in levels:
                    levels[target] = level + 1
                    following.append(target)
        current = following
        if current:
            level += 1

    next_level = level + 1 if levels else 0
    for nid in node_ids:
        if nid not in levels:
            levels[nid] = next_level
            next_level += 1

    return levels


def fallback_layout(
    nodes: List[Node],
    edges: List[Edge],
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
) -> List[Node]:
    """Position nodes left to right by level, siblings stacked vertically."""
    levels = compute_levels(nodes, edges)

    slots: Dict[int, int] = defaultdict(int)
    for node in nodes:
        level = levels[node.id]
        index = slots[level]
        slots[level] += 1
        node.position = Position(
            level * config.fallback_x_spacing,
            index * config.fallback_y_spacing,
        )

    logger.info("[FALLBACK] Leveled %d nodes into %d levels", len(nodes), len(slots))
    return nodes
