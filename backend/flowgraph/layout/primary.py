import logging
import math
from typing import Dict, List, Optional

from flowgraph.config import FLOW_EDITOR_CONFIG, LayoutConfig
from flowgraph.graph.types import Edge, LayoutResult, Node, Position
from flowgraph.layout.engine import (
    LayoutEngine,
    LayoutEngineError,
    LayoutRequest,
    Point,
    SugiyamaEngine,
)
from flowgraph.layout.fallback import fallback_layout

logger = logging.getLogger(__name__)


def build_request(nodes: List[Node], edges: List[Edge], config: LayoutConfig) -> LayoutRequest:
    return LayoutRequest(
        node_ids=[str(n.id) for n in nodes],
        edges=[(str(e.source), str(e.target)) for e in edges],
        node_width=config.node_width,
        node_height=config.node_height,
        direction=config.direction,
        node_spacing=config.node_spacing,
        layer_spacing=config.layer_spacing,
    )


def _to_top_left(point: Point, origin: str, config: LayoutConfig) -> Position:
    x, y = point
    if origin == "center":
        return Position(x - config.node_width / 2, y - config.node_height / 2)
    return Position(x, y)


def apply_positions(
    nodes: List[Node],
    positions: Dict[str, Point],
    origin: str,
    config: LayoutConfig,
) -> List[Node]:
    """Map engine coordinates back onto ``nodes``; incomplete results raise."""
    resolved: Dict[str, Position] = {}
    for node in nodes:
        point = positions.get(str(node.id))
        if point is None:
            raise LayoutEngineError(f"no position for node {node.id!r}")
        x, y = point
        if not (math.isfinite(x) and math.isfinite(y)):
            raise LayoutEngineError(f"non-finite position for node {node.id!r}")
        resolved[node.id] = _to_top_left((x, y), origin, config)

    for node in nodes:
        node.position = resolved[node.id]
    return nodes


async def layout_primary(
    nodes: List[Node],
    edges: List[Edge],
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
    engine: Optional[LayoutEngine] = None,
) -> LayoutResult:
    """
    Lay out with the layered engine, degrading to BFS leveling.

    Never raises: any engine exception or incomplete result switches to
    ``fallback_layout`` and sets ``used_fallback``.
    """
    if not nodes:
        return LayoutResult(nodes=[], edges=[], used_fallback=False)

    for node in nodes:
        node.id = str(node.id)
    for edge in edges:
        edge.source, edge.target = str(edge.source), str(edge.target)

    engine = engine or SugiyamaEngine()
    request = build_request(nodes, edges, config)

    try:
        positions = await engine.layout(request)
        apply_positions(nodes, positions, getattr(engine, "origin", "center"), config)
    except Exception as e:
        logger.warning("[LAYOUT] Layered layout failed, using fallback: %s", e)
        return LayoutResult(
            nodes=fallback_layout(nodes, edges, config),
            edges=edges,
            used_fallback=True,
        )

    logger.info("[LAYOUT] Layered layout placed %d nodes", len(nodes))
    return LayoutResult(nodes=nodes, edges=edges, used_fallback=False)
