"""
Graph orchestration for the flow editors.

Two call patterns, never mixed:

- full relayout (after generation or an explicit auto-layout):
  normalize -> layered layout (BFS fallback) -> sequential edge completion
- incremental placement (manual add / drop): only the new node gets a
  position; existing nodes and edges stay as they are.
"""

import copy
import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from flowgraph.config import FLOW_EDITOR_CONFIG, PRIMARY_LAYOUT_ENABLED, LayoutConfig
from flowgraph.graph.edges import complete_sequential_edges
from flowgraph.graph.normalize import (
    drop_dangling_edges,
    normalize_edges,
    normalize_node,
    normalize_nodes,
    unique_id,
)
from flowgraph.graph.types import Edge, Graph, LayoutResult, Node, NodeKind, Position
from flowgraph.layout.engine import LayoutEngine
from flowgraph.layout.fallback import fallback_layout
from flowgraph.layout.placement import append_anchor, find_free_position
from flowgraph.layout.primary import layout_primary
from flowgraph.schemas import GraphPayload

logger = logging.getLogger(__name__)

GraphInput = Union[Graph, GraphPayload, LayoutResult, dict]
AnchorInput = Union[Position, Tuple[float, float], dict, None]


def _split(graph: GraphInput) -> Tuple[List[Any], List[Any]]:
    if isinstance(graph, (Graph, GraphPayload, LayoutResult)):
        nodes, edges = graph.nodes, graph.edges
    elif isinstance(graph, dict):
        nodes, edges = graph.get("nodes"), graph.get("edges")
    else:
        nodes, edges = None, None
    return (
        list(nodes) if isinstance(nodes, (list, tuple)) else [],
        list(edges) if isinstance(edges, (list, tuple)) else [],
    )


def _canonical(graph: GraphInput, config: LayoutConfig) -> Graph:
    raw_nodes, raw_edges = _split(copy.deepcopy(graph))
    nodes = normalize_nodes(raw_nodes, config)
    edges = drop_dangling_edges(nodes, normalize_edges(raw_edges))
    return Graph(nodes=nodes, edges=edges)


def _anchor(anchor: AnchorInput) -> Optional[Position]:
    if isinstance(anchor, Position):
        return anchor
    if isinstance(anchor, dict) and "x" in anchor and "y" in anchor:
        return Position(anchor["x"], anchor["y"])
    if isinstance(anchor, (tuple, list)) and len(anchor) == 2:
        return Position(anchor[0], anchor[1])
    return None


# ============================================================
# Full relayout
# ============================================================

async def relayout(
    graph: GraphInput,
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
    engine: Optional[LayoutEngine] = None,
    use_primary: bool = PRIMARY_LAYOUT_ENABLED,
) -> LayoutResult:
    """
    Recompute every node position and fill sequential edge gaps.

    The input is copied; the caller's graph is never modified. Dangling
    edges are dropped before layout. ``used_fallback`` tells the caller
    the layered layout could not be used.
    """
    canonical = _canonical(graph, config)

    if use_primary:
        result = await layout_primary(canonical.nodes, canonical.edges, config, engine)
    else:
        result = LayoutResult(
            nodes=fallback_layout(canonical.nodes, canonical.edges, config),
            edges=canonical.edges,
            used_fallback=bool(canonical.nodes),
        )

    result.edges = complete_sequential_edges(result.nodes, result.edges)
    logger.info(
        "[ORCHESTRATOR] Relayout: %d nodes, %d edges, fallback=%s",
        len(result.nodes), len(result.edges), result.used_fallback,
    )
    return result


# ============================================================
# Incremental placement
# ============================================================

def place_node(
    graph: GraphInput,
    record: Any,
    anchor: AnchorInput = None,
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
    strategy: str = "radial",
    connect_from_start: bool = False,
) -> Graph:
    """
    Add one node at a free position near ``anchor``.

    Without an anchor the node goes right of the last node. Existing
    nodes keep their positions. With ``connect_from_start`` and the start
    node as the only node, a start edge to the new node is added.
    """
    existing, edges = _split(graph)
    existing_nodes = [n for n in existing if isinstance(n, Node)]
    if len(existing_nodes) != len(existing):
        existing_nodes = normalize_nodes(existing, config)
    edges = normalize_edges(edges)

    node = normalize_node(copy.deepcopy(record), len(existing_nodes), config)
    node.id = unique_id(node.id, {n.id for n in existing_nodes})

    target = _anchor(anchor) or append_anchor(existing_nodes, config)
    node.position = find_free_position(target, existing_nodes, config, strategy)
    logger.debug("[ORCHESTRATOR] Placed %s at (%s, %s)", node.id, node.position.x, node.position.y)

    if (
        connect_from_start
        and len(existing_nodes) == 1
        and existing_nodes[0].kind == NodeKind.START
    ):
        start_id = existing_nodes[0].id
        edges.append(Edge(id=f"e-start-{node.id}", source=start_id, target=node.id))

    return Graph(nodes=existing_nodes + [node], edges=edges)


def remove_node(graph: GraphInput, node_id: str) -> Graph:
    """Drop a node and its incident edges. The start node is never removed."""
    raw_nodes, raw_edges = _split(graph)
    nodes: Sequence[Node] = [n for n in raw_nodes if isinstance(n, Node)]
    if len(nodes) != len(raw_nodes):
        nodes = normalize_nodes(raw_nodes)
    edges = normalize_edges(raw_edges)

    target = next((n for n in nodes if n.id == node_id), None)
    if target is None:
        logger.warning("[ORCHESTRATOR] Cannot remove unknown node %r", node_id)
        return Graph(nodes=list(nodes), edges=edges)
    if target.kind == NodeKind.START:
        logger.warning("[ORCHESTRATOR] Refusing to remove start node %r", node_id)
        return Graph(nodes=list(nodes), edges=edges)

    return Graph(
        nodes=[n for n in nodes if n.id != node_id],
        edges=[e for e in edges if e.source != node_id and e.target != node_id],
    )


# ============================================================
# Stateful front for one editor surface
# ============================================================

class FlowGraphOrchestrator:
    """
    Entry point for one editor surface (flow editor, process view).

    Tracks a generation counter so a relayout that resolves after the
    graph was changed can be recognised and discarded:

        result = await orchestrator.relayout(graph)
        if orchestrator.is_current(result):
            apply(result)
    """

    def __init__(
        self,
        config: LayoutConfig = FLOW_EDITOR_CONFIG,
        engine: Optional[LayoutEngine] = None,
        strategy: str = "radial",
        use_primary: bool = PRIMARY_LAYOUT_ENABLED,
    ):
        self.config = config
        self.engine = engine
        self.strategy = strategy
        self.use_primary = use_primary
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def invalidate(self) -> int:
        """Mark every in-flight relayout as stale (call on any external edit)."""
        self._generation += 1
        return self._generation

    def is_current(self, result: LayoutResult) -> bool:
        return result.generation == self._generation

    async def relayout(self, graph: GraphInput) -> LayoutResult:
        generation = self.invalidate()
        result = await relayout(graph, self.config, self.engine, self.use_primary)
        result.generation = generation
        if not self.is_current(result):
            logger.info("[ORCHESTRATOR] Relayout %d finished stale (now %d)", generation, self._generation)
        return result

    def place_node(
        self,
        graph: GraphInput,
        record: Any,
        anchor: AnchorInput = None,
        connect_from_start: bool = False,
    ) -> Graph:
        self.invalidate()
        return place_node(graph, record, anchor, self.config, self.strategy, connect_from_start)

    def remove_node(self, graph: GraphInput, node_id: str) -> Graph:
        self.invalidate()
        return remove_node(graph, node_id)
