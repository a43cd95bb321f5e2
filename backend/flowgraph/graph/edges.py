import logging
from typing import List

from flowgraph.graph.types import Edge, Node

logger = logging.getLogger(__name__)


def sequential_edge_id(source: str, target: str) -> str:
    return f"auto-{source}-{target}"


def complete_sequential_edges(nodes: List[Node], edges: List[Edge]) -> List[Edge]:
    """
    Connect consecutive steps that are otherwise disconnected.

    For each pair (nodes[i], nodes[i+1]) an edge is added only when
    nodes[i] has no outgoing edge, nodes[i+1] has no incoming edge and the
    exact pair is not already connected. Branching or converging steps
    are left alone. Running this on its own output adds nothing.
    """
    result = list(edges)
    sources = {e.source for e in result}
    targets = {e.target for e in result}
    pairs = {(e.source, e.target) for e in result}
    added = 0

    for current, following in zip(nodes, nodes[1:]):
        src, tgt = current.id, following.id
        if src in sources or tgt in targets or (src, tgt) in pairs:
            continue
        result.append(Edge(id=sequential_edge_id(src, tgt), source=src, target=tgt))
        sources.add(src)
        targets.add(tgt)
        pairs.add((src, tgt))
        added += 1

    if added:
        logger.info("[EDGES] Added %d sequential edge(s)", added)
    return result
