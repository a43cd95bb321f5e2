"""
Layered (Sugiyama) layout engine backed by grandalf.

The engine only knows string ids, edges and size hints. It reports node
centres; translating to the canonical top-left origin is the adapter's
job.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Tuple

from grandalf.graphs import Edge as GEdge, Graph as GGraph, Vertex
from grandalf.layouts import SugiyamaLayout

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class LayoutEngineError(Exception):
    """Raised when a layout engine cannot produce a complete result."""


@dataclass
class LayoutRequest:
    node_ids: List[str]
    edges: List[Tuple[str, str]] = field(default_factory=list)
    node_width: float = 240
    node_height: float = 120
    direction: str = "RIGHT"        # RIGHT | DOWN
    node_spacing: float = 40        # between siblings of one layer
    layer_spacing: float = 60       # between layers


class LayoutEngine(Protocol):
    origin: str                     # "center" | "top-left"

    async def layout(self, request: LayoutRequest) -> Dict[str, Point]:
        ...


class _VertexView:
    """View object grandalf reads sizes from and writes centres to."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        self.xy = (0.0, 0.0)


class SugiyamaEngine:
    origin = "center"

    async def layout(self, request: LayoutRequest) -> Dict[str, Point]:
        return await asyncio.to_thread(self.layout_sync, request)

    def layout_sync(self, request: LayoutRequest) -> Dict[str, Point]:
        horizontal = request.direction.upper() in ("RIGHT", "LR")

        # grandalf layers top-down; for left-to-right swap the axes
        w, h = request.node_width, request.node_height
        view_w, view_h = (h, w) if horizontal else (w, h)

        vertices: Dict[str, Vertex] = {}
        for nid in request.node_ids:
            if nid in vertices:
                continue
            v = Vertex(nid)
            v.view = _VertexView(view_w, view_h)
            vertices[nid] = v

        seen = set()
        edges: List[GEdge] = []
        for source, target in request.edges:
            if source == target or (source, target) in seen:
                continue
            if source not in vertices or target not in vertices:
                raise LayoutEngineError(f"edge {source}->{target} references an unknown node")
            seen.add((source, target))
            edges.append(GEdge(vertices[source], vertices[target]))

        graph = GGraph(list(vertices.values()), edges)

        positions: Dict[str, Point] = {}
        cross_offset = 0.0
        for core in graph.C:
            sug = SugiyamaLayout(core)
            sug.xspace = request.node_spacing
            sug.yspace = request.layer_spacing
            sug.init_all()
            sug.draw()

            members = list(core.sV)
            xs = [v.view.xy[0] for v in members]
            ys = [v.view.xy[1] for v in members]
            min_x = min(xs) - view_w / 2
            min_y = min(ys) - view_h / 2

            # Stack components side by side along the cross axis
            for v in members:
                gx = v.view.xy[0] - min_x + cross_offset
                gy = v.view.xy[1] - min_y
                positions[v.data] = (gy, gx) if horizontal else (gx, gy)

            cross_offset += (max(xs) + view_w / 2 - min_x) + request.node_spacing

        logger.debug("[LAYOUT] Sugiyama placed %d nodes in %d component(s)", len(positions), len(graph.C))
        return positions
