"""Tests for the layered layout adapter and its fallback path"""

import asyncio

from flowgraph.config import LayoutConfig
from flowgraph.graph import Edge, normalize_nodes
from flowgraph.layout import SugiyamaEngine, layout_primary

CONFIG = LayoutConfig()


class RecordingEngine:
    origin = "center"

    def __init__(self, positions=None, error=None):
        self.positions = positions or {}
        self.error = error
        self.requests = []

    async def layout(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.positions


def chain(*ids):
    nodes = normalize_nodes([{"id": i} for i in ids])
    edges = [Edge(id=f"{a}-{b}", source=a, target=b) for a, b in zip(ids, ids[1:])]
    return nodes, edges


def test_empty_input_skips_engine():
    engine = RecordingEngine()
    result = asyncio.run(layout_primary([], [], CONFIG, engine))

    assert result.nodes == []
    assert result.edges == []
    assert result.used_fallback is False
    assert engine.requests == []


def test_centre_coordinates_are_translated():
    nodes, edges = chain("a", "b")
    engine = RecordingEngine({"a": (120, 60), "b": (420, 60)})

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, engine))

    assert result.used_fallback is False
    assert [(n.position.x, n.position.y) for n in result.nodes] == [(0, 0), (300, 0)]

    request = engine.requests[0]
    assert request.node_ids == ["a", "b"]
    assert request.edges == [("a", "b")]
    assert (request.node_width, request.node_height) == (240, 120)
    assert request.direction == "RIGHT"


def test_engine_error_uses_fallback():
    nodes, edges = chain("a", "b", "c")
    engine = RecordingEngine(error=RuntimeError("cycle"))

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, engine))

    assert result.used_fallback is True
    assert [(n.position.x, n.position.y) for n in result.nodes] == [(0, 0), (400, 0), (800, 0)]
    assert result.edges == edges


def test_missing_node_in_result_uses_fallback():
    nodes, edges = chain("a", "b")
    engine = RecordingEngine({"a": (0, 0)})

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, engine))

    assert result.used_fallback is True
    assert result.nodes[1].position.x == 400


def test_non_finite_result_uses_fallback():
    nodes, edges = chain("a")
    engine = RecordingEngine({"a": (float("nan"), 0)})

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, engine))
    assert result.used_fallback is True


def test_sugiyama_chain_runs_left_to_right():
    nodes, edges = chain("start", "ask", "act", "end")

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, SugiyamaEngine()))

    assert result.used_fallback is False
    xs = [n.position.x for n in result.nodes]
    assert xs == sorted(xs)
    assert len(set(xs)) == 4


def test_sugiyama_handles_disconnected_parts():
    nodes = normalize_nodes([{"id": "a"}, {"id": "b"}, {"id": "lonely"}])
    edges = [Edge(id="ab", source="a", target="b")]

    result = asyncio.run(layout_primary(nodes, edges, CONFIG, SugiyamaEngine()))

    coords = {(n.position.x, n.position.y) for n in result.nodes}
    assert len(coords) == 3


def test_sugiyama_rejects_unknown_endpoint():
    engine = SugiyamaEngine()
    nodes, _ = chain("a")
    request_edges = [Edge(id="x", source="a", target="ghost")]

    result = asyncio.run(layout_primary(nodes, request_edges, CONFIG, engine))

    assert result.used_fallback is True
