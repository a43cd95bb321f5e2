"""Tests for the BFS leveling fallback layout"""

import random

from flowgraph.config import LayoutConfig
from flowgraph.graph import Edge, normalize_nodes
from flowgraph.layout import compute_levels, fallback_layout

CONFIG = LayoutConfig()


def make_edges(*pairs):
    return [Edge(id=f"{s}-{t}", source=s, target=t) for s, t in pairs]


def test_cycle_with_orphan_terminates():
    nodes = normalize_nodes([{"id": "A"}, {"id": "B"}, {"id": "Z"}])
    edges = make_edges(("A", "B"), ("B", "A"))

    levels = compute_levels(nodes, edges)

    assert levels == {"A": 0, "B": 1, "Z": 2}


def test_positions_follow_levels():
    nodes = normalize_nodes([{"id": x} for x in ("start", "left", "right", "end")])
    edges = make_edges(("start", "left"), ("start", "right"), ("left", "end"), ("right", "end"))

    placed = {n.id: (n.position.x, n.position.y) for n in fallback_layout(nodes, edges, CONFIG)}

    assert placed["start"] == (0, 0)
    assert placed["left"] == (400, 0)
    assert placed["right"] == (400, 200)
    assert placed["end"] == (800, 0)


def test_multiple_entry_points_share_level_zero():
    nodes = normalize_nodes([{"id": "a"}, {"id": "b"}, {"id": "c"}])
    edges = make_edges(("a", "c"), ("b", "c"))

    levels = compute_levels(nodes, edges)
    assert levels == {"a": 0, "b": 0, "c": 1}


def test_orphans_get_one_trailing_level_each():
    nodes = normalize_nodes([{"id": "x"}, {"id": "a"}, {"id": "y"}, {"id": "b"}])
    edges = make_edges(("a", "b"))

    levels = compute_levels(nodes, edges)
    assert levels == {"a": 0, "b": 1, "x": 2, "y": 3}


def test_no_edges_at_all():
    nodes = normalize_nodes([{"id": "a"}, {"id": "b"}])
    levels = compute_levels(nodes, [])
    assert levels == {"a": 0, "b": 1}


def test_dangling_duplicate_and_self_edges_are_tolerated():
    nodes = normalize_nodes([{"id": "a"}, {"id": "b"}])
    edges = make_edges(("a", "b"), ("a", "b"), ("b", "b"), ("b", "ghost"), ("ghost", "a"))

    placed = fallback_layout(nodes, edges, CONFIG)

    assert [(n.position.x, n.position.y) for n in placed] == [(0, 0), (400, 0)]


def test_empty_graph():
    assert fallback_layout([], [], CONFIG) == []


def test_total_on_random_graphs():
    rng = random.Random(7)
    for _ in range(50):
        count = rng.randint(1, 12)
        ids = [f"n{i}" for i in range(count)]
        nodes = normalize_nodes([{"id": i} for i in ids])
        edges = make_edges(*[
            (rng.choice(ids), rng.choice(ids + ["missing"]))
            for _ in range(rng.randint(0, 20))
        ])

        placed = fallback_layout(nodes, edges, CONFIG)

        assert len(placed) == count
        coords = [(n.position.x, n.position.y) for n in placed]
        assert len(set(coords)) == count
