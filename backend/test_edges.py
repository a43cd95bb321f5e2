"""Tests for sequential edge completion"""

from flowgraph.graph import Edge, complete_sequential_edges, normalize_nodes


def pairs(edges):
    return [(e.source, e.target) for e in edges]


def test_start_and_decision_get_connected():
    nodes = normalize_nodes([
        {"id": "start", "type": "start"},
        {"id": "decide", "type": "decision"},
    ])

    assert nodes[1].options == ["Ja", "Nein"]

    edges = complete_sequential_edges(nodes, [])
    assert pairs(edges) == [("start", "decide")]
    assert edges[0].id == "auto-start-decide"


def test_fills_only_gaps_in_chain():
    nodes = normalize_nodes([{"id": x} for x in "ABCDE"])
    existing = [
        Edge(id="ab", source="A", target="B"),
        Edge(id="cd", source="C", target="D"),
    ]

    edges = complete_sequential_edges(nodes, existing)

    assert edges[:2] == existing
    assert pairs(edges[2:]) == [("B", "C"), ("D", "E")]
    assert len(set(pairs(edges))) == len(edges)


def test_branching_step_is_left_alone():
    nodes = normalize_nodes([{"id": "d", "type": "decision"}, {"id": "x"}, {"id": "y"}])
    existing = [Edge(id="1", source="d", target="y", label="Nein")]

    edges = complete_sequential_edges(nodes, existing)

    # d already branches; x -> y skipped because y has an incoming edge
    assert pairs(edges) == [("d", "y")]


def test_idempotent():
    nodes = normalize_nodes([{"id": x} for x in "ABCDEF"])
    existing = [Edge(id="1", source="B", target="E")]

    once = complete_sequential_edges(nodes, existing)
    twice = complete_sequential_edges(nodes, once)

    assert pairs(once) == pairs(twice)


def test_does_not_mutate_input_list():
    nodes = normalize_nodes([{"id": "a"}, {"id": "b"}])
    existing = []
    complete_sequential_edges(nodes, existing)
    assert existing == []
