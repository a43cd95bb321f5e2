"""
Canonical flow graph model, node normalization and edge completion.
"""

from flowgraph.graph.types import (
    Edge,
    FieldSpec,
    Graph,
    LayoutResult,
    Node,
    NodeKind,
    Position,
)
from flowgraph.graph.normalize import (
    drop_dangling_edges,
    generate_field_name,
    normalize_edges,
    normalize_node,
    normalize_nodes,
    unique_id,
)
from flowgraph.graph.edges import complete_sequential_edges

__all__ = [
    "Edge",
    "FieldSpec",
    "Graph",
    "LayoutResult",
    "Node",
    "NodeKind",
    "Position",
    "complete_sequential_edges",
    "drop_dangling_edges",
    "generate_field_name",
    "normalize_edges",
    "normalize_node",
    "normalize_nodes",
    "unique_id",
]
