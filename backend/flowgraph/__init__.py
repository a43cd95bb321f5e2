"""
Flow graph layout engine for the guided dialog / process editors.
"""

from flowgraph.config import FLOW_EDITOR_CONFIG, PROCESS_MAP_CONFIG, LayoutConfig
from flowgraph.generated import load_generated_graph
from flowgraph.graph import Edge, Graph, LayoutResult, Node, NodeKind, Position
from flowgraph.orchestrator import FlowGraphOrchestrator, place_node, relayout, remove_node
from flowgraph.process_map import process_map_to_graph

__version__ = "0.1.0"

__all__ = [
    "Edge",
    "FLOW_EDITOR_CONFIG",
    "FlowGraphOrchestrator",
    "Graph",
    "LayoutConfig",
    "LayoutResult",
    "Node",
    "NodeKind",
    "PROCESS_MAP_CONFIG",
    "Position",
    "load_generated_graph",
    "place_node",
    "process_map_to_graph",
    "relayout",
    "remove_node",
]
