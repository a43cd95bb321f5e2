"""Tests for layout configuration and result serialization"""

import dataclasses

import pytest

from flowgraph import FLOW_EDITOR_CONFIG, PROCESS_MAP_CONFIG, LayoutResult, LayoutConfig
from flowgraph.config import configure_logging
from flowgraph.graph import Edge, normalize_nodes


def test_editor_defaults():
    config = LayoutConfig()
    assert config.min_distance == 120
    assert (config.grid_x, config.grid_y, config.grid_size) == (240, 140, 5)
    assert (config.fallback_x_spacing, config.fallback_y_spacing) == (400, 200)
    assert config.decision_options == ("Ja", "Nein")
    assert FLOW_EDITOR_CONFIG == config


def test_process_map_preset_only_changes_node_size():
    assert (PROCESS_MAP_CONFIG.node_width, PROCESS_MAP_CONFIG.node_height) == (350, 150)
    assert PROCESS_MAP_CONFIG.with_overrides(node_width=240, node_height=120) == FLOW_EDITOR_CONFIG


def test_overrides_return_new_instance():
    tighter = FLOW_EDITOR_CONFIG.with_overrides(min_distance=80)
    assert tighter.min_distance == 80
    assert FLOW_EDITOR_CONFIG.min_distance == 120

    with pytest.raises(dataclasses.FrozenInstanceError):
        tighter.min_distance = 10


def test_configure_logging_accepts_level_names():
    configure_logging("debug")
    configure_logging()


def test_layout_result_to_dict():
    nodes = normalize_nodes([{"id": "d", "type": "decision", "position": {"x": 1, "y": 2}, "hint": "?"}])
    result = LayoutResult(nodes=nodes, edges=[Edge(id="e", source="d", target="d")], generation=3)

    data = result.to_dict()

    assert data["generation"] == 3
    assert data["used_fallback"] is False
    assert data["nodes"][0] == {
        "id": "d",
        "kind": "decision",
        "label": "Node 1",
        "description": None,
        "fields": [],
        "options": ["Ja", "Nein"],
        "position": {"x": 1, "y": 2},
        "extra": {"hint": "?"},
    }
    assert data["edges"][0]["label"] is None
