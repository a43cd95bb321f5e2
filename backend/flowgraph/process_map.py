"""
ProcessMap -> flow graph conversion.

A process map is the step-list format produced for the process view:
``{start_step_id, steps}`` where ``steps`` is either a list or a mapping
keyed by step id, and steps link to each other via ``next_step_id`` or
labelled ``possible_outcomes``.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from flowgraph.schemas import GraphPayload

logger = logging.getLogger(__name__)

BRANCHING_STEP_TYPES = {"agent_choice", "ai_interpret"}


class ProcessStep(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    type: Any = None
    text_to_agent: Any = None
    next_step_id: Any = None
    possible_outcomes: Any = None


class ProcessMap(BaseModel):
    model_config = ConfigDict(extra="allow")

    schema_version: Optional[str] = None
    start_step_id: Any = None
    steps: Any = None


def _outcomes(step: ProcessStep) -> List[Dict[str, Any]]:
    if not isinstance(step.possible_outcomes, list):
        return []
    return [o for o in step.possible_outcomes if isinstance(o, dict)]


def _node_type(step: ProcessStep, start_id: Optional[str]) -> str:
    if start_id and step.id == start_id:
        return "start"
    if step.type == "end":
        return "end"
    if step.type in BRANCHING_STEP_TYPES:
        return "decision"
    return "info"


def process_map_to_graph(process_map: Any) -> GraphPayload:
    """
    Build raw nodes/edges from a process map.

    Edge priority per step: explicit ``next_step_id``, then one labelled
    edge per outcome of a branching step. Only when steps arrive as a
    list does a step without either get a sequential edge to its
    successor. Steps without an id are skipped.
    """
    if isinstance(process_map, dict):
        process_map = ProcessMap.model_validate(process_map)
    if not isinstance(process_map, ProcessMap):
        return GraphPayload()

    raw_steps = process_map.steps
    is_sequence = isinstance(raw_steps, list)
    if isinstance(raw_steps, dict):
        raw_steps = list(raw_steps.values())
    if not isinstance(raw_steps, list):
        return GraphPayload()

    steps = [
        ProcessStep.model_validate(s) for s in raw_steps
        if isinstance(s, dict) and str(s.get("id") or "").strip()
    ]
    for step in steps:
        step.id = str(step.id)
    step_ids = {s.id for s in steps}
    start_id = str(process_map.start_step_id) if process_map.start_step_id else None

    nodes: List[Dict[str, Any]] = []
    for step in steps:
        node = {
            "id": step.id,
            "type": _node_type(step, start_id),
            "label": step.text_to_agent or f"[Schritt ohne Text: {step.id}]",
            "step_type": step.type,
        }
        if step.type in BRANCHING_STEP_TYPES:
            node["options"] = [o.get("label") for o in _outcomes(step) if o.get("label")]
        nodes.append(node)

    edges: List[Dict[str, Any]] = []
    for index, step in enumerate(steps):
        created = False

        if step.next_step_id and step.next_step_id in step_ids:
            edges.append({
                "id": f"e-{step.id}-{step.next_step_id}",
                "source": step.id,
                "target": step.next_step_id,
            })
            created = True

        if step.type in BRANCHING_STEP_TYPES and step.possible_outcomes:
            for k, outcome in enumerate(_outcomes(step)):
                target = outcome.get("next_step_id")
                if target and target in step_ids:
                    edges.append({
                        "id": f"e-{step.id}-{target}-{k}",
                        "source": step.id,
                        "target": target,
                        "label": outcome.get("label"),
                    })
            created = True

        if not created and is_sequence and index < len(steps) - 1:
            following = steps[index + 1]
            edges.append({
                "id": f"e-{step.id}-{following.id}",
                "source": step.id,
                "target": following.id,
            })

    logger.info("[PROCESS_MAP] Converted %d steps into %d edges", len(steps), len(edges))
    return GraphPayload(nodes=nodes, edges=edges)
