from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


# Presentational node types used by the flow canvas; the real step kind
# then lives in ``data.type``.
CANVAS_NODE_TYPES = {"custom", "default", "input", "output"}


class RawNode(BaseModel):
    """Untrusted node record, as produced by the step generator or the editor.

    Every field is optional and loosely typed: the normalizer is the only
    place that turns this into a canonical ``Node``.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Any = None
    type: Any = None
    kind: Any = None
    label: Any = None
    title: Any = None
    description: Any = None
    options: Any = None
    field_specs: Any = Field(default=None, alias="fields")
    position: Any = None
    data: Any = None

    @classmethod
    def coerce(cls, record: Any) -> "RawNode":
        if isinstance(record, RawNode):
            return record
        if isinstance(record, BaseModel):
            record = record.model_dump()
        if not isinstance(record, dict):
            return cls()
        return cls.model_validate(_string_keys(_flatten_canvas_record(record)))

    def extras(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class RawEdge(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    source: Any = None
    target: Any = None
    label: Any = None

    @classmethod
    def coerce(cls, record: Any) -> Optional["RawEdge"]:
        if isinstance(record, RawEdge):
            return record
        if isinstance(record, BaseModel):
            record = record.model_dump()
        if not isinstance(record, dict):
            return None
        return cls.model_validate(_string_keys(record))


class GraphPayload(BaseModel):
    """Graph as delivered by an upstream collaborator (generator or editor)."""
    nodes: List[Any] = []
    edges: List[Any] = []


def _string_keys(record: dict) -> dict:
    # pydantic rejects non-string keys in model input
    return {k: v for k, v in record.items() if isinstance(k, str)}


def _flatten_canvas_record(record: dict) -> dict:
    """
    Canvas nodes keep step content under ``data`` and use ``type`` for
    the renderer. Lift ``data`` to the top level, keeping top-level
    identity/position, and translate input/output to start/end.
    """
    data = record.get("data")
    if not isinstance(data, dict):
        return record

    flat = {k: v for k, v in record.items() if k != "data"}
    canvas_type = flat.get("type")
    if canvas_type in CANVAS_NODE_TYPES:
        flat.pop("type")

    for key, value in data.items():
        if key in ("id", "position"):
            continue
        if key not in flat or flat[key] in (None, ""):
            flat[key] = value

    if not flat.get("type") and not flat.get("kind"):
        if canvas_type == "input":
            flat["type"] = "start"
        elif canvas_type == "output":
            flat["type"] = "end"
    return flat
