import dataclasses
import logging
import math
import re
from typing import Any, Iterable, List, Optional, Set

from flowgraph.config import FLOW_EDITOR_CONFIG, LayoutConfig
from flowgraph.graph.types import Edge, FieldSpec, Node, NodeKind, Position
from flowgraph.schemas import RawEdge, RawNode

logger = logging.getLogger(__name__)

# Renderer-only keys that never belong in the canonical passthrough
_CANVAS_KEYS = {"sourcePosition", "targetPosition", "onEdit", "className", "selected", "dragging", "width", "height"}

_KIND_ALIASES = {
    "question": NodeKind.QUESTION_GROUP,
    "questions": NodeKind.QUESTION_GROUP,
    "branch": NodeKind.DECISION,
}


# -------------------------
# Helpers
# -------------------------

def generate_field_name(label: str) -> str:
    """Derive a machine field name from a human label: 'Größe (cm)' -> 'groesse_cm'."""
    name = (label or "").lower()
    for src, dst in (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss")):
        name = name.replace(src, dst)
    name = re.sub(r"[^a-z0-9]+", "_", name)
    return name.strip("_")[:32]


def unique_id(base: str, taken: Set[str]) -> str:
    """``base``, or ``base-<n>`` with the smallest n not in ``taken``."""
    if base not in taken:
        return base
    suffix = 1
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return value


def _kind(raw: RawNode) -> NodeKind:
    value = _text(raw.kind) or _text(raw.type)
    if not value:
        return NodeKind.INFO
    value = value.lower()
    try:
        return NodeKind(value)
    except ValueError:
        return _KIND_ALIASES.get(value, NodeKind.INFO)


def _position(raw: RawNode) -> Optional[Position]:
    pos = raw.position
    if isinstance(pos, Position):
        return pos
    if isinstance(pos, dict):
        x, y = _number(pos.get("x")), _number(pos.get("y"))
        if x is not None and y is not None:
            return Position(x, y)
    return None


def grid_position(index: int, config: LayoutConfig = FLOW_EDITOR_CONFIG) -> Position:
    column = index % config.default_columns
    row = index // config.default_columns
    return Position(column * config.default_spacing_x, row * config.default_spacing_y)


def _options(raw: RawNode) -> List[str]:
    if not isinstance(raw.options, (list, tuple)):
        return []
    options = []
    for opt in raw.options:
        if isinstance(opt, dict):
            opt = opt.get("label")
        text = _text(opt)
        if text:
            options.append(text)
    return options


def _fields(raw: RawNode) -> List[FieldSpec]:
    if not isinstance(raw.field_specs, (list, tuple)):
        return []
    fields = []
    for item in raw.field_specs:
        if isinstance(item, FieldSpec):
            fields.append(item)
            continue
        if not isinstance(item, dict):
            continue
        label = _text(item.get("label")) or _text(item.get("name")) or ""
        name = _text(item.get("name")) or generate_field_name(label)
        fields.append(FieldSpec(name=name, label=label, type=_text(item.get("type")) or "text"))
    return fields


# -------------------------
# Nodes
# -------------------------

def _explicit_id(record: Any) -> Optional[str]:
    if isinstance(record, Node):
        return record.id
    return _text(RawNode.coerce(record).id)


def normalize_node(
    record: Any,
    index: int,
    config: LayoutConfig = FLOW_EDITOR_CONFIG,
    taken: Optional[Set[str]] = None,
) -> Node:
    """
    Canonical node for one record. A generated ``node-<index>`` id is
    suffixed when it is already in ``taken``. ``Node`` input is never
    modified; a copy is returned when defaults have to be filled in.
    """
    if isinstance(record, Node):
        if record.kind == NodeKind.DECISION and not record.options:
            return dataclasses.replace(record, options=list(config.decision_options))
        return record

    raw = RawNode.coerce(record)
    kind = _kind(raw)

    options = _options(raw)
    if kind == NodeKind.DECISION and not options:
        options = list(config.decision_options)

    extra = {k: v for k, v in raw.extras().items() if k not in _CANVAS_KEYS}

    return Node(
        id=_text(raw.id) or unique_id(f"node-{index}", taken or set()),
        kind=kind,
        label=_text(raw.label) or _text(raw.title) or f"Node {index + 1}",
        description=_text(raw.description),
        fields=_fields(raw),
        options=options,
        position=_position(raw) or grid_position(index, config),
        extra=extra,
    )


def normalize_nodes(records: Iterable[Any], config: LayoutConfig = FLOW_EDITOR_CONFIG) -> List[Node]:
    """
    Convert raw node records into canonical nodes.

    Same length and order as the input; never raises. Generated ids never
    reuse an id that another record carries.
    """
    if records is None:
        return []
    records = list(records)
    taken = {node_id for node_id in map(_explicit_id, records) if node_id}

    nodes = []
    for i, record in enumerate(records):
        node = normalize_node(record, i, config, taken)
        taken.add(node.id)
        nodes.append(node)
    logger.debug("[NORMALIZE] %d nodes normalized", len(nodes))
    return nodes


# -------------------------
# Edges
# -------------------------

def normalize_edges(records: Iterable[Any]) -> List[Edge]:
    """
    Canonical edges; records without both endpoints are skipped.

    Edges without an id get ``e-<source>-<target>``, suffixed for
    parallel edges between the same pair.
    """
    edges: List[Edge] = []
    unnamed: List[Edge] = []
    for record in records or []:
        if isinstance(record, Edge):
            edges.append(record)
            continue
        raw = RawEdge.coerce(record)
        if raw is None:
            continue
        source, target = _text(raw.source), _text(raw.target)
        if not source or not target:
            continue
        edge = Edge(id=_text(raw.id) or "", source=source, target=target, label=_text(raw.label))
        if not edge.id:
            unnamed.append(edge)
        edges.append(edge)

    taken = {e.id for e in edges if e.id}
    for edge in unnamed:
        edge.id = unique_id(f"e-{edge.source}-{edge.target}", taken)
        taken.add(edge.id)
    return edges


def drop_dangling_edges(nodes: List[Node], edges: List[Edge]) -> List[Edge]:
    """Remove edges whose source or target is not one of ``nodes``."""
    node_ids = {n.id for n in nodes}
    kept = [e for e in edges if e.source in node_ids and e.target in node_ids]
    dropped = len(edges) - len(kept)
    if dropped:
        logger.warning("[NORMALIZE] Dropped %d edge(s) with missing endpoints", dropped)
    return kept
