from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeKind(str, Enum):
    START = "start"
    INFO = "info"
    QUESTION_GROUP = "question_group"
    DECISION = "decision"
    ACTION = "action"
    END = "end"


@dataclass
class Position:
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass
class FieldSpec:
    name: str
    label: str
    type: str = "text"    # text | number | date | select | checkbox | textarea | email

    def to_dict(self) -> dict:
        return {"name": self.name, "label": self.label, "type": self.type}


@dataclass
class Node:
    id: str
    kind: NodeKind
    label: str
    position: Position
    description: Optional[str] = None
    fields: List[FieldSpec] = field(default_factory=list)
    options: List[str] = field(default_factory=list)    # decision branch labels
    extra: Dict[str, Any] = field(default_factory=dict)  # passthrough (hint, actionType, ...)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "label": self.label,
            "description": self.description,
            "fields": [f.to_dict() for f in self.fields],
            "options": list(self.options),
            "position": self.position.to_dict(),
            "extra": dict(self.extra),
        }


@dataclass
class Edge:
    id: str
    source: str
    target: str
    label: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
        }


@dataclass
class Graph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


@dataclass
class LayoutResult:
    """Positioned graph handed back to the rendering surface."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    used_fallback: bool = False
    generation: int = 0

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "used_fallback": self.used_fallback,
            "generation": self.generation,
        }
