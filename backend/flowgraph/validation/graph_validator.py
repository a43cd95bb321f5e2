"""
Graph Validator - Diagnoses structural problems in a flow graph.

Catches issues like:
- Missing or repeated start step
- Duplicate node IDs and duplicate edges
- Edges pointing at nodes that do not exist
- Self-loops
- Decision steps without branch options
- Orphaned steps (no connections)

Purely diagnostic: nothing here raises or mutates the graph.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from flowgraph.graph.types import Graph, NodeKind

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    ERROR = "error"      # Layout will drop or misplace something
    WARNING = "warning"  # Graph lays out but reads badly
    INFO = "info"        # Suggestions for improvement


@dataclass
class ValidationIssue:
    """A single validation issue found in the graph"""
    severity: ValidationSeverity
    code: str           # Machine-readable issue code
    message: str        # Human-readable description
    node_id: Optional[str] = None
    edge_info: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "node_id": self.node_id,
            "edge_info": self.edge_info,
        }


@dataclass
class GraphValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    def codes(self) -> Set[str]:
        return {i.code for i in self.issues}

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "issues": [i.to_dict() for i in self.issues],
            "stats": self.stats,
        }


class GraphValidator:
    """
    Usage:
        result = GraphValidator().validate(graph)
        for issue in result.issues:
            print(f"[{issue.severity.value}] {issue.message}")
    """

    def validate(self, graph: Graph) -> GraphValidationResult:
        issues: List[ValidationIssue] = []
        node_ids = {node.id for node in graph.nodes}

        if graph.nodes:
            issues.extend(self._check_start(graph))
        issues.extend(self._check_duplicate_node_ids(graph))
        issues.extend(self._check_missing_edge_references(graph, node_ids))
        issues.extend(self._check_self_loops(graph))
        issues.extend(self._check_duplicate_edges(graph))
        issues.extend(self._check_decision_options(graph))
        issues.extend(self._check_orphaned_nodes(graph, node_ids))

        result = GraphValidationResult(
            is_valid=not any(i.severity == ValidationSeverity.ERROR for i in issues),
            issues=issues,
            stats={"nodes": len(graph.nodes), "edges": len(graph.edges)},
        )
        logger.debug("[VALIDATOR] %d issue(s), valid=%s", len(issues), result.is_valid)
        return result

    def _check_start(self, graph: Graph) -> List[ValidationIssue]:
        starts = [n for n in graph.nodes if n.kind == NodeKind.START]
        if not starts:
            return [ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="MISSING_START",
                message="Graph has no start step",
            )]
        if len(starts) > 1:
            return [ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="MULTIPLE_START",
                message=f"Graph has {len(starts)} start steps",
                node_id=starts[1].id,
            )]
        return []

    def _check_duplicate_node_ids(self, graph: Graph) -> List[ValidationIssue]:
        seen_ids: Dict[str, int] = defaultdict(int)
        for node in graph.nodes:
            seen_ids[node.id] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="DUPLICATE_NODE_ID",
                message=f"Duplicate node ID '{node_id}' appears {count} times",
                node_id=node_id,
            )
            for node_id, count in seen_ids.items()
            if count > 1
        ]

    def _check_missing_edge_references(self, graph: Graph, node_ids: Set[str]) -> List[ValidationIssue]:
        issues = []
        for edge in graph.edges:
            if edge.source not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_SOURCE_NODE",
                    message=f"Edge references non-existent source node '{edge.source}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                ))
            if edge.target not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    code="MISSING_TARGET_NODE",
                    message=f"Edge references non-existent target node '{edge.target}'",
                    edge_info=f"{edge.source} -> {edge.target}",
                ))
        return issues

    def _check_self_loops(self, graph: Graph) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="SELF_LOOP",
                message=f"Edge creates self-loop on node '{edge.source}'",
                node_id=edge.source,
                edge_info=f"{edge.source} -> {edge.target}",
            )
            for edge in graph.edges
            if edge.source == edge.target
        ]

    def _check_duplicate_edges(self, graph: Graph) -> List[ValidationIssue]:
        edge_counts: Dict[Tuple[str, str, str], int] = defaultdict(int)
        for edge in graph.edges:
            edge_counts[(edge.source, edge.target, edge.label or "")] += 1
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="DUPLICATE_EDGE",
                message=f"Duplicate edge '{source}' -> '{target}' ({label}) appears {count} times",
                edge_info=f"{source} -> {target}",
            )
            for (source, target, label), count in edge_counts.items()
            if count > 1
        ]

    def _check_decision_options(self, graph: Graph) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="DECISION_WITHOUT_OPTIONS",
                message=f"Decision '{node.label}' has no branch options",
                node_id=node.id,
            )
            for node in graph.nodes
            if node.kind == NodeKind.DECISION and not node.options
        ]

    def _check_orphaned_nodes(self, graph: Graph, node_ids: Set[str]) -> List[ValidationIssue]:
        if len(graph.nodes) < 2:
            return []
        connected = set()
        for edge in graph.edges:
            connected.add(edge.source)
            connected.add(edge.target)
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="ORPHANED_NODE",
                message=f"Node '{node.label}' ({node.id}, kind={node.kind.value}) has no connections",
                node_id=node.id,
            )
            for node in graph.nodes
            if node.id not in connected
        ]


def validate_graph(graph: Graph) -> GraphValidationResult:
    return GraphValidator().validate(graph)
