"""
Validation module for flow graphs.
"""

from flowgraph.validation.graph_validator import (
    GraphValidationResult,
    GraphValidator,
    ValidationIssue,
    ValidationSeverity,
    validate_graph,
)

__all__ = [
    "GraphValidationResult",
    "GraphValidator",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_graph",
]
