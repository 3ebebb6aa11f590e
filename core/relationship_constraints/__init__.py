"""Edge constraint system with plugin-based categories.

Every edge type in [`EDGE_TYPES`](models/kg_constants.py) has exactly one rule,
declared in one of the modules under `plugins/`. The table is assembled once at
import time and checked for completeness; a broken table raises
`SchemaDefinitionError` instead of yielding a partially populated registry.

The core never rejects edges on its own. Callers enforce the rules with
[`is_edge_allowed()`](core/relationship_constraints/__init__.py) or
[`assert_edge_allowed()`](core/relationship_constraints/__init__.py).
"""

from __future__ import annotations

import importlib
import pkgutil
from dataclasses import dataclass
from typing import Any

import structlog

from core.exceptions import SchemaDefinitionError, SchemaViolationError, create_error_context
from models.kg_constants import EDGE_TYPES, VALID_NODE_TYPES

from .classifications import NodeClassifications, get_node_classifications

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EdgeRule:
    """Permitted source and target node types for one edge type."""

    source: frozenset[str]
    target: frozenset[str]
    description: str = ""

    def allows(self, source_type: str, target_type: str) -> bool:
        return source_type in self.source and target_type in self.target


# Raw plugin declarations, keyed by edge type
EDGE_CONSTRAINTS: dict[str, dict[str, Any]] = {}

# Rule table built from the plugin declarations
EDGE_RULES: dict[str, EdgeRule] = {}


def _load_plugins() -> None:
    """Load all edge constraint plugins and build the rule table."""
    package = f"{__name__}.plugins"
    pkg = importlib.import_module(package)

    for _, module_name, _ in pkgutil.iter_modules(pkg.__path__):
        module = importlib.import_module(f"{package}.{module_name}")
        constraints = getattr(module, "EDGE_CONSTRAINTS", {})
        for edge_type, constraint in constraints.items():
            if edge_type in EDGE_CONSTRAINTS:
                raise SchemaDefinitionError(
                    f"Edge type {edge_type} declared more than once",
                    details=create_error_context(edge_type=edge_type, plugin=module_name),
                )
            EDGE_CONSTRAINTS[edge_type] = constraint
        logger.debug("Loaded edge constraints", plugin=module_name, count=len(constraints))

    for edge_type, constraint in EDGE_CONSTRAINTS.items():
        if edge_type not in EDGE_TYPES:
            raise SchemaDefinitionError(
                f"Constraint declared for unknown edge type {edge_type}",
                details={"edge_type": edge_type},
            )
        source = frozenset(constraint["valid_source_types"])
        target = frozenset(constraint["valid_target_types"])
        unknown = (source | target) - VALID_NODE_TYPES
        if unknown:
            raise SchemaDefinitionError(
                f"Rule for {edge_type} references unknown node types",
                details={"edge_type": edge_type, "unknown": sorted(unknown)},
            )
        EDGE_RULES[edge_type] = EdgeRule(
            source=source,
            target=target,
            description=constraint.get("description", ""),
        )

    missing = set(EDGE_TYPES) - set(EDGE_RULES)
    if missing:
        raise SchemaDefinitionError(
            "Edge types without a rule",
            details={"missing": sorted(missing)},
        )


_load_plugins()


def is_valid_edge_type(edge_type: str) -> bool:
    """Check membership in the closed edge-type set."""
    return edge_type in EDGE_RULES


def get_edge_rule(edge_type: str) -> EdgeRule | None:
    """Return the rule for a known edge type.

    Unknown types return ``None``; callers are expected to check
    [`is_valid_edge_type()`](core/relationship_constraints/__init__.py) first.
    """
    return EDGE_RULES.get(edge_type)


def is_edge_allowed(edge_type: str, source_type: str, target_type: str) -> bool:
    """Check if an edge type may connect the given node types."""
    rule = EDGE_RULES.get(edge_type)
    if rule is None:
        return False
    return rule.allows(source_type, target_type)


def get_valid_edge_types_for_node_pair(source_type: str, target_type: str) -> list[str]:
    """Get all edge types permitted between two node types, sorted by name."""
    return sorted(
        edge_type
        for edge_type, rule in EDGE_RULES.items()
        if rule.allows(source_type, target_type)
    )


def validate_edge_semantics(
    edge_type: str, source_type: str, target_type: str
) -> tuple[bool, list[str]]:
    """Edge validation with detailed error messages."""
    errors = []

    if edge_type not in EDGE_RULES:
        errors.append(f"Unknown edge type: {edge_type}")
        return False, errors

    if source_type not in VALID_NODE_TYPES:
        errors.append(f"Invalid source node type: {source_type}")
    if target_type not in VALID_NODE_TYPES:
        errors.append(f"Invalid target node type: {target_type}")

    if errors:
        return False, errors

    rule = EDGE_RULES[edge_type]
    if source_type not in rule.source:
        errors.append(
            f"Invalid source type '{source_type}' for edge '{edge_type}'. "
            f"Valid sources: {sorted(rule.source)}"
        )
    if target_type not in rule.target:
        errors.append(
            f"Invalid target type '{target_type}' for edge '{edge_type}'. "
            f"Valid targets: {sorted(rule.target)}"
        )

    return len(errors) == 0, errors


def assert_edge_allowed(edge_type: str, source_type: str, target_type: str) -> None:
    """Raise `SchemaViolationError` when the edge breaks its rule."""
    is_valid, errors = validate_edge_semantics(edge_type, source_type, target_type)
    if not is_valid:
        raise SchemaViolationError(
            f"{source_type} -{edge_type}-> {target_type} is not permitted",
            details={"errors": errors},
        )


__all__ = [
    "EDGE_CONSTRAINTS",
    "EDGE_RULES",
    "EdgeRule",
    "NodeClassifications",
    "assert_edge_allowed",
    "get_edge_rule",
    "get_node_classifications",
    "get_valid_edge_types_for_node_pair",
    "is_edge_allowed",
    "is_valid_edge_type",
    "validate_edge_semantics",
]
