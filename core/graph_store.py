# core/graph_store.py
"""In-memory store for the screenplay knowledge graph.

[`GraphStore`](core/graph_store.py) owns the node map and the edge list. Readers go
through the accessor methods; writers go through the mutators, which are the only
code paths that change `edges`. `replace_edges()` swaps the whole edge list in one
assignment, which lets multi-step operations (such as a mention rebuild) compute
their result first and publish it atomically.

The store performs no locking. Callers serialize access to one instance.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from core.edge_identity import dedupe_edges, normalize_edge
from core.exceptions import DuplicateNodeError, GraphDocumentError, NodeNotFoundError
from core.relationship_constraints import validate_edge_semantics
from models.kg_constants import MENTIONS
from models.kg_models import Edge, GraphNode, node_from_dict

logger = structlog.get_logger(__name__)


@dataclass
class GraphStats:
    node_count: int
    edge_count: int
    node_count_by_type: dict[str, int] = field(default_factory=dict)
    edge_count_by_type: dict[str, int] = field(default_factory=dict)


@dataclass
class NodeRemovalResult:
    node_id: str
    edges_removed: int
    mentions_removed: int


@dataclass
class SchemaViolation:
    edge_id: str
    edge_type: str
    errors: list[str]


class GraphStore:
    """Owns the nodes and edges of one story graph."""

    def __init__(
        self,
        nodes: Iterable[GraphNode] | None = None,
        edges: Iterable[Edge] | None = None,
    ) -> None:
        self._nodes: dict[str, GraphNode] = {}
        self._edges: list[Edge] = []
        for node in nodes or ():
            self.add_node(node)
        for edge in edges or ():
            self.add_edge(edge)

    # ------------------------------------------------------------------
    # Node access
    # ------------------------------------------------------------------
    def get_node(self, node_id: str) -> GraphNode | None:
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_nodes_by_type(self, node_type: str) -> list[GraphNode]:
        return [node for node in self._nodes.values() if node.type == node_type]

    def get_all_nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    # ------------------------------------------------------------------
    # Edge access
    # ------------------------------------------------------------------
    @property
    def edges(self) -> tuple[Edge, ...]:
        """Read-only snapshot of the edge list."""
        return tuple(self._edges)

    def get_edges_by_type(self, edge_type: str) -> list[Edge]:
        return [e for e in self._edges if e.type == edge_type]

    def get_edges_from(self, node_id: str, edge_type: str | None = None) -> list[Edge]:
        return [
            e
            for e in self._edges
            if e.from_id == node_id and (edge_type is None or e.type == edge_type)
        ]

    def get_edges_to(self, node_id: str, edge_type: str | None = None) -> list[Edge]:
        return [
            e
            for e in self._edges
            if e.to_id == node_id and (edge_type is None or e.type == edge_type)
        ]

    def has_edge(self, edge_type: str, from_id: str, to_id: str) -> bool:
        return any(
            e.type == edge_type and e.from_id == from_id and e.to_id == to_id
            for e in self._edges
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def add_node(self, node: GraphNode) -> None:
        if node.id in self._nodes:
            raise DuplicateNodeError(f"Node already exists: {node.id}", details={"node_id": node.id})
        self._nodes[node.id] = node

    def remove_node(self, node_id: str) -> NodeRemovalResult:
        """Delete a node together with every edge touching it.

        Mention edges into the node are counted separately so callers can report
        how many derived references were retired.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        if node_id not in self._nodes:
            raise NodeNotFoundError(f"Node not found: {node_id}", details={"node_id": node_id})

        mentions_removed = sum(
            1 for e in self._edges if e.type == MENTIONS and e.to_id == node_id
        )
        edges_removed = self.remove_edges(
            lambda e: e.from_id == node_id or e.to_id == node_id
        )
        del self._nodes[node_id]
        logger.debug(
            "Removed node",
            node_id=node_id,
            edges_removed=edges_removed,
            mentions_removed=mentions_removed,
        )
        return NodeRemovalResult(node_id, edges_removed, mentions_removed)

    def add_edge(self, edge: Edge) -> None:
        self._edges.append(edge)

    def remove_edges(self, predicate: Callable[[Edge], bool]) -> int:
        """Drop every edge matching ``predicate``; return how many were dropped."""
        kept = [e for e in self._edges if not predicate(e)]
        removed = len(self._edges) - len(kept)
        if removed:
            self._edges = kept
        return removed

    def replace_edges(self, edges: Iterable[Edge]) -> None:
        """Swap in a complete new edge list in one step."""
        self._edges = list(edges)

    # ------------------------------------------------------------------
    # Whole-graph helpers
    # ------------------------------------------------------------------
    def clone(self) -> GraphStore:
        """Copy of the store sharing node and edge objects (shallow)."""
        copy = GraphStore()
        copy._nodes = dict(self._nodes)
        copy._edges = list(self._edges)
        return copy

    def stats(self) -> GraphStats:
        node_counts: dict[str, int] = {}
        edge_counts: dict[str, int] = {}
        for node in self._nodes.values():
            node_counts[node.type] = node_counts.get(node.type, 0) + 1
        for edge in self._edges:
            edge_counts[edge.type] = edge_counts.get(edge.type, 0) + 1
        return GraphStats(
            node_count=len(self._nodes),
            edge_count=len(self._edges),
            node_count_by_type=node_counts,
            edge_count_by_type=edge_counts,
        )

    def find_schema_violations(self) -> list[SchemaViolation]:
        """Check every edge against its rule and against dangling endpoints."""
        violations = []
        for edge in self._edges:
            source = self._nodes.get(edge.from_id)
            target = self._nodes.get(edge.to_id)
            if source is None or target is None:
                missing = [n for n, node in ((edge.from_id, source), (edge.to_id, target)) if node is None]
                violations.append(
                    SchemaViolation(edge.id, edge.type, [f"Missing endpoint node: {n}" for n in missing])
                )
                continue
            is_valid, errors = validate_edge_semantics(edge.type, source.type, target.type)
            if not is_valid:
                violations.append(SchemaViolation(edge.id, edge.type, errors))
        return violations

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GraphStore:
        """Load a ``{"nodes": [...], "edges": [...]}`` document.

        Edge records without an id are normalized on load, receiving deterministic
        ids and import provenance. Duplicate records (same identity key) and
        records reusing an id already loaded keep only their first occurrence.

        Raises:
            GraphDocumentError: If the document shape or a record is invalid.
        """
        nodes_data = data.get("nodes", [])
        edges_data = data.get("edges", [])
        if isinstance(nodes_data, Mapping):
            nodes_data = list(nodes_data.values())
        if not isinstance(nodes_data, list) or not isinstance(edges_data, list):
            raise GraphDocumentError("Graph document must hold 'nodes' and 'edges' lists")

        store = cls()
        for raw in nodes_data:
            try:
                store.add_node(node_from_dict(raw))
            except (ValueError, TypeError, AttributeError) as exc:
                raise GraphDocumentError(
                    "Invalid node record", details={"record": raw, "error": str(exc)}
                ) from exc

        legacy = 0
        normalized: list[Edge] = []
        for raw in edges_data:
            try:
                if not isinstance(raw.get("id"), str):
                    legacy += 1
                edge = normalize_edge(raw)
            except (KeyError, ValueError, TypeError, AttributeError) as exc:
                raise GraphDocumentError(
                    "Invalid edge record", details={"record": raw, "error": str(exc)}
                ) from exc
            normalized.append(edge)

        # Re-imported legacy records collapse onto one deterministic id
        seen_ids: set[str] = set()
        dropped = 0
        for edge in dedupe_edges(normalized):
            if edge.id in seen_ids:
                dropped += 1
                continue
            seen_ids.add(edge.id)
            store.add_edge(edge)

        if legacy:
            logger.info("Normalized legacy edges on load", count=legacy)
        if dropped:
            logger.warning("Dropped edges reusing an existing id", count=dropped)
        return store

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "edges": [edge.to_dict() for edge in self._edges],
        }
