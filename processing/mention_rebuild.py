# processing/mention_rebuild.py
"""
Rebuild and manage MENTIONS edges.

Mention edges are system-owned: a rebuild discards every mention edge leaving the
rebuilt node(s) and recreates them from the current text. Each call computes the
complete replacement edge list first and publishes it with a single
`GraphStore.replace_edges()`, so a failing extractor leaves the graph unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from core.edge_identity import Clock, generate_edge_id, utc_now_iso
from core.graph_store import GraphStore
from models.kg_constants import DEFAULT_EDGE_STATUS, EXTRACTABLE_FIELDS, MENTIONABLE_NODE_TYPES, MENTIONS
from models.kg_models import Edge, EdgeProperties, EdgeProvenance, GraphNode
from processing.mention_extraction import EntityInfo, MentionExtractor, default_extractor
from utils.text_processing import coerce_field_text, normalize_entity_name

logger = structlog.get_logger(__name__)


@dataclass
class MentionRebuildResult:
    edges_created: int = 0
    edges_removed: int = 0
    nodes_processed: list[str] = field(default_factory=list)


@dataclass
class EntityMention:
    """One mention of an entity, as seen from the entity."""

    edge_id: str
    source_id: str
    source_type: str | None
    field: str | None
    matched_text: str | None
    confidence: float | None


def _is_mention_from(node_id: str):
    return lambda e: e.type == MENTIONS and e.from_id == node_id


def remove_mentions_from_node(graph: GraphStore, node_id: str) -> int:
    """Delete every MENTIONS edge whose source is `node_id`; return the count."""
    removed = graph.remove_edges(_is_mention_from(node_id))
    if removed:
        logger.debug("Removed outgoing mentions", node_id=node_id, removed=removed)
    return removed


def remove_mentions_to_entity(graph: GraphStore, entity_id: str) -> int:
    """Delete every MENTIONS edge targeting `entity_id`; return the count."""
    removed = graph.remove_edges(lambda e: e.type == MENTIONS and e.to_id == entity_id)
    if removed:
        logger.debug("Removed incoming mentions", entity_id=entity_id, removed=removed)
    return removed


def build_entity_catalog(graph: GraphStore) -> list[EntityInfo]:
    """Collect every Character, Location and Object with a usable name.

    Order is Characters, then Locations, then Objects, each in graph order.
    """
    catalog: list[EntityInfo] = []
    for node_type in MENTIONABLE_NODE_TYPES:
        for node in graph.get_nodes_by_type(node_type):
            name = normalize_entity_name(node.get_field("name"))
            if not name:
                logger.debug("Skipping entity without a usable name", node_id=node.id, node_type=node_type)
                continue
            raw_aliases = node.get_field("aliases")
            aliases: tuple[str, ...] = ()
            if isinstance(raw_aliases, list | tuple):
                aliases = tuple(a for a in (normalize_entity_name(v) for v in raw_aliases) if a)
            catalog.append(EntityInfo(id=node.id, type=node.type, name=name, aliases=aliases))
    return catalog


def _extract_mention_edges(
    node: GraphNode,
    fields: Sequence[str],
    catalog: Sequence[EntityInfo],
    extractor: MentionExtractor,
    created_at: str,
) -> list[Edge]:
    edges: list[Edge] = []
    seen: set[tuple[str, str]] = set()

    for field_name in fields:
        text = coerce_field_text(node.get_field(field_name))
        if not text:
            continue

        for mention in extractor.extract(text, catalog):
            if (mention.entity_id, field_name) in seen:
                continue
            seen.add((mention.entity_id, field_name))
            edges.append(
                Edge(
                    id=generate_edge_id(),
                    type=MENTIONS,
                    from_id=node.id,
                    to_id=mention.entity_id,
                    properties=EdgeProperties(
                        field=field_name,
                        confidence=mention.confidence,
                        matched_text=mention.matched_text,
                    ),
                    provenance=EdgeProvenance(source="extractor"),
                    status=DEFAULT_EDGE_STATUS,
                    created_at=created_at,
                )
            )
    return edges


def rebuild_mentions_for_node(
    graph: GraphStore,
    node_id: str,
    *,
    extractor: MentionExtractor | None = None,
    clock: Clock | None = None,
) -> MentionRebuildResult:
    """Recompute the MENTIONS edges leaving one node from its current text.

    Args:
        graph: Store to update.
        node_id: Node whose text was edited.
        extractor: Matching policy; defaults to `NameMatchExtractor`.
        clock: Timestamp source for the new edges.

    Returns:
        Counts of created and removed edges. A missing node or a node type without
        extractable fields yields an empty result and leaves the graph untouched.
    """
    node = graph.get_node(node_id)
    if node is None:
        return MentionRebuildResult()

    fields = EXTRACTABLE_FIELDS.get(node.type, ())
    if not fields:
        return MentionRebuildResult()

    extractor = extractor or default_extractor()
    catalog = build_entity_catalog(graph)
    created = _extract_mention_edges(node, fields, catalog, extractor, (clock or utc_now_iso)())

    is_stale = _is_mention_from(node_id)
    kept = [e for e in graph.edges if not is_stale(e)]
    removed = len(graph.edges) - len(kept)
    graph.replace_edges(kept + created)

    logger.debug(
        "Rebuilt mentions for node",
        node_id=node_id,
        edges_created=len(created),
        edges_removed=removed,
    )
    return MentionRebuildResult(edges_created=len(created), edges_removed=removed, nodes_processed=[node_id])


def rebuild_all_mentions(
    graph: GraphStore,
    *,
    extractor: MentionExtractor | None = None,
    clock: Clock | None = None,
) -> MentionRebuildResult:
    """Strip every MENTIONS edge and recreate them from all content nodes.

    The entity catalog is built once and reused for every node. Repeated calls
    without content changes produce the same (from, to, field) triples.
    """
    extractor = extractor or default_extractor()
    catalog = build_entity_catalog(graph)
    created_at = (clock or utc_now_iso)()

    created: list[Edge] = []
    processed: list[str] = []
    for node in graph.get_all_nodes():
        fields = EXTRACTABLE_FIELDS.get(node.type, ())
        if not fields:
            continue
        processed.append(node.id)
        created.extend(_extract_mention_edges(node, fields, catalog, extractor, created_at))

    kept = [e for e in graph.edges if e.type != MENTIONS]
    removed = len(graph.edges) - len(kept)
    graph.replace_edges(kept + created)

    logger.info(
        "Rebuilt all mentions",
        edges_created=len(created),
        edges_removed=removed,
        nodes_processed=len(processed),
        entities=len(catalog),
    )
    return MentionRebuildResult(edges_created=len(created), edges_removed=removed, nodes_processed=processed)


def get_entity_mentions(graph: GraphStore, entity_id: str) -> list[EntityMention]:
    """List the mention edges pointing at an entity, in edge order."""
    mentions = []
    for edge in graph.get_edges_to(entity_id, MENTIONS):
        source = graph.get_node(edge.from_id)
        props = edge.properties
        mentions.append(
            EntityMention(
                edge_id=edge.id,
                source_id=edge.from_id,
                source_type=source.type if source is not None else None,
                field=props.field if props is not None else None,
                matched_text=props.matched_text if props is not None else None,
                confidence=props.confidence if props is not None else None,
            )
        )
    return mentions
