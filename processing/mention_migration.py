# processing/mention_migration.py
"""
Mention migration for stored story graphs.

Rebuilds MENTIONS edges from text content for one story or a batch of stories.
Useful after the first rollout of mention tracking, after bulk imports, or after a
change of the matching policy. Running it twice in a row is a no-op the second time.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from core.graph_store import GraphStore
from models.kg_constants import EXTRACTABLE_FIELDS, MENTIONABLE_NODE_TYPES, MENTIONS
from processing.mention_extraction import MentionExtractor
from processing.mention_rebuild import rebuild_all_mentions

logger = structlog.get_logger(__name__)

# Nodes whose text refers to entities without being an entity themselves
CONTENT_NODE_TYPES: tuple[str, ...] = tuple(
    t for t in EXTRACTABLE_FIELDS if t not in MENTIONABLE_NODE_TYPES
)


@dataclass
class MigrationStats:
    entity_count: int
    content_node_count: int
    existing_mentions_count: int
    needs_migration: bool


@dataclass
class MentionsMigrationResult:
    edges_created: int = 0
    edges_removed: int = 0
    nodes_processed: list[str] = field(default_factory=list)
    migrated: bool = False


@dataclass
class BatchMigrationResult:
    stories_processed: int = 0
    stories_modified: int = 0
    total_edges_created: int = 0
    total_edges_removed: int = 0
    results: dict[str, MentionsMigrationResult] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


def _mention_triples(graph: GraphStore) -> set[tuple[str, str, str | None]]:
    return {(e.from_id, e.to_id, e.field) for e in graph.get_edges_by_type(MENTIONS)}


def needs_mentions_migration(graph: GraphStore) -> bool:
    """True when the graph has entities and content nodes but no mention edges yet."""
    has_entities = any(graph.get_nodes_by_type(t) for t in MENTIONABLE_NODE_TYPES)
    has_content = any(graph.get_nodes_by_type(t) for t in CONTENT_NODE_TYPES)
    has_mentions = bool(graph.get_edges_by_type(MENTIONS))
    return has_entities and has_content and not has_mentions


def get_migration_stats(graph: GraphStore) -> MigrationStats:
    """Describe what a migration would work on, without changing the graph."""
    return MigrationStats(
        entity_count=sum(len(graph.get_nodes_by_type(t)) for t in MENTIONABLE_NODE_TYPES),
        content_node_count=sum(len(graph.get_nodes_by_type(t)) for t in CONTENT_NODE_TYPES),
        existing_mentions_count=len(graph.get_edges_by_type(MENTIONS)),
        needs_migration=needs_mentions_migration(graph),
    )


def migrate_mentions_for_story(
    graph: GraphStore, *, extractor: MentionExtractor | None = None
) -> MentionsMigrationResult:
    """Rebuild all mentions of one story.

    ``migrated`` is set only when the set of (from, to, field) mention triples
    changed, so re-running on an up-to-date graph reports no migration even though
    edges were recreated.
    """
    before = _mention_triples(graph)
    rebuild = rebuild_all_mentions(graph, extractor=extractor)
    after = _mention_triples(graph)
    return MentionsMigrationResult(
        edges_created=rebuild.edges_created,
        edges_removed=rebuild.edges_removed,
        nodes_processed=rebuild.nodes_processed,
        migrated=before != after,
    )


def migrate_mentions_batch(
    graphs: Mapping[str, GraphStore], *, extractor: MentionExtractor | None = None
) -> BatchMigrationResult:
    """Migrate several stories, collecting per-story results and errors.

    A failing story is recorded under ``errors`` and does not stop the batch.
    """
    batch = BatchMigrationResult()
    for story_id, graph in graphs.items():
        try:
            result = migrate_mentions_for_story(graph, extractor=extractor)
        except Exception as e:
            logger.error("Mention migration failed", story_id=story_id, error=str(e), exc_info=True)
            batch.errors[story_id] = str(e)
            continue

        batch.stories_processed += 1
        batch.results[story_id] = result
        batch.total_edges_created += result.edges_created
        batch.total_edges_removed += result.edges_removed
        if result.migrated:
            batch.stories_modified += 1

    logger.info(
        "Mention migration batch complete",
        stories_processed=batch.stories_processed,
        stories_modified=batch.stories_modified,
        errors=len(batch.errors),
    )
    return batch


def format_migration_result(story_id: str, result: MentionsMigrationResult) -> str:
    if not result.migrated:
        return f"{story_id}: No changes (already up to date)"
    return (
        f"{story_id}: +{result.edges_created} / -{result.edges_removed} MENTIONS edges "
        f"({len(result.nodes_processed)} nodes scanned)"
    )
