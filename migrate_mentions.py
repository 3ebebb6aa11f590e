#!/usr/bin/env python3
"""
Migration script to (re)build MENTIONS edges for stored stories.

Each story lives in its own directory holding a graph document:

    <data-dir>/<story-id>/graph.json

The document is a plain ``{"nodes": [...], "edges": [...]}`` object. Legacy edges
without ids are normalized on load (deterministic ids, import provenance), so
running the migration twice never produces two identities for one edge.

This migration:
1. Loads every story graph (or the one named with --story)
2. Reports entity, content node and existing mention counts
3. Rebuilds all MENTIONS edges from the current text
4. Writes the updated document back in place

Usage:
------
    python migrate_mentions.py [--data-dir DIR] [--story ID] [--dry-run] [--verbose]

Options:
    --dry-run    Show what would be migrated without making changes
"""

import argparse
import json
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import structlog

import config
from core.exceptions import GraphDocumentError, StoryGraphError
from core.graph_store import GraphStore
from core.logging_config import setup_storygraph_logging
from processing.mention_migration import (
    format_migration_result,
    get_migration_stats,
    migrate_mentions_batch,
)

logger = structlog.get_logger(__name__)


def discover_stories(data_dir: Path, story: str | None = None) -> dict[str, Path]:
    """Map story ids to their graph document paths."""
    document_name = config.settings.GRAPH_DOCUMENT_FILE
    if story is not None:
        path = data_dir / story / document_name
        return {story: path} if path.is_file() else {}
    if not data_dir.is_dir():
        return {}
    return {
        entry.name: entry / document_name
        for entry in sorted(data_dir.iterdir())
        if entry.is_dir() and (entry / document_name).is_file()
    }


def load_graph(path: Path) -> GraphStore:
    """Read one graph document.

    Raises:
        GraphDocumentError: If the file cannot be read or parsed.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise GraphDocumentError(f"Cannot read graph document {path}", details={"error": str(e)}) from e
    if not isinstance(data, dict):
        raise GraphDocumentError(f"Graph document {path} is not a JSON object")
    return GraphStore.from_dict(data)


def save_graph(graph: GraphStore, path: Path) -> None:
    """Write a graph document, replacing the old file only once fully written."""
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(graph.to_dict(), f, indent=2, ensure_ascii=False)
    os.replace(tmp_path, path)


def main(argv: list[str] | None = None) -> int:
    """Main migration function."""
    parser = argparse.ArgumentParser(description="Rebuild MENTIONS edges for stored story graphs")
    parser.add_argument(
        "--data-dir",
        default=config.settings.GRAPH_DATA_DIR,
        help="Directory holding one sub-directory per story",
    )
    parser.add_argument("--story", help="Only migrate this story id")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be migrated without making changes",
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-story details")
    args = parser.parse_args(argv)

    setup_storygraph_logging()
    data_dir = Path(args.data_dir)
    logger.info("Starting mention migration", data_dir=str(data_dir), dry_run=args.dry_run, story=args.story)

    paths = discover_stories(data_dir, args.story)
    if not paths:
        logger.warning("No story graphs found", data_dir=str(data_dir), story=args.story)
        return 1 if args.story else 0

    graphs: dict[str, GraphStore] = {}
    load_errors: dict[str, str] = {}
    for story_id, path in paths.items():
        try:
            graphs[story_id] = load_graph(path)
        except StoryGraphError as e:
            logger.error("Failed to load story graph", story_id=story_id, error=str(e))
            load_errors[story_id] = str(e)

    for story_id, graph in graphs.items():
        stats = get_migration_stats(graph)
        if args.verbose or args.dry_run:
            logger.info(
                "Story mention stats",
                story_id=story_id,
                entities=stats.entity_count,
                content_nodes=stats.content_node_count,
                existing_mentions=stats.existing_mentions_count,
                needs_migration=stats.needs_migration,
            )

    if args.dry_run:
        needing = sum(1 for g in graphs.values() if get_migration_stats(g).needs_migration)
        logger.info(f"Dry run complete. {needing} of {len(graphs)} stories have no mentions yet.")
        return 1 if load_errors else 0

    batch = migrate_mentions_batch(graphs)
    errors = {**load_errors, **batch.errors}

    for story_id, result in batch.results.items():
        if args.verbose:
            logger.info(format_migration_result(story_id, result))
        # Written even when unchanged so normalized legacy edges are persisted
        try:
            save_graph(graphs[story_id], paths[story_id])
        except OSError as e:
            logger.error("Failed to write story graph", story_id=story_id, error=str(e))
            errors[story_id] = str(e)

    logger.info(
        "Migration summary",
        stories_processed=batch.stories_processed,
        stories_modified=batch.stories_modified,
        edges_created=batch.total_edges_created,
        edges_removed=batch.total_edges_removed,
        errors=len(errors),
    )
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
