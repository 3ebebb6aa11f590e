# processing/mention_rename.py
"""Entity renaming with propagation into the text that mentions the entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

import config
from core.exceptions import EntityRenameError
from core.graph_store import GraphStore
from models.kg_constants import EXTRACTABLE_FIELDS, MENTIONS
from processing.mention_extraction import MentionExtractor
from processing.mention_rebuild import rebuild_all_mentions
from utils.text_processing import replace_whole_word, truncate_for_log

logger = structlog.get_logger(__name__)


@dataclass
class TextUpdate:
    node_id: str
    node_type: str
    field: str
    old_value: Any
    new_value: Any
    match_count: int


@dataclass
class RenameResult:
    entity_id: str
    old_name: str
    new_name: str
    text_updates: list[TextUpdate] = field(default_factory=list)
    total_replacements: int = 0
    mentions_updated: int = 0
    mentions_rebuilt: bool = False


def _rewrite_value(value: Any, old_name: str, new_name: str) -> tuple[Any, int]:
    if isinstance(value, str):
        return replace_whole_word(value, old_name, new_name)
    if isinstance(value, list):
        count = 0
        rewritten = []
        for item in value:
            if isinstance(item, str):
                item, n = replace_whole_word(item, old_name, new_name)
                count += n
            rewritten.append(item)
        return rewritten, count
    return value, 0


def _needs_rebuild(old_name: str, new_name: str) -> bool:
    return len(old_name) != len(new_name) or len(old_name.split()) != len(new_name.split())


def rename_entity(
    graph: GraphStore,
    entity_id: str,
    new_name: str,
    *,
    extractor: MentionExtractor | None = None,
) -> RenameResult:
    """Rename an entity and rewrite the text of every node that mentions it.

    Only the extractable fields of mentioning nodes are rewritten, using
    case-sensitive whole-word replacement (possessives included). The
    ``matched_text`` of the entity's mention edges is updated. When the
    new name differs in length or word count, stored match offsets and name-part
    variants may no longer line up, so all mentions are rebuilt.

    Raises:
        EntityRenameError: If the entity does not exist or has no name.
    """
    node = graph.get_node(entity_id)
    if node is None:
        raise EntityRenameError(f"Entity not found: {entity_id}", details={"entity_id": entity_id})

    old_name = node.get_field("name")
    if not isinstance(old_name, str) or not old_name:
        raise EntityRenameError(
            f"Entity {entity_id} has no name field",
            details={"entity_id": entity_id, "node_type": node.type},
        )

    result = RenameResult(entity_id=entity_id, old_name=old_name, new_name=new_name)
    if old_name == new_name:
        return result

    node.set_field("name", new_name)

    mentioning_sources = list(dict.fromkeys(e.from_id for e in graph.get_edges_to(entity_id, MENTIONS)))
    for source_id in mentioning_sources:
        source = graph.get_node(source_id)
        if source is None:
            continue
        for field_name in EXTRACTABLE_FIELDS.get(source.type, ()):
            value = source.get_field(field_name)
            new_value, count = _rewrite_value(value, old_name, new_name)
            if not count:
                continue
            source.set_field(field_name, new_value)
            logger.debug(
                "Rewrote entity name in text",
                node_id=source_id,
                field=field_name,
                matches=count,
                text=truncate_for_log(str(new_value)),
            )
            result.text_updates.append(
                TextUpdate(source_id, source.type, field_name, value, new_value, count)
            )
            result.total_replacements += count

    updated_edges = []
    for edge in graph.edges:
        props = edge.properties
        if edge.type == MENTIONS and edge.to_id == entity_id and props is not None and props.matched_text:
            new_text, count = replace_whole_word(props.matched_text, old_name, new_name)
            if count:
                edge = edge.model_copy(
                    update={"properties": props.model_copy(update={"matched_text": new_text})}
                )
                result.mentions_updated += 1
        updated_edges.append(edge)
    graph.replace_edges(updated_edges)

    if config.settings.RENAME_FORCE_REBUILD or _needs_rebuild(old_name, new_name):
        rebuild_all_mentions(graph, extractor=extractor)
        result.mentions_rebuilt = True

    logger.info(
        "Renamed entity",
        entity_id=entity_id,
        old_name=old_name,
        new_name=new_name,
        text_updates=len(result.text_updates),
        total_replacements=result.total_replacements,
        mentions_rebuilt=result.mentions_rebuilt,
    )
    return result
