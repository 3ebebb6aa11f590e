# processing/mention_validation.py
"""
Temporal consistency checks built on mentions.

A character is introduced at the earliest story-structure beat where it appears,
either as a scene participant (``HAS_CHARACTER``) or through a mention. Story beats
and scenes that reference a character at an earlier beat are reported.

Beat position comes from ``Beat.position_index``. A StoryBeat reaches its beat via
``ALIGNS_WITH``; a Scene reaches it through the StoryBeat that is ``SATISFIED_BY`` it.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

import structlog

from core.graph_store import GraphStore
from models.kg_constants import EXTRACTABLE_FIELDS, MENTIONS
from processing.mention_extraction import MentionExtractor, default_extractor, extract_text_from_node
from processing.mention_rebuild import build_entity_catalog

logger = structlog.get_logger(__name__)


@dataclass
class TemporalViolation:
    node_id: str
    node_type: str
    mentioned_entity: str
    mentioned_entity_name: str
    at_beat: str
    at_position: int
    introduced_at_beat: str
    introduced_at_position: int
    message: str


def get_beat_order(graph: GraphStore) -> dict[str, int]:
    """Map each Beat id to its position in the story structure."""
    return {beat.id: beat.get_field("position_index") for beat in graph.get_nodes_by_type("Beat")}


def get_aligned_beat(graph: GraphStore, story_beat_id: str) -> str | None:
    """Beat a StoryBeat is aligned with, if any."""
    for edge in graph.get_edges_from(story_beat_id, "ALIGNS_WITH"):
        return edge.to_id
    return None


def get_scene_aligned_beat(graph: GraphStore, scene_id: str) -> str | None:
    """Beat a Scene belongs to, through the StoryBeat it satisfies."""
    for edge in graph.get_edges_to(scene_id, "SATISFIED_BY"):
        return get_aligned_beat(graph, edge.from_id)
    return None


def _beat_for_node(graph: GraphStore, node_id: str, node_type: str) -> str | None:
    if node_type == "StoryBeat":
        return get_aligned_beat(graph, node_id)
    if node_type == "Scene":
        return get_scene_aligned_beat(graph, node_id)
    return None


def format_beat_name(graph: GraphStore, beat_id: str) -> str:
    """Readable beat label: ``BreakIntoTwo`` -> ``Break Into Two``."""
    beat = graph.get_node(beat_id)
    raw = beat.get_field("beat_type") if beat is not None else None
    if not raw:
        raw = beat_id.removeprefix("beat_")
    return re.sub(r"(?<!^)(?=[A-Z])", " ", raw).strip()


def compute_introduction_points(graph: GraphStore) -> dict[str, str]:
    """Earliest beat at which each Character appears.

    Characters that never appear in an aligned scene or story beat are absent from
    the result.
    """
    beat_order = get_beat_order(graph)
    introductions: dict[str, str] = {}

    for character in graph.get_nodes_by_type("Character"):
        earliest_beat = None
        earliest_position = math.inf

        sources = [e.from_id for e in graph.get_edges_to(character.id, "HAS_CHARACTER")]
        sources += [e.from_id for e in graph.get_edges_to(character.id, MENTIONS)]
        for source_id in sources:
            source = graph.get_node(source_id)
            if source is None:
                continue
            beat_id = _beat_for_node(graph, source_id, source.type)
            if beat_id is None:
                continue
            position = beat_order.get(beat_id, math.inf)
            if position < earliest_position:
                earliest_position = position
                earliest_beat = beat_id

        if earliest_beat is not None:
            introductions[character.id] = earliest_beat

    return introductions


def validate_temporal_consistency(
    graph: GraphStore, *, extractor: MentionExtractor | None = None
) -> list[TemporalViolation]:
    """Find story beats and scenes that reference a character before its introduction.

    Text is scanned afresh with the extractor, so the check works on graphs whose
    mention edges are stale.
    """
    extractor = extractor or default_extractor()
    beat_order = get_beat_order(graph)
    introductions = compute_introduction_points(graph)
    catalog = build_entity_catalog(graph)
    names = {entity.id: entity.name for entity in catalog}

    violations: list[TemporalViolation] = []
    for node_type in ("StoryBeat", "Scene"):
        for node in graph.get_nodes_by_type(node_type):
            at_beat = _beat_for_node(graph, node.id, node_type)
            if at_beat is None or at_beat not in beat_order:
                continue
            position = beat_order[at_beat]

            text = extract_text_from_node(node, EXTRACTABLE_FIELDS[node_type])
            reported: set[str] = set()
            for mention in extractor.extract(text, catalog):
                entity_id = mention.entity_id
                intro_beat = introductions.get(entity_id)
                if entity_id in reported or intro_beat is None or intro_beat not in beat_order:
                    continue
                intro_position = beat_order[intro_beat]
                if intro_position <= position:
                    continue

                reported.add(entity_id)
                name = names.get(entity_id, entity_id)
                violations.append(
                    TemporalViolation(
                        node_id=node.id,
                        node_type=node_type,
                        mentioned_entity=entity_id,
                        mentioned_entity_name=name,
                        at_beat=at_beat,
                        at_position=position,
                        introduced_at_beat=intro_beat,
                        introduced_at_position=intro_position,
                        message=(
                            f'"{name}" referenced at {format_beat_name(graph, at_beat)} '
                            f"(position {position}) but introduced at "
                            f"{format_beat_name(graph, intro_beat)} (position {intro_position})"
                        ),
                    )
                )

    if violations:
        logger.warning("Temporal consistency violations found", count=len(violations))
    return violations
