# models/__init__.py
"""Export the StoryGraph node and edge models.

This package exposes a stable import surface for the Pydantic models of the
screenplay knowledge graph.
"""

from .kg_models import (
    NODE_MODELS,
    Beat,
    Character,
    CharacterArc,
    Conflict,
    Edge,
    EdgeProperties,
    EdgeProvenance,
    GenreTone,
    GraphNode,
    Idea,
    Location,
    Logline,
    Motif,
    Scene,
    Setting,
    StoryBeat,
    StoryObject,
    StoryVersion,
    Theme,
    node_from_dict,
)

__all__ = [
    "GraphNode",
    "StoryVersion",
    "Beat",
    "StoryBeat",
    "Scene",
    "Character",
    "Location",
    "StoryObject",
    "CharacterArc",
    "Idea",
    "Conflict",
    "Theme",
    "Motif",
    "Logline",
    "Setting",
    "GenreTone",
    "NODE_MODELS",
    "node_from_dict",
    "Edge",
    "EdgeProperties",
    "EdgeProvenance",
]
