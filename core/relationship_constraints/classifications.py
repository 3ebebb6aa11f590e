# core/relationship_constraints/classifications.py
"""Node classifications for the edge constraint system.

Plugins describe permitted endpoints in terms of these groups rather than
repeating literal node-type sets.
"""

from models.kg_constants import EXTRACTABLE_FIELDS, MENTIONABLE_NODE_TYPES


class NodeClassifications:
    """Classification of node types into semantic categories."""

    # Named things that text can refer to
    MENTIONABLE = frozenset(MENTIONABLE_NODE_TYPES)

    # Nodes whose text fields are scanned for mentions
    CONTENT = frozenset(EXTRACTABLE_FIELDS)

    # Story structure and plotting
    STRUCTURAL = frozenset({"Beat", "StoryBeat"})
    PLOTTING = frozenset({"StoryBeat"})

    # Scene-level dramatic units
    DRAMATIC = frozenset({"Scene"})

    # Abstract story material
    THEMATIC = frozenset({"Theme", "Motif", "Conflict"})
    DEVELOPMENTAL = frozenset({"CharacterArc", "Theme"})

    # Story-level metadata that never participates in typed relationships
    METADATA = frozenset({"StoryVersion", "Logline", "Setting", "GenreTone"})


def get_node_classifications(node_type: str) -> set[str]:
    """Get all classifications that apply to a given node type."""
    classifications = set()

    if node_type in NodeClassifications.MENTIONABLE:
        classifications.add("MENTIONABLE")
    if node_type in NodeClassifications.CONTENT:
        classifications.add("CONTENT")
    if node_type in NodeClassifications.STRUCTURAL:
        classifications.add("STRUCTURAL")
    if node_type in NodeClassifications.PLOTTING:
        classifications.add("PLOTTING")
    if node_type in NodeClassifications.DRAMATIC:
        classifications.add("DRAMATIC")
    if node_type in NodeClassifications.THEMATIC:
        classifications.add("THEMATIC")
    if node_type in NodeClassifications.DEVELOPMENTAL:
        classifications.add("DEVELOPMENTAL")
    if node_type in NodeClassifications.METADATA:
        classifications.add("METADATA")

    return classifications
