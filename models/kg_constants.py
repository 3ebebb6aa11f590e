# models/kg_constants.py
"""
Constants describing the canonical schema of the screenplay knowledge graph.

**Schema policy (contract):**

- **Node types (STRICT, closed):** every node carries a `type` drawn from
  [`NODE_TYPES`](models/kg_constants.py). The type is fixed at creation time.

- **Edge types (STRICT, closed):** every edge carries a `type` drawn from
  [`EDGE_TYPES`](models/kg_constants.py). Each edge type has exactly one rule in
  [`core.relationship_constraints.EDGE_RULES`](core/relationship_constraints/__init__.py:1)
  naming its permitted source and target node types.

- **Mentions are system-owned:** `MENTIONS` edges are derived from node text by the
  rebuild engine and may be discarded and recreated at any time.
"""

# --- Node types ---
NODE_TYPES: tuple[str, ...] = (
    "StoryVersion",
    "Beat",
    "StoryBeat",
    "Scene",
    "Character",
    "Location",
    "Object",
    "CharacterArc",
    "Idea",
    "Conflict",
    "Theme",
    "Motif",
    "Logline",
    "Setting",
    "GenreTone",
)

VALID_NODE_TYPES: frozenset[str] = frozenset(NODE_TYPES)

# Node types that can be referred to by name from other nodes' text
MENTIONABLE_NODE_TYPES: tuple[str, ...] = ("Character", "Location", "Object")

# Story structure (Save the Cat) beat names, in position order
BEAT_TYPES: tuple[str, ...] = (
    "OpeningImage",
    "ThemeStated",
    "Setup",
    "Catalyst",
    "Debate",
    "BreakIntoTwo",
    "BStory",
    "FunAndGames",
    "Midpoint",
    "BadGuysCloseIn",
    "AllIsLost",
    "DarkNightOfSoul",
    "BreakIntoThree",
    "Finale",
    "FinalImage",
)

# --- Edge types ---
# Scene composition
SCENE_COMPOSITION_EDGES = {
    "HAS_CHARACTER",  # Scene -> Character
    "LOCATED_AT",  # Scene -> Location
    "FEATURES_OBJECT",  # Scene -> Object
}

# Conflict, character and theme structure
THEMATIC_EDGES = {
    "INVOLVES",  # Conflict -> Character
    "MANIFESTS_IN",  # Conflict -> Scene
    "HAS_ARC",  # Character -> CharacterArc
    "EXPRESSED_IN",  # Theme -> Scene | Beat
    "APPEARS_IN",  # Motif -> Scene
}

# Story beat plotting
PLOT_EDGES = {
    "ALIGNS_WITH",  # StoryBeat -> Beat
    "SATISFIED_BY",  # StoryBeat -> Scene (properties.order sequences scenes)
    "PRECEDES",  # StoryBeat -> StoryBeat (causal/temporal chain)
    "ADVANCES",  # StoryBeat -> CharacterArc | Theme
    "SETS_UP",  # StoryBeat -> Motif
    "PAYS_OFF",  # StoryBeat -> Motif
}

# Derived from text content
DERIVED_EDGES = {
    "MENTIONS",  # content node -> Character | Location | Object
}

EDGE_CATEGORIES = {
    "scene_composition": SCENE_COMPOSITION_EDGES,
    "thematic": THEMATIC_EDGES,
    "plot": PLOT_EDGES,
    "derived": DERIVED_EDGES,
}

EDGE_TYPES: tuple[str, ...] = tuple(
    sorted(edge_type for category in EDGE_CATEGORIES.values() for edge_type in category)
)

MENTIONS = "MENTIONS"

# --- Edge lifecycle and provenance (allowed values: EdgeStatus, ProvenanceSource in kg_models) ---
DEFAULT_EDGE_STATUS = "approved"
DEFAULT_IMPORT_PROVENANCE = "import"

# --- Mention scanning ---
# Text-bearing fields scanned for entity mentions, by node type (ordered).
# Types absent from this map are never scanned.
EXTRACTABLE_FIELDS: dict[str, tuple[str, ...]] = {
    "StoryBeat": ("title", "summary"),
    "Scene": ("heading", "scene_overview", "key_actions"),
    "Character": ("description",),
    "Location": ("description",),
    "CharacterArc": ("start_state", "end_state", "key_moments"),
    "Idea": ("title", "description"),
}

# Honorifics recognised when building "Title Surname" name variants
NAME_TITLES: tuple[str, ...] = (
    "Captain",
    "Sergeant",
    "Detective",
    "Dr.",
    "Mr.",
    "Mrs.",
    "Ms.",
)
