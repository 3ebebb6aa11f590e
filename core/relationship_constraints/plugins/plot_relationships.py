"""Edge constraints for category: plot."""

from ..classifications import NodeClassifications

EDGE_CONSTRAINTS = {
    "ALIGNS_WITH": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": {"Beat"},
        "description": "Story beat is aligned to a structural beat",
        "examples_valid": ["StoryBeat:Alex quits | ALIGNS_WITH | Beat:Catalyst"],
        "examples_invalid": [],
    },
    "SATISFIED_BY": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": NodeClassifications.DRAMATIC,
        "description": "Story beat is realised by a scene (properties.order sequences scenes)",
        "examples_valid": ["StoryBeat:Alex quits | SATISFIED_BY | Scene:Office"],
        "examples_invalid": [],
    },
    "PRECEDES": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": NodeClassifications.PLOTTING,
        "description": "Causal or temporal ordering between story beats",
        "examples_valid": ["StoryBeat:Alex quits | PRECEDES | StoryBeat:Alex leaves town"],
        "examples_invalid": [],
    },
    "ADVANCES": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": NodeClassifications.DEVELOPMENTAL,
        "description": "Story beat advances a character arc or theme",
        "examples_valid": ["StoryBeat:Alex quits | ADVANCES | CharacterArc:Coward to Hero"],
        "examples_invalid": [],
    },
    "SETS_UP": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": {"Motif"},
        "description": "Story beat plants a motif",
        "examples_valid": ["StoryBeat:Gift | SETS_UP | Motif:Broken Watch"],
        "examples_invalid": [],
    },
    "PAYS_OFF": {
        "valid_source_types": NodeClassifications.PLOTTING,
        "valid_target_types": {"Motif"},
        "description": "Story beat pays off a motif",
        "examples_valid": ["StoryBeat:Finale | PAYS_OFF | Motif:Broken Watch"],
        "examples_invalid": [],
    },
}
