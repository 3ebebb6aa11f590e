"""Edge constraints for category: thematic."""

from ..classifications import NodeClassifications

EDGE_CONSTRAINTS = {
    "INVOLVES": {
        "valid_source_types": {"Conflict"},
        "valid_target_types": {"Character"},
        "description": "Character is a party to the conflict",
        "examples_valid": ["Conflict:Inheritance | INVOLVES | Character:Alex"],
        "examples_invalid": [],
    },
    "MANIFESTS_IN": {
        "valid_source_types": {"Conflict"},
        "valid_target_types": NodeClassifications.DRAMATIC,
        "description": "Conflict surfaces on screen in a scene",
        "examples_valid": ["Conflict:Inheritance | MANIFESTS_IN | Scene:Reading of the Will"],
        "examples_invalid": [],
    },
    "HAS_ARC": {
        "valid_source_types": {"Character"},
        "valid_target_types": {"CharacterArc"},
        "description": "Character follows an arc",
        "examples_valid": ["Character:Alex | HAS_ARC | CharacterArc:Coward to Hero"],
        "examples_invalid": [],
    },
    "EXPRESSED_IN": {
        "valid_source_types": {"Theme"},
        "valid_target_types": NodeClassifications.DRAMATIC | {"Beat"},
        "description": "Theme is expressed in a scene or a structural beat",
        "examples_valid": [
            "Theme:Loyalty | EXPRESSED_IN | Scene:Betrayal",
            "Theme:Loyalty | EXPRESSED_IN | Beat:ThemeStated",
        ],
        "examples_invalid": [],
    },
    "APPEARS_IN": {
        "valid_source_types": {"Motif"},
        "valid_target_types": NodeClassifications.DRAMATIC,
        "description": "Motif recurs in a scene",
        "examples_valid": ["Motif:Broken Watch | APPEARS_IN | Scene:Funeral"],
        "examples_invalid": [],
    },
}
