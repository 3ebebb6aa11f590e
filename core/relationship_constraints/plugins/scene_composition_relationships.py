"""Edge constraints for category: scene_composition."""

from ..classifications import NodeClassifications

EDGE_CONSTRAINTS = {
    "HAS_CHARACTER": {
        "valid_source_types": NodeClassifications.DRAMATIC,
        "valid_target_types": {"Character"},
        "description": "Character takes part in the scene",
        "examples_valid": ["Scene:Bar Fight | HAS_CHARACTER | Character:Alex"],
        "examples_invalid": ["Character:Alex | HAS_CHARACTER | Scene:Bar Fight"],
    },
    "LOCATED_AT": {
        "valid_source_types": NodeClassifications.DRAMATIC,
        "valid_target_types": {"Location"},
        "description": "Scene takes place at a location",
        "examples_valid": ["Scene:Bar Fight | LOCATED_AT | Location:Dive Bar"],
        "examples_invalid": ["Character:Alex | LOCATED_AT | Location:Dive Bar"],
    },
    "FEATURES_OBJECT": {
        "valid_source_types": NodeClassifications.DRAMATIC,
        "valid_target_types": {"Object"},
        "description": "Object plays a part in the scene",
        "examples_valid": ["Scene:Heist | FEATURES_OBJECT | Object:Locket"],
        "examples_invalid": [],
    },
}
