"""Edge constraints for category: derived mentions."""

from ..classifications import NodeClassifications

EDGE_CONSTRAINTS = {
    "MENTIONS": {
        "valid_source_types": NodeClassifications.CONTENT,
        "valid_target_types": NodeClassifications.MENTIONABLE,
        "description": "Text of the source node refers to a named entity",
        "examples_valid": [
            "Scene:Bar Fight | MENTIONS | Character:Alex",
            "CharacterArc:Coward to Hero | MENTIONS | Location:Dive Bar",
        ],
        "examples_invalid": ["Beat:Catalyst | MENTIONS | Character:Alex"],
    },
}
