# tests/test_relationship_constraints.py
"""
Test suite for the edge constraint registry.

Tests cover rule completeness, node type compatibility and the detailed
validation helpers used by callers that enforce the schema.
"""

import pytest

from core.exceptions import SchemaViolationError
from core.relationship_constraints import (
    EDGE_CONSTRAINTS,
    EDGE_RULES,
    NodeClassifications,
    assert_edge_allowed,
    get_edge_rule,
    get_node_classifications,
    get_valid_edge_types_for_node_pair,
    is_edge_allowed,
    is_valid_edge_type,
    validate_edge_semantics,
)
from models.kg_constants import EDGE_TYPES, VALID_NODE_TYPES


class TestRuleCompleteness:
    def test_every_edge_type_has_exactly_one_rule(self):
        assert set(EDGE_RULES) == set(EDGE_TYPES)
        assert len(EDGE_RULES) == len(EDGE_TYPES)

    def test_rules_only_reference_known_node_types(self):
        for rule in EDGE_RULES.values():
            assert rule.source <= VALID_NODE_TYPES
            assert rule.target <= VALID_NODE_TYPES
            assert rule.source
            assert rule.target

    def test_plugin_declarations_carry_descriptions(self):
        for edge_type, constraint in EDGE_CONSTRAINTS.items():
            assert constraint["description"], edge_type
            assert EDGE_RULES[edge_type].description == constraint["description"]


class TestNodeClassifications:
    def test_character_is_mentionable_content(self):
        classifications = get_node_classifications("Character")
        assert "MENTIONABLE" in classifications
        assert "CONTENT" in classifications

    def test_object_is_mentionable_but_not_scanned(self):
        classifications = get_node_classifications("Object")
        assert "MENTIONABLE" in classifications
        assert "CONTENT" not in classifications

    def test_scene_is_dramatic(self):
        assert get_node_classifications("Scene") == {"CONTENT", "DRAMATIC"}

    def test_metadata_types(self):
        assert "Logline" in NodeClassifications.METADATA
        assert get_node_classifications("Logline") == {"METADATA"}

    def test_unknown_type_has_no_classifications(self):
        assert get_node_classifications("Spaceship") == set()


class TestRuleLookup:
    def test_known_type(self):
        assert is_valid_edge_type("HAS_CHARACTER")
        rule = get_edge_rule("HAS_CHARACTER")
        assert rule is not None
        assert rule.source == {"Scene"}
        assert rule.target == {"Character"}

    def test_unknown_type(self):
        assert not is_valid_edge_type("KNOWS")
        assert get_edge_rule("KNOWS") is None

    @pytest.mark.parametrize(
        "edge_type,source,target,expected",
        [
            ("HAS_CHARACTER", "Scene", "Character", True),
            ("HAS_CHARACTER", "Character", "Scene", False),
            ("LOCATED_AT", "Scene", "Location", True),
            ("ALIGNS_WITH", "StoryBeat", "Beat", True),
            ("ALIGNS_WITH", "Scene", "Beat", False),
            ("EXPRESSED_IN", "Theme", "Beat", True),
            ("MENTIONS", "Scene", "Object", True),
            ("MENTIONS", "Object", "Character", False),
            ("MENTIONS", "Scene", "Theme", False),
            ("KNOWS", "Character", "Character", False),
        ],
    )
    def test_is_edge_allowed(self, edge_type, source, target, expected):
        assert is_edge_allowed(edge_type, source, target) is expected


class TestSemanticValidation:
    def test_valid_edge(self):
        is_valid, errors = validate_edge_semantics("SATISFIED_BY", "StoryBeat", "Scene")
        assert is_valid
        assert errors == []

    def test_unknown_edge_type(self):
        is_valid, errors = validate_edge_semantics("KNOWS", "Character", "Character")
        assert not is_valid
        assert "Unknown edge type" in errors[0]

    def test_unknown_node_type(self):
        is_valid, errors = validate_edge_semantics("HAS_CHARACTER", "Scene", "Spaceship")
        assert not is_valid
        assert any("Invalid target node type" in e for e in errors)

    def test_both_endpoints_wrong(self):
        is_valid, errors = validate_edge_semantics("HAS_ARC", "Scene", "Theme")
        assert not is_valid
        assert len(errors) == 2

    def test_assert_edge_allowed_raises(self):
        with pytest.raises(SchemaViolationError) as exc_info:
            assert_edge_allowed("LOCATED_AT", "Scene", "Character")
        assert exc_info.value.details["errors"]

    def test_assert_edge_allowed_passes(self):
        assert_edge_allowed("LOCATED_AT", "Scene", "Location")


class TestSuggestions:
    def test_scene_to_character(self):
        assert get_valid_edge_types_for_node_pair("Scene", "Character") == ["HAS_CHARACTER", "MENTIONS"]

    def test_story_beat_to_motif(self):
        assert get_valid_edge_types_for_node_pair("StoryBeat", "Motif") == ["PAYS_OFF", "SETS_UP"]

    def test_no_edges_between_metadata(self):
        assert get_valid_edge_types_for_node_pair("Logline", "Setting") == []
