# tests/test_mention_validation.py
import pytest

from models.kg_models import Edge, Scene, StoryBeat
from processing.mention_rebuild import rebuild_all_mentions
from processing.mention_validation import (
    compute_introduction_points,
    format_beat_name,
    get_aligned_beat,
    get_beat_order,
    get_scene_aligned_beat,
    validate_temporal_consistency,
)
from tests.fakes.fake_extractor import FakeExtractor


@pytest.fixture
def early_reference_graph(story_graph):
    """Morrison is named in the opening beat but only appears at the catalyst."""
    story_graph.add_node(StoryBeat(id="sb0", title="Cold open", summary="A radio calls for Captain Morrison."))
    story_graph.add_edge(Edge(id="e_sb0", type="ALIGNS_WITH", from_id="sb0", to_id="beat_OpeningImage"))
    return story_graph


def test_beat_order(story_graph):
    assert get_beat_order(story_graph) == {"beat_OpeningImage": 1, "beat_Catalyst": 4}


def test_alignment_lookups(story_graph):
    assert get_aligned_beat(story_graph, "sb2") == "beat_Catalyst"
    assert get_aligned_beat(story_graph, "sc1") is None
    assert get_scene_aligned_beat(story_graph, "sc1") == "beat_OpeningImage"
    assert get_scene_aligned_beat(story_graph, "sb1") is None


def test_format_beat_name(story_graph):
    assert format_beat_name(story_graph, "beat_OpeningImage") == "Opening Image"
    assert format_beat_name(story_graph, "beat_BreakIntoTwo") == "Break Into Two"


def test_introduction_points_from_participation(story_graph):
    assert compute_introduction_points(story_graph) == {
        "c_alex": "beat_OpeningImage",
        "c_morrison": "beat_Catalyst",
    }


def test_mentions_count_as_introduction(early_reference_graph):
    rebuild_all_mentions(early_reference_graph)
    assert compute_introduction_points(early_reference_graph)["c_morrison"] == "beat_OpeningImage"


def test_characters_never_placed_are_absent(story_graph):
    story_graph.remove_edges(lambda e: e.type == "SATISFIED_BY")
    assert compute_introduction_points(story_graph) == {}


def test_consistent_story_has_no_violations(story_graph):
    assert validate_temporal_consistency(story_graph) == []


def test_reference_before_introduction(early_reference_graph):
    (violation,) = validate_temporal_consistency(early_reference_graph)
    assert violation.node_id == "sb0"
    assert violation.node_type == "StoryBeat"
    assert violation.mentioned_entity == "c_morrison"
    assert violation.mentioned_entity_name == "Captain James Morrison"
    assert (violation.at_beat, violation.at_position) == ("beat_OpeningImage", 1)
    assert (violation.introduced_at_beat, violation.introduced_at_position) == ("beat_Catalyst", 4)
    assert violation.message == (
        '"Captain James Morrison" referenced at Opening Image (position 1) '
        "but introduced at Catalyst (position 4)"
    )


def test_scene_violation_reported_once_per_entity(early_reference_graph):
    early_reference_graph.add_node(
        Scene(id="sc0", heading="INT. RADIO ROOM", scene_overview="Morrison! Morrison! Captain Morrison!")
    )
    early_reference_graph.add_edge(Edge(id="e_sc0", type="SATISFIED_BY", from_id="sb1", to_id="sc0"))
    violations = [v for v in validate_temporal_consistency(early_reference_graph) if v.node_id == "sc0"]
    assert len(violations) == 1
    assert violations[0].node_type == "Scene"


def test_unaligned_nodes_are_skipped(early_reference_graph):
    early_reference_graph.remove_edges(lambda e: e.id == "e_sb0")
    assert validate_temporal_consistency(early_reference_graph) == []


def test_injected_extractor(early_reference_graph):
    extractor = FakeExtractor()
    assert validate_temporal_consistency(early_reference_graph, extractor=extractor) == []
    assert extractor.calls
