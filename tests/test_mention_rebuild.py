# tests/test_mention_rebuild.py
import pytest

from core.graph_store import GraphStore
from models.kg_models import Character, Edge, EdgeProperties, Location, Scene, StoryObject, Theme
from processing.mention_rebuild import (
    build_entity_catalog,
    get_entity_mentions,
    rebuild_all_mentions,
    rebuild_mentions_for_node,
    remove_mentions_from_node,
    remove_mentions_to_entity,
)
from tests.fakes.fake_extractor import FakeExtractor


def _triples(graph: GraphStore) -> set[tuple[str, str, str | None]]:
    return {(e.from_id, e.to_id, e.field) for e in graph.get_edges_by_type("MENTIONS")}


def _mention(edge_id: str, from_id: str, to_id: str, field: str = "scene_overview") -> Edge:
    return Edge(
        id=edge_id,
        type="MENTIONS",
        from_id=from_id,
        to_id=to_id,
        properties=EdgeProperties(field=field, confidence=1.0, matched_text="x"),
        status="approved",
    )


class TestBarScenario:
    def test_two_occurrences_collapse_into_one_edge(self, bar_scene_graph, fixed_clock):
        result = rebuild_mentions_for_node(bar_scene_graph, "s1", clock=fixed_clock)

        assert result.edges_created == 1
        assert result.edges_removed == 0
        assert result.nodes_processed == ["s1"]

        (edge,) = bar_scene_graph.get_edges_by_type("MENTIONS")
        assert (edge.from_id, edge.to_id, edge.field) == ("s1", "c1", "scene_overview")
        assert edge.properties.confidence == 1.0
        assert edge.properties.matched_text == "Alex"
        assert edge.provenance.source == "extractor"
        assert edge.status == "approved"
        assert edge.created_at == "2024-01-01T00:00:00+00:00"
        assert edge.id.startswith("edge_")

    def test_second_rebuild_replaces(self, bar_scene_graph):
        rebuild_mentions_for_node(bar_scene_graph, "s1")
        result = rebuild_mentions_for_node(bar_scene_graph, "s1")
        assert (result.edges_created, result.edges_removed) == (1, 1)
        assert len(bar_scene_graph.get_edges_by_type("MENTIONS")) == 1


class TestRebuildForNode:
    def test_missing_node_is_a_noop(self, story_graph):
        before = story_graph.edges
        result = rebuild_mentions_for_node(story_graph, "ghost")
        assert (result.edges_created, result.edges_removed, result.nodes_processed) == (0, 0, [])
        assert story_graph.edges == before

    def test_type_without_fields_is_a_noop(self, story_graph):
        story_graph.add_node(Theme(id="t1", statement="Alex learns to trust"))
        result = rebuild_mentions_for_node(story_graph, "t1")
        assert result.nodes_processed == []
        assert not story_graph.get_edges_from("t1")

    def test_matches_in_different_fields_are_separate_edges(self, story_graph):
        rebuild_mentions_for_node(story_graph, "sc1")
        assert _triples(story_graph) == {
            ("sc1", "c_alex", "scene_overview"),
            ("sc1", "c_alex", "key_actions"),
            ("sc1", "loc_bar", "heading"),
            ("sc1", "loc_bar", "scene_overview"),
            ("sc1", "obj_compass", "key_actions"),
        }

    def test_stale_mentions_are_removed(self, bar_scene_graph):
        rebuild_mentions_for_node(bar_scene_graph, "s1")
        bar_scene_graph.get_node("s1").scene_overview = "Nobody is here."
        result = rebuild_mentions_for_node(bar_scene_graph, "s1")
        assert (result.edges_created, result.edges_removed) == (0, 1)
        assert not bar_scene_graph.get_edges_by_type("MENTIONS")

    def test_other_nodes_mentions_untouched(self, story_graph):
        story_graph.add_edge(_mention("keep", "sc2", "c_alex"))
        rebuild_mentions_for_node(story_graph, "sc1")
        assert "keep" in {e.id for e in story_graph.edges}

    def test_non_mention_edges_untouched(self, story_graph):
        structural = [e for e in story_graph.edges if e.type != "MENTIONS"]
        rebuild_mentions_for_node(story_graph, "sc1")
        assert [e for e in story_graph.edges if e.type != "MENTIONS"] == structural

    def test_malformed_fields_are_skipped(self, empty_graph):
        empty_graph.add_node(Character(id="c1", name="Alex"))
        empty_graph.add_node(
            Scene.model_construct(id="s1", type="Scene", heading=None, scene_overview=42, key_actions=["Alex runs", 3])
        )
        result = rebuild_mentions_for_node(empty_graph, "s1")
        assert result.edges_created == 1
        assert _triples(empty_graph) == {("s1", "c1", "key_actions")}

    def test_extractor_failure_leaves_graph_untouched(self, bar_scene_graph):
        rebuild_mentions_for_node(bar_scene_graph, "s1")
        before = bar_scene_graph.edges

        extractor = FakeExtractor()
        extractor.fail_when("confronts")
        with pytest.raises(RuntimeError):
            rebuild_mentions_for_node(bar_scene_graph, "s1", extractor=extractor)
        assert bar_scene_graph.edges == before

    def test_injected_extractor_is_used_per_field(self, bar_scene_graph):
        extractor = FakeExtractor()
        extractor.configure_phrase("c1", "BAR", confidence=0.4)
        result = rebuild_mentions_for_node(bar_scene_graph, "s1", extractor=extractor)

        assert extractor.scanned_texts() == ["INT. BAR", "Alex confronts Alex's rival."]
        assert result.edges_created == 1
        (edge,) = bar_scene_graph.get_edges_by_type("MENTIONS")
        assert edge.field == "heading"
        assert edge.properties.confidence == 0.4


class TestRebuildAll:
    def test_idempotent(self, story_graph):
        first = rebuild_all_mentions(story_graph)
        triples = _triples(story_graph)
        second = rebuild_all_mentions(story_graph)

        assert second.edges_created == first.edges_created
        assert second.edges_removed == first.edges_created
        assert _triples(story_graph) == triples
        assert len(story_graph.get_edges_by_type("MENTIONS")) == len(triples)

    def test_processes_every_content_node(self, story_graph):
        result = rebuild_all_mentions(story_graph)
        assert result.nodes_processed == ["sb1", "sb2", "sc1", "sc2", "c_alex", "c_morrison", "loc_bar"]

    def test_expected_mentions(self, story_graph):
        rebuild_all_mentions(story_graph)
        triples = _triples(story_graph)
        assert ("sb1", "c_alex", "summary") in triples
        assert ("sb2", "c_morrison", "summary") in triples
        assert ("sc2", "c_morrison", "scene_overview") in triples
        assert ("sc2", "c_alex", "scene_overview") in triples

    def test_strips_mentions_of_deleted_text(self, story_graph):
        story_graph.add_edge(_mention("orphan", "sb1", "obj_compass", "title"))
        result = rebuild_all_mentions(story_graph)
        assert result.edges_removed == 1
        assert "orphan" not in {e.id for e in story_graph.edges}

    def test_catalog_built_once(self, story_graph):
        extractor = FakeExtractor()
        rebuild_all_mentions(story_graph, extractor=extractor)
        catalogs = {entities for _, entities in extractor.calls}
        assert len(catalogs) == 1

    def test_empty_graph(self, empty_graph):
        result = rebuild_all_mentions(empty_graph)
        assert (result.edges_created, result.edges_removed, result.nodes_processed) == (0, 0, [])


class TestRemoval:
    def test_remove_from_node(self, story_graph):
        story_graph.add_edge(_mention("m1", "sc1", "c_alex"))
        story_graph.add_edge(_mention("m2", "sc1", "loc_bar"))
        story_graph.add_edge(_mention("m3", "sc2", "c_alex"))
        assert remove_mentions_from_node(story_graph, "sc1") == 2
        assert remove_mentions_from_node(story_graph, "sc1") == 0
        assert {e.id for e in story_graph.get_edges_by_type("MENTIONS")} == {"m3"}
        assert story_graph.has_edge("HAS_CHARACTER", "sc1", "c_alex")

    def test_remove_to_entity(self, story_graph):
        rebuild_all_mentions(story_graph)
        removed = remove_mentions_to_entity(story_graph, "c_alex")
        assert removed > 0
        assert not any(e.type == "MENTIONS" and e.to_id == "c_alex" for e in story_graph.edges)
        assert remove_mentions_to_entity(story_graph, "c_alex") == 0
        assert story_graph.has_edge("HAS_CHARACTER", "sc1", "c_alex")


class TestCatalog:
    def test_order_and_skips(self, empty_graph):
        empty_graph.add_node(StoryObject(id="o1", name="Compass"))
        empty_graph.add_node(Location(id="l1", name="  "))
        empty_graph.add_node(Character(id="c1", name="Alex", aliases=["Lexi", "", "  Al  "]))
        empty_graph.add_node(Location(id="l2", name="Harbor Bar"))

        catalog = build_entity_catalog(empty_graph)
        assert [e.id for e in catalog] == ["c1", "l2", "o1"]
        assert catalog[0].aliases == ("Lexi", "Al")


def test_get_entity_mentions(story_graph):
    rebuild_mentions_for_node(story_graph, "sc1")
    mentions = get_entity_mentions(story_graph, "loc_bar")
    assert {(m.source_id, m.source_type, m.field) for m in mentions} == {
        ("sc1", "Scene", "heading"),
        ("sc1", "Scene", "scene_overview"),
    }
    assert all(m.matched_text.lower() == "harbor bar" for m in mentions)
