# tests/conftest.py
import os
import sys

import pytest

# Ensure repository root is on PYTHONPATH for tests
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from core.graph_store import GraphStore  # noqa: E402
from models.kg_models import (  # noqa: E402
    Beat,
    Character,
    Edge,
    Location,
    Scene,
    StoryBeat,
    StoryObject,
)

FIXED_TIMESTAMP = "2024-01-01T00:00:00+00:00"


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add custom CLI options for this repo.

    --unit-stubs: skip tests marked as heavier (integration, slow) so a quick
    hermetic run stays fast. No-op by default.
    """
    parser.addoption(
        "--unit-stubs",
        action="store_true",
        default=False,
        help="Run only lightweight unit tests; ignore heavier suites.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """When --unit-stubs is passed, skip heavier-marked tests by default."""
    if not config.getoption("--unit-stubs"):
        return

    skip_marker = pytest.mark.skip(reason="skipped by --unit-stubs")
    heavy_markers = {"integration", "slow"}
    for item in items:
        for m in item.iter_markers():
            if m.name in heavy_markers:
                item.add_marker(skip_marker)
                break


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_TIMESTAMP


@pytest.fixture
def empty_graph() -> GraphStore:
    return GraphStore()


@pytest.fixture
def bar_scene_graph() -> GraphStore:
    """A scene mentioning one character twice in the same field."""
    return GraphStore(
        nodes=[
            Scene(id="s1", heading="INT. BAR", scene_overview="Alex confronts Alex's rival."),
            Character(id="c1", name="Alex"),
        ]
    )


def _edge(edge_id: str, edge_type: str, from_id: str, to_id: str) -> Edge:
    return Edge(id=edge_id, type=edge_type, from_id=from_id, to_id=to_id, status="approved")


@pytest.fixture
def story_graph() -> GraphStore:
    """Small story: two beats, two story beats, two scenes, three entities."""
    nodes = [
        Beat(id="beat_OpeningImage", beat_type="OpeningImage", act=1, position_index=1),
        Beat(id="beat_Catalyst", beat_type="Catalyst", act=1, position_index=4),
        StoryBeat(id="sb1", title="Morning routine", summary="Alex opens the bar alone."),
        StoryBeat(id="sb2", title="The offer", summary="Captain James Morrison walks in."),
        Scene(
            id="sc1",
            heading="INT. HARBOR BAR - DAY",
            scene_overview="Alex wipes the counter at the Harbor Bar.",
            key_actions=["Alex pours a drink", "The old compass ticks"],
        ),
        Scene(
            id="sc2",
            heading="EXT. DOCKS - NIGHT",
            scene_overview="Captain Morrison offers Alex a job.",
            key_actions=[],
        ),
        Character(id="c_alex", name="Alex", aliases=["Lexi"], description="A tired bartender."),
        Character(id="c_morrison", name="Captain James Morrison", description="Smuggler."),
        Location(id="loc_bar", name="Harbor Bar", description="A dive by the water."),
        StoryObject(id="obj_compass", name="Compass", description="Brass, dented."),
    ]
    edges = [
        _edge("e1", "ALIGNS_WITH", "sb1", "beat_OpeningImage"),
        _edge("e2", "ALIGNS_WITH", "sb2", "beat_Catalyst"),
        _edge("e3", "SATISFIED_BY", "sb1", "sc1"),
        _edge("e4", "SATISFIED_BY", "sb2", "sc2"),
        _edge("e5", "HAS_CHARACTER", "sc1", "c_alex"),
        _edge("e6", "HAS_CHARACTER", "sc2", "c_morrison"),
        _edge("e7", "LOCATED_AT", "sc1", "loc_bar"),
    ]
    return GraphStore(nodes=nodes, edges=edges)
