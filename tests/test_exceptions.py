# tests/test_exceptions.py
from core.exceptions import (
    DuplicateNodeError,
    EntityRenameError,
    GraphDocumentError,
    GraphStoreError,
    NodeNotFoundError,
    SchemaDefinitionError,
    SchemaViolationError,
    StoryGraphError,
    create_error_context,
)


def test_hierarchy():
    for exc_type in (
        SchemaDefinitionError,
        SchemaViolationError,
        GraphStoreError,
        EntityRenameError,
        GraphDocumentError,
    ):
        assert issubclass(exc_type, StoryGraphError)
    assert issubclass(NodeNotFoundError, GraphStoreError)
    assert issubclass(DuplicateNodeError, GraphStoreError)


def test_str_includes_details():
    err = NodeNotFoundError("Node not found: x", details={"node_id": "x"})
    assert str(err) == "Node not found: x (Details: {'node_id': 'x'})"
    assert str(StoryGraphError("plain")) == "plain"
    assert StoryGraphError("plain").details == {}


def test_create_error_context_drops_none():
    assert create_error_context(node_id="x", field=None) == {"node_id": "x"}
