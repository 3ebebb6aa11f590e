# core/exceptions.py
"""Define standardized exception types for the StoryGraph core.

This module provides a small exception hierarchy and helpers used across `core/`
and `processing/` to propagate actionable error details without losing the
original exception.

Notes:
    The mention rebuild engine does not raise for missing nodes, empty field lists or
    malformed field values; those are "nothing to do" cases. The types below cover
    caller-side schema enforcement, explicit graph mutations and maintenance tooling.
"""

from typing import Any


class StoryGraphError(Exception):
    """Base exception for all StoryGraph core errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class SchemaDefinitionError(StoryGraphError):
    """The static edge rule table is inconsistent (duplicate or unknown types)."""


class SchemaViolationError(StoryGraphError):
    """An edge's endpoint node types are not permitted by its edge rule."""


class GraphStoreError(StoryGraphError):
    """Errors raised by explicit graph store mutations."""


class NodeNotFoundError(GraphStoreError):
    """A node id required by an explicit operation is not in the graph."""


class DuplicateNodeError(GraphStoreError):
    """A node with the same id already exists in the graph."""


class EntityRenameError(StoryGraphError):
    """Signal that an entity cannot be renamed.

    Raised when the entity does not exist or carries no usable `name`.
    """


class GraphDocumentError(StoryGraphError):
    """A serialized graph document could not be read or parsed."""


def create_error_context(**kwargs: Any) -> dict[str, Any]:
    """Build a context dictionary for structured errors.

    Args:
        **kwargs: Key-value pairs to include.

    Returns:
        A dictionary containing only keys whose values are not `None`.
    """
    return {k: v for k, v in kwargs.items() if v is not None}
