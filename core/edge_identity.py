# core/edge_identity.py
"""Edge identity, deduplication keys and normalization of legacy edge records.

Identity contract:
- Two edges with equal (type, from, to) share one identity key,
  [`edge_key()`](core/edge_identity.py). Mention edges extend the key with their
  source field, [`mention_edge_key()`](core/edge_identity.py), since one node pair may
  be linked from several fields.
- Freshly authored edges receive a random id.
- Legacy records without an id receive a deterministic id derived from the identity
  key only, so normalizing the same record twice (or in another process) cannot
  produce two identities for one logical edge.
"""

from __future__ import annotations

import hashlib
import uuid
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any

import structlog

import config
from models.kg_constants import DEFAULT_EDGE_STATUS, DEFAULT_IMPORT_PROVENANCE, MENTIONS
from models.kg_models import Edge, EdgeProperties, EdgeProvenance

logger = structlog.get_logger(__name__)

Clock = Callable[[], str]

EdgeLike = Edge | Mapping[str, Any]


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _endpoints(edge: EdgeLike) -> tuple[str, str, str]:
    if isinstance(edge, Edge):
        return edge.type, edge.from_id, edge.to_id
    return edge["type"], edge["from"], edge["to"]


def edge_key(edge: EdgeLike) -> str:
    """Deterministic identity key ``"{type}:{from}:{to}"``.

    Accepts an `Edge` or a raw mapping with ``type``/``from``/``to`` keys. No other
    attribute influences the key.
    """
    edge_type, from_id, to_id = _endpoints(edge)
    return f"{edge_type}:{from_id}:{to_id}"


def mention_edge_key(edge: EdgeLike) -> str:
    """Identity key of a mention edge: ``"{type}:{from}:{to}:{field}"``."""
    if isinstance(edge, Edge):
        field = edge.field
    else:
        properties = edge.get("properties") or {}
        field = properties.get("field") if isinstance(properties, Mapping) else None
    return f"{edge_key(edge)}:{field or ''}"


def identity_key(edge: EdgeLike) -> str:
    """The canonical dedup key for any edge (field-extended for mentions)."""
    edge_type = edge.type if isinstance(edge, Edge) else edge["type"]
    if edge_type == MENTIONS:
        return mention_edge_key(edge)
    return edge_key(edge)


def generate_edge_id() -> str:
    """Random, effectively unique id for a newly authored edge."""
    return f"{config.settings.EDGE_ID_PREFIX}{uuid.uuid4()}"


def generate_deterministic_edge_id(edge_type: str, from_id: str, to_id: str) -> str:
    """Stable id derived only from the identity key.

    The key is hashed with SHA-256 and the first 64 bits are kept as 16 hex
    characters, prefixed to mark the id as deterministic.
    """
    key = f"{edge_type}:{from_id}:{to_id}"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
    return f"{config.settings.LEGACY_EDGE_ID_PREFIX}{digest}"


def is_first_class_edge(value: Any) -> bool:
    """Structural check: does this value carry a string ``id``?"""
    if isinstance(value, Edge):
        return True
    if isinstance(value, Mapping):
        return isinstance(value.get("id"), str)
    return isinstance(getattr(value, "id", None), str)


def normalize_edge(partial: EdgeLike, *, clock: Clock | None = None) -> Edge:
    """Turn a partial or legacy edge record into a canonical `Edge`.

    Args:
        partial: `Edge` or mapping with at least ``type``, ``from`` and ``to``; any
            other edge attribute may be present under its wire name.
        clock: Returns the ISO timestamp used when ``createdAt`` is missing.
            Defaults to [`utc_now_iso()`](core/edge_identity.py).

    Returns:
        A fully populated edge. An existing id is kept, otherwise the deterministic
        id is assigned. Provenance defaults to ``{"source": "import"}``, status to
        ``"approved"``.

    Raises:
        KeyError: If ``type``, ``from`` or ``to`` is missing from a mapping.
    """
    record = partial.to_dict() if isinstance(partial, Edge) else dict(partial)
    edge_type, from_id, to_id = _endpoints(record)

    edge_id = record.get("id")
    if not isinstance(edge_id, str) or not edge_id:
        edge_id = generate_deterministic_edge_id(edge_type, from_id, to_id)

    properties = record.get("properties")
    provenance = record.get("provenance") or {"source": DEFAULT_IMPORT_PROVENANCE}
    created_at = record.get("createdAt") or (clock or utc_now_iso)()

    return Edge(
        id=edge_id,
        type=edge_type,
        from_id=from_id,
        to_id=to_id,
        properties=EdgeProperties.model_validate(properties) if properties else None,
        provenance=EdgeProvenance.model_validate(provenance),
        status=record.get("status") or DEFAULT_EDGE_STATUS,
        created_at=created_at,
        updated_at=record.get("updatedAt"),
    )


def dedupe_edges(edges: Iterable[Edge]) -> list[Edge]:
    """Keep the first edge per identity key, preserving order."""
    seen: set[str] = set()
    unique: list[Edge] = []
    dropped = 0
    for edge in edges:
        key = identity_key(edge)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(edge)
    if dropped:
        logger.debug("Dropped duplicate edges", dropped=dropped, kept=len(unique))
    return unique
