# models/kg_models.py
"""Define the in-memory node and edge models of the screenplay knowledge graph.

This module provides:
- [`GraphNode`](models/kg_models.py) and one subclass per node type, each carrying the
  type-specific attributes that editing flows read and write.
- [`Edge`](models/kg_models.py), a first-class relationship record with identity,
  optional properties, provenance, lifecycle status and timestamps.

Notes:
- Node `type` is frozen; assigning to it raises a pydantic `ValidationError`.
- Nodes keep unknown attributes (`extra="allow"`) so documents written by newer
  editors survive a load/save round trip.
- Edge field names follow Python conventions; the wire names (`from`, `to`,
  `createdAt`, `matchedText`, ...) are aliases used by `to_dict()`.
- Edge `type` is not checked against the closed set here. Schema checks belong to
  [`core.relationship_constraints`](core/relationship_constraints/__init__.py), and
  legacy records with unrecognised types must still be representable.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.kg_constants import VALID_NODE_TYPES

EdgeStatus = Literal["proposed", "approved", "rejected"]
ProvenanceSource = Literal["human", "extractor", "import"]


class GraphNode(BaseModel):
    """Base model for every node in the graph.

    `id` is unique within a graph. Subclasses pin `type` to their node type.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    type: str = Field(frozen=True)

    @field_validator("type")
    @classmethod
    def _check_node_type(cls, value: str) -> str:
        if value not in VALID_NODE_TYPES:
            raise ValueError(f"Unknown node type: {value}")
        return value

    def get_field(self, name: str) -> Any:
        """Return a declared or extra attribute, or ``None`` when absent."""
        if name in type(self).model_fields:
            return getattr(self, name)
        extra = self.__pydantic_extra__ or {}
        return extra.get(name)

    def set_field(self, name: str, value: Any) -> None:
        """Assign a declared or extra attribute in place."""
        if name in type(self).model_fields:
            setattr(self, name, value)
        elif self.__pydantic_extra__ is not None:
            self.__pydantic_extra__[name] = value
        else:
            setattr(self, name, value)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class StoryVersion(GraphNode):
    type: Literal["StoryVersion"] = Field(default="StoryVersion", frozen=True)
    title: str = ""


class Beat(GraphNode):
    """A structural beat (Save the Cat) with a fixed position in the story."""

    type: Literal["Beat"] = Field(default="Beat", frozen=True)
    beat_type: str
    act: int = 1
    position_index: int
    status: str = "EMPTY"


class StoryBeat(GraphNode):
    type: Literal["StoryBeat"] = Field(default="StoryBeat", frozen=True)
    title: str = ""
    summary: str = ""


class Scene(GraphNode):
    type: Literal["Scene"] = Field(default="Scene", frozen=True)
    heading: str = ""
    scene_overview: str = ""
    key_actions: list[str] = Field(default_factory=list)


class Character(GraphNode):
    """A character. `name` and `aliases` are what other nodes' text refers to."""

    type: Literal["Character"] = Field(default="Character", frozen=True)
    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    description: str = ""
    status: str | None = None


class Location(GraphNode):
    type: Literal["Location"] = Field(default="Location", frozen=True)
    name: str = ""
    description: str = ""


class StoryObject(GraphNode):
    """A prop or other object (node type ``Object``)."""

    type: Literal["Object"] = Field(default="Object", frozen=True)
    name: str = ""
    description: str = ""


class CharacterArc(GraphNode):
    type: Literal["CharacterArc"] = Field(default="CharacterArc", frozen=True)
    start_state: str = ""
    end_state: str = ""
    key_moments: list[str] = Field(default_factory=list)


class Idea(GraphNode):
    type: Literal["Idea"] = Field(default="Idea", frozen=True)
    title: str = ""
    description: str = ""


class Conflict(GraphNode):
    type: Literal["Conflict"] = Field(default="Conflict", frozen=True)
    name: str = ""
    description: str = ""


class Theme(GraphNode):
    type: Literal["Theme"] = Field(default="Theme", frozen=True)
    statement: str = ""


class Motif(GraphNode):
    type: Literal["Motif"] = Field(default="Motif", frozen=True)
    name: str = ""
    description: str = ""


class Logline(GraphNode):
    type: Literal["Logline"] = Field(default="Logline", frozen=True)
    text: str = ""


class Setting(GraphNode):
    type: Literal["Setting"] = Field(default="Setting", frozen=True)
    description: str = ""


class GenreTone(GraphNode):
    type: Literal["GenreTone"] = Field(default="GenreTone", frozen=True)
    genre: str | None = None
    tone: str | None = None
    tone_description: str | None = None


NODE_MODELS: dict[str, type[GraphNode]] = {
    "StoryVersion": StoryVersion,
    "Beat": Beat,
    "StoryBeat": StoryBeat,
    "Scene": Scene,
    "Character": Character,
    "Location": Location,
    "Object": StoryObject,
    "CharacterArc": CharacterArc,
    "Idea": Idea,
    "Conflict": Conflict,
    "Theme": Theme,
    "Motif": Motif,
    "Logline": Logline,
    "Setting": Setting,
    "GenreTone": GenreTone,
}


def node_from_dict(data: Mapping[str, Any]) -> GraphNode:
    """Build the node model matching ``data["type"]``.

    Raises:
        ValueError: If the type is missing or unknown, or the attributes do not
            validate (pydantic's `ValidationError` is a `ValueError`).
    """
    node_type = data.get("type")
    model = NODE_MODELS.get(node_type) if isinstance(node_type, str) else None
    if model is None:
        raise ValueError(f"Unknown node type: {node_type!r}")
    return model.model_validate(dict(data))


class EdgeProperties(BaseModel):
    """Optional edge attributes.

    `field` and `matched_text` are only set on `MENTIONS` edges: the node field the
    mention was found in and the text span that matched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    order: int | None = None
    weight: float | None = None
    confidence: float | None = None
    notes: str | None = None
    field: str | None = None
    matched_text: str | None = Field(default=None, alias="matchedText")


class EdgeProvenance(BaseModel):
    """Who or what created an edge."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    source: ProvenanceSource
    patch_id: str | None = Field(default=None, alias="patchId")
    model: str | None = None
    prompt_hash: str | None = Field(default=None, alias="promptHash")
    created_by: str | None = Field(default=None, alias="createdBy")


class Edge(BaseModel):
    """A first-class directed relationship between two nodes."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    properties: EdgeProperties | None = None
    provenance: EdgeProvenance | None = None
    status: EdgeStatus | None = None
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @property
    def field(self) -> str | None:
        """Source field of a mention edge, if recorded."""
        return self.properties.field if self.properties is not None else None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with wire names, omitting unset optional values."""
        return self.model_dump(by_alias=True, exclude_none=True)
