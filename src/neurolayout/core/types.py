"""
Core type definitions for neurolayout.

Nodes and links arrive from an external graph generator, often as loosely
shaped JSON. Everything in this module normalizes that input once, at
ingestion time, so the simulation only ever sees clamped values, known enum
members and plain string endpoint ids.
"""

import logging
import math
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

logger = logging.getLogger(__name__)

DEFAULT_RADIUS = 15.0


class NodeType(StrEnum):
    """Categories of concept nodes in the knowledge graph."""
    CONCEPT = "concept"
    SKILL = "skill"
    GOAL = "goal"
    MEMORY = "memory"
    HABIT = "habit"
    LOGIC = "logic"


class RelationType(StrEnum):
    """Semantic types of relations between nodes."""
    ASSOCIATION = "association"
    PREREQUISITE = "prerequisite"
    SIMILARITY = "similarity"
    TEMPORAL = "temporal"
    SPATIAL = "spatial"


class PinSource(StrEnum):
    """Who owns a pinned position."""
    DRAG = "drag"
    FIXED = "fixed"


def clamp_unit(value: Any, default: float = 0.0) -> float:
    """Coerce a value into [0, 1], substituting ``default`` for junk."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return max(0.0, min(1.0, number))


def endpoint_id(value: Any) -> str:
    """
    Extract a plain node id from a link endpoint.

    Endpoints may be raw ids, mappings carrying an ``id`` key, or objects
    (such as a Node) exposing an ``id`` attribute.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        if "id" in value:
            return str(value["id"])
        raise ValueError("endpoint mapping has no 'id'")
    if hasattr(value, "id"):
        return str(value.id)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ValueError(f"cannot resolve endpoint id from {type(value).__name__}")


class Pin(BaseModel):
    """
    Explicit position override for a node.

    While a node carries a pin, the simulation never writes its position;
    the pin owner (a drag gesture or the graph author) does.
    """
    x: float
    y: float
    source: PinSource = PinSource.FIXED

    model_config = ConfigDict(frozen=True)


class Node(BaseModel):
    """
    A concept vertex with its simulation state.
    """
    id: str
    label: str = ""
    type: NodeType = NodeType.CONCEPT
    category: str = ""

    # Simulation-owned position and velocity
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0
    pin: Optional[Pin] = None

    radius: float = DEFAULT_RADIUS
    mastery_level: float = Field(default=0.0, alias="masteryLevel")
    activation_level: float = Field(default=0.0, alias="activationLevel")
    cognitive_load: float = Field(default=0.0, alias="cognitiveLoad")
    is_active: bool = Field(default=False, alias="isActive")
    health_score: Optional[float] = Field(default=None, alias="healthScore")

    model_config = ConfigDict(frozen=False, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _pin_from_fixed_coordinates(cls, data: Any) -> Any:
        # Generator output may carry d3-style fx/fy instead of a pin.
        if isinstance(data, Mapping) and data.get("pin") is None:
            fx, fy = data.get("fx"), data.get("fy")
            if fx is not None and fy is not None:
                data = {**data, "pin": {"x": fx, "y": fy, "source": PinSource.FIXED}}
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> NodeType:
        try:
            return NodeType(value)
        except ValueError:
            logger.debug(f"Unknown node type {value!r}, using concept profile")
            return NodeType.CONCEPT

    @field_validator("radius", mode="before")
    @classmethod
    def _positive_radius(cls, value: Any) -> float:
        try:
            radius = float(value)
        except (TypeError, ValueError):
            return DEFAULT_RADIUS
        if not math.isfinite(radius) or radius <= 0:
            return DEFAULT_RADIUS
        return radius

    @field_validator("mastery_level", "activation_level", "cognitive_load", mode="before")
    @classmethod
    def _unit_interval(cls, value: Any) -> float:
        return clamp_unit(value)

    @field_validator("health_score", mode="before")
    @classmethod
    def _optional_unit_interval(cls, value: Any) -> Optional[float]:
        if value is None:
            return None
        return clamp_unit(value)

    @property
    def fx(self) -> Optional[float]:
        return self.pin.x if self.pin else None

    @property
    def fy(self) -> Optional[float]:
        return self.pin.y if self.pin else None

    @property
    def is_pinned(self) -> bool:
        return self.pin is not None

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Node):
            return self.id == other.id
        return False


class Link(BaseModel):
    """
    Typed, weighted relation between two nodes.

    Endpoints are normalized to plain ids on construction.
    """
    id: str = ""
    source: str
    target: str
    type: RelationType = RelationType.ASSOCIATION
    strength: float = 0.5
    confidence: float = 1.0
    weight: float = 1.0
    activation_count: int = Field(default=0, alias="activationCount")

    model_config = ConfigDict(frozen=False, extra="ignore", populate_by_name=True)

    def model_post_init(self, __context) -> None:
        if not self.id:
            object.__setattr__(self, "id", f"{self.source}->{self.target}")

    @field_validator("source", "target", mode="before")
    @classmethod
    def _normalize_endpoint(cls, value: Any) -> str:
        return endpoint_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> RelationType:
        try:
            return RelationType(value)
        except ValueError:
            logger.debug(f"Unknown relation type {value!r}, using association profile")
            return RelationType.ASSOCIATION

    @field_validator("strength", mode="before")
    @classmethod
    def _clamp_strength(cls, value: Any) -> float:
        return clamp_unit(value, default=0.5)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return clamp_unit(value, default=1.0)

    @field_validator("activation_count", mode="before")
    @classmethod
    def _non_negative_count(cls, value: Any) -> int:
        try:
            count = float(value)
        except (TypeError, ValueError):
            return 0
        if not math.isfinite(count):
            return 0
        return max(0, int(count))

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other_end(self, node_id: str) -> Optional[str]:
        """Return the opposite endpoint, or None if the link does not touch node_id."""
        if self.source == node_id:
            return self.target
        if self.target == node_id:
            return self.source
        return None


class NeuralGraph(BaseModel):
    """
    A graph snapshot as produced by the graph generator.

    The aggregate metrics are not interpreted here; they are passed through
    for downstream display.
    """
    nodes: List[Node] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    total_activation_level: float = Field(default=0.0, alias="totalActivationLevel")
    knowledge_health: float = Field(default=0.0, alias="knowledgeHealth")
    cognitive_complexity: float = Field(default=0.0, alias="cognitiveComplexity")
    due_nodes_count: int = Field(default=0, alias="dueNodesCount")
    critical_logic_count: int = Field(default=0, alias="criticalLogicCount")
    last_updated: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="lastUpdated"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NeuralGraph":
        return cls.model_validate(dict(data))

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
