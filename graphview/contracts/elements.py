"""
Element Contracts

Raw inputs supplied by the caller and resolved, render-ready outputs.

OWNERSHIP:
==========
- RawNode / RawEdge belong to the caller and are never mutated
- GraphStoreNode / GraphStoreEdge belong to the graph store
- ResolvedNode / ResolvedEdge / GraphSnapshot are produced fresh by every
  projection and shared read-only with renderers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union


def _frozen_mapping(value: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


_EMPTY: Mapping[str, Any] = MappingProxyType({})


# =============================================================================
# RAW INPUTS
# =============================================================================

@dataclass(frozen=True)
class RawNode:
    """
    Caller-supplied node.

    attributes may hold fill, icon, label, size, cluster and a nested
    `data` mapping. attributes=None marks a structural placeholder that
    carries no payload and never reaches the projection output.
    """
    id: str
    attributes: Optional[Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self):
        if self.attributes is not None:
            object.__setattr__(self, "attributes", _frozen_mapping(self.attributes))

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> RawNode:
        """Build from the dict form {"id": ..., **attributes}."""
        attributes = {k: v for k, v in raw.items() if k != "id"}
        return RawNode(id=raw["id"], attributes=attributes)

    @property
    def has_payload(self) -> bool:
        return self.attributes is not None

    def get(self, key: str, default: Any = None) -> Any:
        if self.attributes is None:
            return default
        return self.attributes.get(key, default)

    @property
    def nested_data(self) -> Mapping[str, Any]:
        nested = self.get("data")
        return nested if isinstance(nested, Mapping) else _EMPTY


@dataclass(frozen=True)
class RawEdge:
    """Caller-supplied directed edge. attributes may hold id, label, size, data."""
    source: str
    target: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attributes", _frozen_mapping(self.attributes))

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> RawEdge:
        """Build from the dict form {"source": ..., "target": ..., **attributes}."""
        attributes = {k: v for k, v in raw.items() if k not in ("source", "target")}
        return RawEdge(source=raw["source"], target=raw["target"], attributes=attributes)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    @property
    def nested_data(self) -> Mapping[str, Any]:
        nested = self.get("data")
        return nested if isinstance(nested, Mapping) else _EMPTY


NodeInput = Union[RawNode, Mapping[str, Any]]
EdgeInput = Union[RawEdge, Mapping[str, Any]]


def as_raw_node(value: NodeInput) -> RawNode:
    return value if isinstance(value, RawNode) else RawNode.from_mapping(value)


def as_raw_edge(value: EdgeInput) -> RawEdge:
    return value if isinstance(value, RawEdge) else RawEdge.from_mapping(value)


# =============================================================================
# GRAPH STORE RECORDS
# =============================================================================

@dataclass(frozen=True)
class GraphStoreNode:
    """Node held by the graph store. data is None for placeholders."""
    id: str
    data: Optional[RawNode]


@dataclass(frozen=True)
class GraphStoreEdge:
    """Link held by the graph store. Both endpoints exist in the store."""
    from_id: str
    to_id: str
    data: RawEdge


# =============================================================================
# RESOLVED OUTPUTS
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    Point in the shared 3D coordinate space.
    2D layouts land on the z=1 plane.
    """
    x: float
    y: float
    z: float = 1.0

    @staticmethod
    def from_coordinates(coords: Sequence[float]) -> Position:
        """Normalize a 2D or 3D coordinate sequence. Missing or zero z becomes 1."""
        x = float(coords[0])
        y = float(coords[1])
        z = float(coords[2]) if len(coords) > 2 else 0.0
        return Position(x=x, y=y, z=z or 1.0)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


ORIGIN = Position(0.0, 0.0, 1.0)


@dataclass(frozen=True)
class ResolvedNode:
    """Render-ready node for one snapshot. Hashes by id; data is not hashed."""
    id: str
    position: Position
    size: float
    label_visible: bool
    label: Optional[str] = None
    icon: Optional[str] = None
    fill: Optional[str] = None
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "data", _frozen_mapping(self.data))

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class EdgePosition:
    """Endpoint positions captured when the edge was resolved."""
    from_position: Position
    to_position: Position


@dataclass(frozen=True)
class ResolvedEdge:
    """
    Render-ready edge for one snapshot.

    source and target are the ResolvedNode objects of the same snapshot,
    never copies.
    """
    id: Optional[str]
    source: ResolvedNode
    target: ResolvedNode
    position: EdgePosition
    label_visible: bool
    label: Optional[str] = None
    size: Optional[float] = None
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "data", _frozen_mapping(self.data))

    def __hash__(self) -> int:
        return hash((self.id, self.source.id, self.target.id))


@dataclass(frozen=True)
class ClusterGroup:
    """Resolved nodes sharing one value of the cluster attribute."""
    label: Any
    node_ids: Tuple[str, ...]
    position: Position
    radius: float


@dataclass(frozen=True)
class GraphSnapshot:
    """
    One immutable, internally consistent projection output.

    Replaced as a whole, never patched.
    """
    nodes: Tuple[ResolvedNode, ...] = ()
    edges: Tuple[ResolvedEdge, ...] = ()
    clusters: Tuple[ClusterGroup, ...] = ()

    def node(self, node_id: str) -> Optional[ResolvedNode]:
        for resolved in self.nodes:
            if resolved.id == node_id:
                return resolved
        return None

    def positions(self) -> Dict[str, Position]:
        return {resolved.id: resolved.position for resolved in self.nodes}


EMPTY_SNAPSHOT = GraphSnapshot()
