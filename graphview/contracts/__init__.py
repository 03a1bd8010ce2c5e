"""
Contracts Package

Immutable types shared by every layer of the pipeline.
"""

from .base import (
    GraphViewError,
    ConfigurationError,
    ErrorCode,
    Error,
    LayoutType,
    SizingType,
    LabelVisibilityType,
    ElementKind,
    coerce_mode,
)
from .elements import (
    RawNode,
    RawEdge,
    NodeInput,
    EdgeInput,
    as_raw_node,
    as_raw_edge,
    GraphStoreNode,
    GraphStoreEdge,
    Position,
    ORIGIN,
    ResolvedNode,
    EdgePosition,
    ResolvedEdge,
    ClusterGroup,
    GraphSnapshot,
    EMPTY_SNAPSHOT,
)

__all__ = [
    # Errors
    'GraphViewError',
    'ConfigurationError',
    'ErrorCode',
    'Error',
    # Modes
    'LayoutType',
    'SizingType',
    'LabelVisibilityType',
    'ElementKind',
    'coerce_mode',
    # Raw inputs
    'RawNode',
    'RawEdge',
    'NodeInput',
    'EdgeInput',
    'as_raw_node',
    'as_raw_edge',
    # Store records
    'GraphStoreNode',
    'GraphStoreEdge',
    # Outputs
    'Position',
    'ORIGIN',
    'ResolvedNode',
    'EdgePosition',
    'ResolvedEdge',
    'ClusterGroup',
    'GraphSnapshot',
    'EMPTY_SNAPSHOT',
]
