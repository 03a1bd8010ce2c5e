"""
Layout Package
==============

Layout strategies and the factory that selects one by type.

Available layouts:
- forceDirected2d / forceDirected3d: iterative
- circular2d, concentric2d, treeTd2d, treeLr2d, radialOut2d, custom: one-shot
"""

from __future__ import annotations
from typing import Optional, Union

from ...config import LayoutConfig
from ...contracts.base import ConfigurationError, LayoutType, coerce_mode
from ..store import GraphStore
from .base import LayoutStrategy, OneShotLayout
from .force import ForceDirectedLayout
from .one_shot import (
    CircularLayout,
    ConcentricLayout,
    CustomLayout,
    CustomPositionFn,
    HierarchicalLayout,
    assign_levels,
)


def layout_provider(
    layout_type: Union[LayoutType, str],
    store: GraphStore,
    config: Optional[LayoutConfig] = None,
    get_node_position: Optional[CustomPositionFn] = None
) -> LayoutStrategy:
    """
    Create a fresh layout strategy for the current graph.

    Raises ConfigurationError for an unknown type, or for the custom
    type without a position callable.
    """
    layout_type = coerce_mode(LayoutType, layout_type)
    config = config or LayoutConfig()

    if layout_type == LayoutType.FORCE_DIRECTED_2D:
        return ForceDirectedLayout(store, config, dimensions=2)
    if layout_type == LayoutType.FORCE_DIRECTED_3D:
        return ForceDirectedLayout(store, config, dimensions=3)
    if layout_type == LayoutType.CIRCULAR_2D:
        return CircularLayout(store, config)
    if layout_type == LayoutType.CONCENTRIC_2D:
        return ConcentricLayout(store, config)
    if layout_type in (LayoutType.TREE_TD_2D, LayoutType.TREE_LR_2D, LayoutType.RADIAL_OUT_2D):
        return HierarchicalLayout(layout_type, store, config)

    if get_node_position is None:
        raise ConfigurationError("Custom layout requires a get_node_position callable")
    return CustomLayout(store, get_node_position)


__all__ = [
    'LayoutStrategy',
    'OneShotLayout',
    'ForceDirectedLayout',
    'CircularLayout',
    'ConcentricLayout',
    'HierarchicalLayout',
    'CustomLayout',
    'CustomPositionFn',
    'assign_levels',
    'layout_provider',
]
