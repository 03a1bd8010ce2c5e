"""
Core Pipeline

Graph store -> layout (via convergence driver) -> projection.

BOUNDARY ENFORCEMENT:
- Consumes RawNode / RawEdge
- Produces GraphSnapshot
- Never mutates caller inputs or published snapshots
"""

from .store import GraphStore
from .sizing import SizeResolver, node_size_provider
from .visibility import LabelPredicate, calc_label_visibility
from .layout import LayoutStrategy, OneShotLayout, ForceDirectedLayout, layout_provider
from .convergence import (
    Scheduler,
    SynchronousScheduler,
    FrameScheduler,
    AsyncioScheduler,
    RunStatus,
    DriverRun,
    ConvergenceDriver,
)
from .projection import project, merge_node_data, merge_edge_data
from .clusters import build_clusters

__all__ = [
    'GraphStore',
    'SizeResolver',
    'node_size_provider',
    'LabelPredicate',
    'calc_label_visibility',
    'LayoutStrategy',
    'OneShotLayout',
    'ForceDirectedLayout',
    'layout_provider',
    'Scheduler',
    'SynchronousScheduler',
    'FrameScheduler',
    'AsyncioScheduler',
    'RunStatus',
    'DriverRun',
    'ConvergenceDriver',
    'project',
    'merge_node_data',
    'merge_edge_data',
    'build_clusters',
]
