"""
graphview - render-ready projections of abstract graphs
=======================================================

Build a graph from raw nodes and edges, lay it out with a pluggable
strategy, and publish immutable snapshots of resolved nodes and edges.

Controller example:
  >>> from graphview import GraphController, GraphInputs
  >>> controller = GraphController()
  >>> controller.update(GraphInputs(
  ...     nodes=[{"id": "a", "label": "A"}, {"id": "b", "label": "B"}],
  ...     edges=[{"source": "a", "target": "b", "id": "a-b"}],
  ...     layout_type="circular2d",
  ... ))
  >>> [node.id for node in controller.nodes]
  ['a', 'b']

Pipeline example (no controller):
  >>> from graphview import GraphStore, layout_provider, project
  >>> store = GraphStore()
  >>> store.rebuild([{"id": "a"}], [])
  >>> snapshot = project(store, layout_provider("circular2d", store))
"""

from .config import (
    PipelineConfig,
    SizingConfig,
    VisibilityConfig,
    LayoutConfig,
    DriverConfig,
    ClusterConfig,
)
from .contracts import (
    GraphViewError,
    ConfigurationError,
    LayoutType,
    SizingType,
    LabelVisibilityType,
    ElementKind,
    RawNode,
    RawEdge,
    Position,
    ResolvedNode,
    ResolvedEdge,
    EdgePosition,
    ClusterGroup,
    GraphSnapshot,
)
from .core import (
    GraphStore,
    node_size_provider,
    calc_label_visibility,
    LayoutStrategy,
    OneShotLayout,
    layout_provider,
    ConvergenceDriver,
    SynchronousScheduler,
    FrameScheduler,
    AsyncioScheduler,
    project,
    build_clusters,
)
from .engine import GraphController, GraphInputs, ControllerState
from .observability import AuditLog, AuditEventType

__version__ = "0.1.0"
