"""
Engine Orchestration Module

Reactive controller that decides which pipeline stages to re-run when
inputs change.

DESIGN PRINCIPLES:
==================
1. Change detection is explicit: applied inputs vs. incoming inputs
2. Structural changes rebuild the store and run a fresh layout
3. Cosmetic changes re-run only the projection
4. Snapshots are published whole, never patched
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
import logging

from .config import PipelineConfig
from .contracts.base import (
    ConfigurationError, GraphViewError, LabelVisibilityType, LayoutType,
    SizingType, coerce_mode,
)
from .contracts.elements import (
    EMPTY_SNAPSHOT, ClusterGroup, EdgeInput, GraphSnapshot, NodeInput,
    ResolvedEdge, ResolvedNode,
)
from .core.convergence import ConvergenceDriver, Scheduler
from .core.layout import CustomPositionFn, LayoutStrategy, layout_provider
from .core.projection import project
from .core.store import GraphStore
from .observability import AuditEventType, AuditLog


logger = logging.getLogger(__name__)

SnapshotListener = Callable[[GraphSnapshot], None]


@dataclass(frozen=True, eq=False)
class GraphInputs:
    """
    Everything the host supplies to the controller.

    nodes/edges are compared by identity: pass a new sequence to signal
    a structural change. Mode strings are coerced into their enums and
    invalid values raise ConfigurationError here.
    """
    nodes: Sequence[NodeInput] = ()
    edges: Sequence[EdgeInput] = ()
    layout_type: LayoutType = LayoutType.FORCE_DIRECTED_2D
    sizing_type: SizingType = SizingType.DEFAULT
    sizing_attribute: Optional[str] = None
    label_type: LabelVisibilityType = LabelVisibilityType.AUTO
    cluster_attribute: Optional[str] = None
    get_node_position: Optional[CustomPositionFn] = None

    def __post_init__(self):
        object.__setattr__(self, "layout_type", coerce_mode(LayoutType, self.layout_type))
        object.__setattr__(self, "sizing_type", coerce_mode(SizingType, self.sizing_type))
        object.__setattr__(self, "label_type", coerce_mode(LabelVisibilityType, self.label_type))
        if self.layout_type == LayoutType.CUSTOM and self.get_node_position is None:
            raise ConfigurationError("Custom layout requires a get_node_position callable")

    def with_changes(self, **changes) -> GraphInputs:
        """Copy with some fields replaced; untouched sequences keep identity."""
        return replace(self, **changes)

    @property
    def cosmetic_key(self) -> Tuple:
        return (self.sizing_type, self.sizing_attribute, self.label_type, self.cluster_attribute)


class ControllerState(Enum):
    """Lifecycle of the controller."""
    UNBUILT = "unbuilt"
    BUILDING = "building"
    MOUNTED = "mounted"


class GraphController:
    """
    Owns the graph store, the current layout and the published snapshot.

    STATE FLOW:
    ===========
    UNBUILT -> BUILDING  on the first structural input
    BUILDING -> MOUNTED  one scheduler tick after the first snapshot

    Before MOUNTED, layout-type and cosmetic changes are ignored.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        scheduler: Optional[Scheduler] = None,
        audit: Optional[AuditLog] = None
    ):
        self._config = config or PipelineConfig()
        self._audit = audit or AuditLog()
        self._store = GraphStore(audit=self._audit)
        self._driver = ConvergenceDriver(scheduler, self._config.driver, self._audit)

        self._state = ControllerState.UNBUILT
        self._mount_scheduled = False
        self._inputs: Optional[GraphInputs] = None
        self._layout: Optional[LayoutStrategy] = None
        self._snapshot: GraphSnapshot = EMPTY_SNAPSHOT
        self._published = 0
        self._listeners: List[SnapshotListener] = []

        # Inputs the current store, layout and snapshot were built from
        self._applied_nodes: Optional[Sequence[NodeInput]] = None
        self._applied_edges: Optional[Sequence[EdgeInput]] = None
        self._applied_layout: Optional[Tuple] = None
        self._applied_cosmetic: Optional[Tuple] = None

    # =========================================================================
    # INPUT
    # =========================================================================

    def update(self, inputs: GraphInputs) -> None:
        """
        Apply new inputs and re-run only the stages they invalidate.
        """
        self._inputs = inputs

        structural = (
            inputs.nodes is not self._applied_nodes
            or inputs.edges is not self._applied_edges
        )
        if structural:
            self._rebuild()
            return

        layout_changed = self._layout_key(inputs) != self._applied_layout
        cosmetic_changed = inputs.cosmetic_key != self._applied_cosmetic
        if not (layout_changed or cosmetic_changed):
            return

        if self._state is not ControllerState.MOUNTED:
            logger.debug("Ignoring non-structural change while %s", self._state.value)
            self._audit.record(
                AuditEventType.INPUT_IGNORED,
                "Change ignored before first layout completed",
                {"state": self._state.value}
            )
            return

        if layout_changed:
            self._start_layout()
        else:
            self._reproject()

    def relayout(self, strategy: Optional[LayoutStrategy] = None) -> None:
        """
        Re-drive a layout over the current graph.

        With strategy, that instance is driven as-is (an already converged
        one completes after a single no-op step); without, a fresh strategy
        of the current layout type is created.
        """
        if self._inputs is None:
            raise GraphViewError("relayout() called before the first update()")
        self._start_layout(strategy)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # STAGES
    # =========================================================================

    def _rebuild(self):
        inputs = self._inputs
        self._driver.cancel()
        self._store.rebuild(inputs.nodes, inputs.edges)
        self._applied_nodes = inputs.nodes
        self._applied_edges = inputs.edges

        if self._state is ControllerState.UNBUILT:
            self._state = ControllerState.BUILDING
        self._start_layout()

    def _start_layout(self, strategy: Optional[LayoutStrategy] = None):
        inputs = self._inputs
        self._layout = strategy or layout_provider(
            inputs.layout_type,
            self._store,
            self._config.layout,
            inputs.get_node_position
        )
        self._applied_layout = self._layout_key(inputs)
        self._driver.run(self._layout, self._on_layout_complete)

    def _on_layout_complete(self):
        try:
            self._publish()
        finally:
            # Mount even when a listener raises
            if self._state is ControllerState.BUILDING and not self._mount_scheduled:
                self._mount_scheduled = True
                self._driver.scheduler.call_soon(self._mark_mounted)

    def _mark_mounted(self):
        self._state = ControllerState.MOUNTED
        logger.debug("Controller mounted after %d snapshot(s)", self._published)

    def _reproject(self):
        if self._driver.in_progress:
            # The in-flight run publishes with the newest cosmetic inputs
            logger.debug("Layout still running; deferring projection to its completion")
            return
        self._publish()

    def _publish(self):
        inputs = self._inputs
        snapshot = project(
            self._store,
            self._layout,
            inputs.sizing_type,
            inputs.sizing_attribute,
            inputs.label_type,
            self._config,
            cluster_attribute=inputs.cluster_attribute,
            audit=self._audit
        )
        self._applied_cosmetic = inputs.cosmetic_key
        self._snapshot = snapshot
        self._published += 1

        self._audit.record(
            AuditEventType.SNAPSHOT_PUBLISHED,
            "Snapshot published",
            {"nodes": len(snapshot.nodes), "edges": len(snapshot.edges),
             "sequence": self._published}
        )
        for listener in list(self._listeners):
            listener(snapshot)

    @staticmethod
    def _layout_key(inputs: GraphInputs) -> Tuple:
        return (inputs.layout_type, inputs.get_node_position)

    # =========================================================================
    # OUTPUT
    # =========================================================================

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    @property
    def nodes(self) -> Tuple[ResolvedNode, ...]:
        return self._snapshot.nodes

    @property
    def edges(self) -> Tuple[ResolvedEdge, ...]:
        return self._snapshot.edges

    @property
    def clusters(self) -> Tuple[ClusterGroup, ...]:
        return self._snapshot.clusters

    @property
    def graph(self) -> GraphStore:
        """Live graph store. Consumers must treat it as read-only."""
        return self._store

    @property
    def layout(self) -> Optional[LayoutStrategy]:
        return self._layout

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def mounted(self) -> bool:
        return self._state is ControllerState.MOUNTED

    @property
    def inputs(self) -> Optional[GraphInputs]:
        return self._inputs

    @property
    def driver(self) -> ConvergenceDriver:
        return self._driver

    @property
    def audit(self) -> AuditLog:
        return self._audit

    @property
    def published_count(self) -> int:
        return self._published
