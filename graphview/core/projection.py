"""
Projection Stage
================

Combines graph store, layout, sizing and visibility into one snapshot.

INVARIANT: project() is a PURE FUNCTION of its inputs.
Same graph + layout + policies -> value-equal snapshot.

MERGE RULE:
===========
Resolved `data` = structural remainder of the raw attributes, with the
nested `data` mapping laid over it (nested wins on key collision).
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from ..config import PipelineConfig
from ..contracts.base import (
    ElementKind, Error, ErrorCode, LabelVisibilityType, SizingType,
)
from ..contracts.elements import (
    EdgePosition, GraphSnapshot, RawEdge, RawNode, ResolvedEdge, ResolvedNode,
)
from ..observability import AuditEventType, AuditLog
from .clusters import build_clusters
from .layout.base import LayoutStrategy
from .sizing import node_size_provider
from .store import GraphStore
from .visibility import calc_label_visibility


logger = logging.getLogger(__name__)

NODE_STRUCTURAL_KEYS = frozenset(("data", "fill", "icon", "label", "size"))
EDGE_STRUCTURAL_KEYS = frozenset(("data", "id", "label", "size"))


def merge_node_data(raw: RawNode) -> Dict[str, Any]:
    """Remainder (with id) overlaid by nested data."""
    merged: Dict[str, Any] = {"id": raw.id}
    merged.update((k, v) for k, v in raw.attributes.items() if k not in NODE_STRUCTURAL_KEYS)
    merged.update(raw.nested_data)
    return merged


def merge_edge_data(raw: RawEdge) -> Dict[str, Any]:
    """Remainder (with endpoints) overlaid by nested data."""
    merged: Dict[str, Any] = {"source": raw.source, "target": raw.target}
    merged.update((k, v) for k, v in raw.attributes.items() if k not in EDGE_STRUCTURAL_KEYS)
    merged.update(raw.nested_data)
    return merged


def project(
    store: GraphStore,
    layout: LayoutStrategy,
    sizing_type: Union[SizingType, str] = SizingType.DEFAULT,
    sizing_attribute: Optional[str] = None,
    label_type: Union[LabelVisibilityType, str] = LabelVisibilityType.AUTO,
    config: Optional[PipelineConfig] = None,
    cluster_attribute: Optional[str] = None,
    audit: Optional[AuditLog] = None
) -> GraphSnapshot:
    """
    Resolve every node and edge of the store into a snapshot.

    Nodes without a payload are excluded; edges with an excluded or
    missing endpoint are dropped. Order follows store enumeration.
    """
    config = config or PipelineConfig()

    sizes = node_size_provider(store, sizing_type, sizing_attribute, config.sizing, audit)
    check_visibility = calc_label_visibility(store.node_count, label_type, config.visibility)

    nodes: List[ResolvedNode] = []
    resolved: Dict[str, ResolvedNode] = {}

    for node in store.nodes():
        raw = node.data
        if raw is None:
            logger.debug("Excluding placeholder node %s", node.id)
            _record(audit, AuditEventType.NODE_EXCLUDED, "Node has no payload",
                    {"node": node.id}, ErrorCode.PLACEHOLDER_NODE)
            continue

        size = sizes.get_size_for_node(node.id, raw.get("size"))
        item = ResolvedNode(
            id=node.id,
            position=layout.get_node_position(node.id),
            size=size,
            label_visible=check_visibility(ElementKind.NODE, size),
            label=raw.get("label"),
            icon=raw.get("icon"),
            fill=raw.get("fill"),
            data=merge_node_data(raw)
        )
        resolved[node.id] = item
        nodes.append(item)

    edges: List[ResolvedEdge] = []
    for link in store.links():
        source = resolved.get(link.from_id)
        target = resolved.get(link.to_id)
        if source is None or target is None:
            logger.debug("Dropping edge %s -> %s: endpoint not resolved", link.from_id, link.to_id)
            _record(audit, AuditEventType.EDGE_DROPPED, "Edge endpoint not resolved",
                    {"source": link.from_id, "target": link.to_id}, ErrorCode.UNRESOLVED_ENDPOINT)
            continue

        raw = link.data
        size = raw.get("size")
        edges.append(ResolvedEdge(
            id=raw.get("id"),
            source=source,
            target=target,
            position=EdgePosition(from_position=source.position, to_position=target.position),
            label_visible=check_visibility(ElementKind.EDGE, size),
            label=raw.get("label"),
            size=size,
            data=merge_edge_data(raw)
        ))

    clusters = ()
    if cluster_attribute:
        clusters = build_clusters(nodes, cluster_attribute, config.cluster.padding)

    return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges), clusters=clusters)


def _record(
    audit: Optional[AuditLog],
    event_type: AuditEventType,
    message: str,
    context: Mapping[str, object],
    code: ErrorCode
):
    if audit is not None:
        audit.record(event_type, message, context, error=Error(code, message))
