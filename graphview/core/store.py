"""
Graph Store
===========

Internal directed graph rebuilt transactionally from raw node/edge lists.

Wraps NetworkX behind a narrow interface:
- rebuild
- enumerate nodes / links
- node count, degree

The rest of the pipeline never sees the NetworkX API directly except
through the frozen read-only `view()`.
"""

from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Tuple
import logging

import networkx as nx

from ..contracts.base import Error, ErrorCode
from ..contracts.elements import (
    EdgeInput, GraphStoreEdge, GraphStoreNode, NodeInput, RawEdge, RawNode,
    as_raw_edge, as_raw_node,
)
from ..observability import AuditEventType, AuditLog


logger = logging.getLogger(__name__)


class GraphStore:
    """
    Mutable graph owned exclusively by the pipeline.

    Links are kept in insertion order next to the NetworkX graph because
    MultiDiGraph edge iteration follows adjacency, not insertion.
    """

    def __init__(self, audit: Optional[AuditLog] = None):
        self._graph = nx.freeze(nx.MultiDiGraph())
        self._links: Tuple[GraphStoreEdge, ...] = ()
        self._skipped: Tuple[RawEdge, ...] = ()
        self._version: int = 0
        self._audit = audit

    def rebuild(
        self,
        nodes: Iterable[NodeInput],
        edges: Iterable[EdgeInput]
    ) -> None:
        """
        Replace all graph state from the given inputs.

        Nodes: later duplicates overwrite earlier ones.
        Edges: an endpoint missing from this batch skips the edge.
        The new graph is assembled off to the side and swapped in at once.
        """
        graph = nx.MultiDiGraph()

        for node in nodes:
            raw = as_raw_node(node)
            graph.add_node(raw.id, data=raw if raw.has_payload else None)

        links: List[GraphStoreEdge] = []
        skipped: List[RawEdge] = []
        for edge in edges:
            raw = as_raw_edge(edge)
            if raw.source not in graph or raw.target not in graph:
                skipped.append(raw)
                self._record_skipped(raw)
                continue
            graph.add_edge(raw.source, raw.target, data=raw)
            links.append(GraphStoreEdge(from_id=raw.source, to_id=raw.target, data=raw))

        self._graph = nx.freeze(graph)
        self._links = tuple(links)
        self._skipped = tuple(skipped)
        self._version += 1

        logger.debug(
            "Graph rebuilt: %d nodes, %d links, %d skipped",
            graph.number_of_nodes(), len(links), len(skipped)
        )
        if self._audit is not None:
            self._audit.record(
                AuditEventType.GRAPH_REBUILT,
                "Graph store rebuilt",
                {"nodes": graph.number_of_nodes(), "links": len(links),
                 "skipped": len(skipped), "version": self._version}
            )

    def _record_skipped(self, edge: RawEdge):
        logger.debug("Skipping edge %s -> %s: endpoint not in batch", edge.source, edge.target)
        if self._audit is not None:
            self._audit.record(
                AuditEventType.EDGE_SKIPPED,
                "Edge references a node missing from the batch",
                {"source": edge.source, "target": edge.target},
                error=Error(ErrorCode.DANGLING_EDGE, "Missing endpoint")
            )

    # =========================================================================
    # ENUMERATION
    # =========================================================================

    def nodes(self) -> Iterator[GraphStoreNode]:
        """Iterate nodes in insertion order."""
        for node_id, attrs in self._graph.nodes(data=True):
            yield GraphStoreNode(id=node_id, data=attrs.get("data"))

    def links(self) -> Iterator[GraphStoreEdge]:
        """Iterate links in insertion order."""
        return iter(self._links)

    def node_ids(self) -> List[str]:
        return list(self._graph.nodes)

    def get_node(self, node_id: str) -> Optional[GraphStoreNode]:
        if node_id not in self._graph:
            return None
        return GraphStoreNode(id=node_id, data=self._graph.nodes[node_id].get("data"))

    def has_node(self, node_id: str) -> bool:
        return node_id in self._graph

    def degree(self, node_id: str) -> int:
        """In + out degree, parallel links counted separately."""
        return self._graph.degree(node_id)

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def link_count(self) -> int:
        return len(self._links)

    @property
    def version(self) -> int:
        """Number of rebuilds performed."""
        return self._version

    @property
    def skipped_links(self) -> Tuple[RawEdge, ...]:
        """Edges dropped by the most recent rebuild."""
        return self._skipped

    def view(self) -> nx.MultiDiGraph:
        """Frozen NetworkX graph for read-only queries."""
        return self._graph

    def clear(self):
        """Drop all nodes and links."""
        self.rebuild((), ())

    def __len__(self) -> int:
        return self.node_count

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._graph
