"""
Graph Store Tests
=================

Tests for the transactional graph store.

VERIFICATION:
=============
1. Rebuild replaces all prior state
2. Duplicate node ids: last write wins
3. Edges with a missing endpoint are skipped, not raised
4. Enumeration follows insertion order
"""

import pytest
import networkx as nx

from graphview import RawEdge, RawNode
from graphview.core.store import GraphStore
from graphview.observability import AuditEventType, AuditLog


class TestGraphStore:

    def test_rebuild_counts(self):
        """Store should reflect exactly the nodes and valid links."""
        store = GraphStore()
        store.rebuild(
            [{"id": "a"}, {"id": "b"}, {"id": "c"}],
            [{"source": "a", "target": "b"}, {"source": "b", "target": "c"}]
        )

        assert store.node_count == 3
        assert store.link_count == 2
        assert len(store) == 3

    def test_dangling_edge_skipped(self):
        """An edge to an unknown node is omitted without error."""
        store = GraphStore()
        store.rebuild(
            [{"id": "a"}, {"id": "b"}],
            [{"source": "a", "target": "b"}, {"source": "a", "target": "z"}]
        )

        links = list(store.links())
        assert [(l.from_id, l.to_id) for l in links] == [("a", "b")]
        assert "z" not in store
        assert [(e.source, e.target) for e in store.skipped_links] == [("a", "z")]

    def test_endpoint_must_exist_in_same_batch(self):
        """Nodes from an earlier rebuild do not satisfy a later edge."""
        store = GraphStore()
        store.rebuild([{"id": "a"}, {"id": "b"}], [])
        store.rebuild([{"id": "a"}], [{"source": "a", "target": "b"}])

        assert store.link_count == 0
        assert not store.has_node("b")

    def test_rebuild_clears_previous_state(self):
        store = GraphStore()
        store.rebuild([{"id": "a"}, {"id": "b"}], [{"source": "a", "target": "b"}])
        store.rebuild([{"id": "x"}], [])

        assert store.node_ids() == ["x"]
        assert store.link_count == 0
        assert store.version == 2

    def test_duplicate_id_last_write_wins(self):
        """Later duplicate overwrites data but keeps first insertion slot."""
        store = GraphStore()
        store.rebuild(
            [{"id": "a", "label": "first"}, {"id": "b"}, {"id": "a", "label": "second"}],
            []
        )

        assert store.node_ids() == ["a", "b"]
        assert store.get_node("a").data.get("label") == "second"

    def test_insertion_order_of_links(self):
        """Links enumerate in insertion order, not adjacency order."""
        store = GraphStore()
        store.rebuild(
            [{"id": "a"}, {"id": "b"}, {"id": "c"}],
            [
                {"source": "c", "target": "a", "id": "1"},
                {"source": "a", "target": "b", "id": "2"},
                {"source": "c", "target": "b", "id": "3"},
            ]
        )

        assert [l.data.get("id") for l in store.links()] == ["1", "2", "3"]

    def test_parallel_links_kept(self):
        store = GraphStore()
        store.rebuild(
            [{"id": "a"}, {"id": "b"}],
            [{"source": "a", "target": "b", "id": "1"}, {"source": "a", "target": "b", "id": "2"}]
        )

        assert store.link_count == 2
        assert store.degree("a") == 2

    def test_placeholder_node_has_no_payload(self):
        store = GraphStore()
        store.rebuild([RawNode("p", None), RawNode("q")], [RawEdge("p", "q")])

        assert store.get_node("p").data is None
        assert store.get_node("q").data is not None
        assert store.link_count == 1

    def test_failed_rebuild_keeps_previous_graph(self):
        """A malformed batch leaves the previous graph observable."""
        store = GraphStore()
        store.rebuild([{"id": "a"}], [])

        with pytest.raises(KeyError):
            store.rebuild([{"id": "b"}, {"label": "no id"}], [])

        assert store.node_ids() == ["a"]
        assert store.version == 1

    def test_view_is_frozen(self):
        """Advanced callers get a read-only NetworkX graph."""
        store = GraphStore()
        store.rebuild([{"id": "a"}], [])

        view = store.view()
        assert nx.is_frozen(view)
        with pytest.raises(nx.NetworkXError):
            view.add_node("b")

    def test_clear(self):
        store = GraphStore()
        store.rebuild([{"id": "a"}], [])
        store.clear()

        assert store.node_count == 0
        assert list(store.nodes()) == []

    def test_audit_records_skipped_edges(self):
        audit = AuditLog()
        store = GraphStore(audit=audit)
        store.rebuild([{"id": "a"}], [{"source": "a", "target": "missing"}])

        assert audit.count(AuditEventType.GRAPH_REBUILT) == 1
        skipped = audit.entries(AuditEventType.EDGE_SKIPPED)
        assert len(skipped) == 1
        assert skipped[0].context_value("target") == "missing"
