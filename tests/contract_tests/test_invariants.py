"""
Property Tests for Graph Pipeline Contracts
Verifies join, purity and visibility invariants over generated graphs.
"""

from hypothesis import given, settings, strategies as st
from hypothesis.strategies import composite

from graphview import (
    GraphController, GraphInputs, LayoutConfig, RawNode, SynchronousScheduler,
    VisibilityConfig,
)
from graphview.core.layout import layout_provider
from graphview.core.projection import project
from graphview.core.store import GraphStore
from graphview.core.visibility import calc_label_visibility

# =============================================================================
# STRATEGIES (Generators)
# =============================================================================

node_ids = st.text(alphabet="abcdefgh", min_size=1, max_size=3)


@composite
def raw_nodes(draw, min_size=0, max_size=12):
    """Unique node ids; some nodes are payload-less placeholders."""
    ids = draw(st.lists(node_ids, min_size=min_size, max_size=max_size, unique=True))
    nodes = []
    for node_id in ids:
        if draw(st.booleans()) and draw(st.booleans()):
            nodes.append(RawNode(node_id, None))
        else:
            nodes.append({
                "id": node_id,
                "label": node_id.upper(),
                "size": draw(st.one_of(st.none(), st.integers(min_value=1, max_value=30))),
            })
    return nodes


@composite
def graphs(draw):
    """Nodes plus edges whose endpoints may or may not exist."""
    nodes = draw(raw_nodes())
    existing = [n.id if isinstance(n, RawNode) else n["id"] for n in nodes]
    endpoint = st.sampled_from(existing) | node_ids if existing else node_ids
    edges = draw(st.lists(
        st.fixed_dictionaries({"source": endpoint, "target": endpoint}),
        max_size=20
    ))
    return nodes, edges


def build(nodes, edges):
    store = GraphStore()
    store.rebuild(nodes, edges)
    return store


def payload_ids(nodes):
    return {
        n["id"] for n in nodes
        if not isinstance(n, RawNode)
    }


# =============================================================================
# PROPERTIES
# =============================================================================

@given(graphs())
def test_edges_reference_resolved_nodes(graph):
    """Every output edge points at node objects of the same snapshot."""
    store = build(*graph)
    snapshot = project(store, layout_provider("circular2d", store))

    members = {id(n) for n in snapshot.nodes}
    for edge in snapshot.edges:
        assert id(edge.source) in members
        assert id(edge.target) in members


@given(graphs())
def test_only_payload_nodes_and_valid_edges_survive(graph):
    nodes, edges = graph
    store = build(nodes, edges)
    snapshot = project(store, layout_provider("circular2d", store))

    visible = payload_ids(nodes)
    assert {n.id for n in snapshot.nodes} == visible
    expected = [e for e in edges if e["source"] in visible and e["target"] in visible]
    assert len(snapshot.edges) == len(expected)


@given(graphs())
def test_store_skips_dangling_links(graph):
    nodes, edges = graph
    store = build(nodes, edges)

    for link in store.links():
        assert store.has_node(link.from_id)
        assert store.has_node(link.to_id)
    assert store.link_count + len(store.skipped_links) == len(edges)


@given(graphs(), graphs())
def test_rebuild_replaces_previous_graph(first, second):
    """A rebuild leaves no trace of the previous inputs."""
    store = build(*first)
    store.rebuild(*second)

    assert store.node_ids() == build(*second).node_ids()
    assert store.link_count == build(*second).link_count


@given(graphs(), st.sampled_from(["default", "centrality", "pagerank"]),
       st.sampled_from(["all", "none", "auto", "nodes", "edges"]))
def test_projection_idempotent(graph, sizing, labels):
    store = build(*graph)
    layout = layout_provider("treeTd2d", store, LayoutConfig())

    assert project(store, layout, sizing, None, labels) == project(store, layout, sizing, None, labels)


@given(st.integers(min_value=0, max_value=2000), st.integers(min_value=1, max_value=2000),
       st.one_of(st.none(), st.floats(min_value=0, max_value=100)))
def test_auto_visibility_monotonic(count, extra, size):
    """Adding nodes never turns a hidden label visible."""
    config = VisibilityConfig()
    before = calc_label_visibility(count, "auto", config)("node", size)
    after = calc_label_visibility(count + extra, "auto", config)("node", size)

    assert not (after and not before)


@settings(max_examples=25, deadline=None)
@given(graphs())
def test_controller_publishes_consistent_snapshot(graph):
    controller = GraphController(scheduler=SynchronousScheduler())
    nodes, edges = graph
    controller.update(GraphInputs(nodes=nodes, edges=edges, layout_type="concentric2d"))

    assert controller.mounted
    assert {n.id for n in controller.nodes} == payload_ids(nodes)
