"""
Integration Test Fixtures

Explicit, deterministic graph inputs - no random generation.
"""

from graphview import RawEdge, RawNode


# =============================================================================
# SMALL GRAPHS
# =============================================================================

def triangle_with_dangling_edge():
    """Three nodes, one valid edge and one edge to a missing node."""
    nodes = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
    edges = [
        {"source": "a", "target": "b"},
        {"source": "a", "target": "z"},
    ]
    return nodes, edges


def labelled_chain():
    """a -> b -> c -> d with labels, fills and nested data."""
    nodes = [
        RawNode("a", {"label": "Alpha", "fill": "#f00", "data": {"weight": 4, "team": "red"}}),
        RawNode("b", {"label": "Beta", "icon": "b.svg", "data": {"weight": 9, "team": "red"}}),
        RawNode("c", {"label": "Gamma", "size": 12, "data": {"team": "blue"}}),
        RawNode("d", {"label": "Delta", "kind": "leaf", "data": {"weight": "heavy"}}),
    ]
    edges = [
        RawEdge("a", "b", {"id": "a-b", "label": "ab", "size": 8}),
        RawEdge("b", "c", {"id": "b-c", "label": "bc", "data": {"kind": "strong"}}),
        RawEdge("c", "d", {"id": "c-d", "kind": "plain", "data": {"kind": "weak"}}),
    ]
    return nodes, edges


def star(leaves: int = 5):
    """One hub linked to `leaves` spokes."""
    nodes = [{"id": "hub", "label": "Hub"}] + [
        {"id": f"leaf{i}", "label": f"Leaf {i}"} for i in range(leaves)
    ]
    edges = [{"source": "hub", "target": f"leaf{i}", "id": f"e{i}"} for i in range(leaves)]
    return nodes, edges


def with_placeholder():
    """A payload-less placeholder node between two real nodes."""
    nodes = [
        RawNode("a", {"label": "A"}),
        RawNode("hidden", None),
        RawNode("b", {"label": "B"}),
    ]
    edges = [
        RawEdge("a", "hidden", {"id": "a-hidden"}),
        RawEdge("hidden", "b", {"id": "hidden-b"}),
        RawEdge("a", "b", {"id": "a-b"}),
    ]
    return nodes, edges


def chain(length: int):
    """Linear chain n0 -> n1 -> ... of the given length."""
    nodes = [{"id": f"n{i}", "label": f"N{i}"} for i in range(length)]
    edges = [{"source": f"n{i}", "target": f"n{i + 1}"} for i in range(length - 1)]
    return nodes, edges
