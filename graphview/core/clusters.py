"""
Cluster Grouping

Groups resolved nodes by the value of one data attribute.
"""

from __future__ import annotations
from collections.abc import Hashable
from typing import Dict, List, Sequence, Tuple
import math

from ..contracts.elements import ClusterGroup, Position, ResolvedNode


def build_clusters(
    nodes: Sequence[ResolvedNode],
    attribute: str,
    padding: float = 20.0
) -> Tuple[ClusterGroup, ...]:
    """
    Group nodes sharing a value of `attribute` in their merged data.

    Nodes without the attribute stay unclustered. Groups come out in
    first-seen order; radius covers every member plus padding.
    """
    groups: Dict[Hashable, List[ResolvedNode]] = {}
    for node in nodes:
        value = node.data.get(attribute)
        if value is None or not isinstance(value, Hashable):
            continue
        groups.setdefault(value, []).append(node)

    clusters = []
    for label, members in groups.items():
        count = len(members)
        center = Position(
            x=sum(n.position.x for n in members) / count,
            y=sum(n.position.y for n in members) / count,
            z=sum(n.position.z for n in members) / count,
        )
        reach = max(
            math.dist(n.position.as_tuple(), center.as_tuple()) + n.size
            for n in members
        )
        clusters.append(ClusterGroup(
            label=label,
            node_ids=tuple(n.id for n in members),
            position=center,
            radius=reach + padding
        ))

    return tuple(clusters)
