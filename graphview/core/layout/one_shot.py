"""
One-Shot Layouts
================

Layouts that compute every position in a single pass.
"""

from __future__ import annotations
from collections import deque
from typing import Callable, Dict, List, Sequence, Union
import math

import networkx as nx

from ...config import LayoutConfig
from ...contracts.base import LayoutType
from ...contracts.elements import Position
from ..store import GraphStore
from .base import OneShotLayout


CustomPositionFn = Callable[[str, GraphStore], Union[Position, Sequence[float]]]


class CircularLayout(OneShotLayout):
    """Nodes evenly spaced on one circle."""

    def __init__(self, store: GraphStore, config: LayoutConfig):
        self._config = config
        super().__init__(LayoutType.CIRCULAR_2D, store)

    def compute(self) -> Dict[str, Sequence[float]]:
        if self._store.node_count == 0:
            return {}
        return nx.circular_layout(self._store.view(), scale=self._config.scale)


class ConcentricLayout(OneShotLayout):
    """Nodes on concentric shells, highest degree innermost."""

    def __init__(self, store: GraphStore, config: LayoutConfig):
        self._config = config
        super().__init__(LayoutType.CONCENTRIC_2D, store)

    def compute(self) -> Dict[str, Sequence[float]]:
        if self._store.node_count == 0:
            return {}

        shells: Dict[int, List[str]] = {}
        for node_id in self._store.node_ids():
            shells.setdefault(self._store.degree(node_id), []).append(node_id)
        nlist = [shells[degree] for degree in sorted(shells, reverse=True)]

        return nx.shell_layout(self._store.view(), nlist=nlist, scale=self._config.scale)


def assign_levels(store: GraphStore) -> Dict[str, int]:
    """
    BFS depth along outgoing links.

    Roots are nodes without incoming links; nodes unreachable from any
    root (cycles) start a new tree at depth 0 in insertion order.
    """
    graph = store.view()
    order = store.node_ids()
    levels: Dict[str, int] = {}

    roots = [node_id for node_id in order if graph.in_degree(node_id) == 0]
    root_set = set(roots)
    starts = roots + [node_id for node_id in order if node_id not in root_set]

    for start in starts:
        if start in levels:
            continue
        levels[start] = 0
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for successor in graph.successors(current):
                if successor not in levels:
                    levels[successor] = levels[current] + 1
                    queue.append(successor)

    return levels


class HierarchicalLayout(OneShotLayout):
    """
    Layered tree layout.

    treeTd2d: levels stacked top-down
    treeLr2d: levels stacked left-right
    radialOut2d: levels on rings growing outward
    """

    def __init__(self, layout_type: LayoutType, store: GraphStore, config: LayoutConfig):
        if layout_type not in (LayoutType.TREE_TD_2D, LayoutType.TREE_LR_2D, LayoutType.RADIAL_OUT_2D):
            raise ValueError(f"Not a hierarchical layout: {layout_type}")
        self._config = config
        super().__init__(layout_type, store)

    def compute(self) -> Dict[str, Sequence[float]]:
        layers: Dict[int, List[str]] = {}
        for node_id, level in assign_levels(self._store).items():
            layers.setdefault(level, []).append(node_id)

        node_spacing = self._config.node_spacing
        level_spacing = self._config.level_spacing
        positions: Dict[str, Sequence[float]] = {}

        for level, members in layers.items():
            count = len(members)
            for index, node_id in enumerate(members):
                offset = (index - (count - 1) / 2.0) * node_spacing

                if self._layout_type == LayoutType.TREE_TD_2D:
                    positions[node_id] = (offset, -level * level_spacing)
                elif self._layout_type == LayoutType.TREE_LR_2D:
                    positions[node_id] = (level * level_spacing, -offset)
                else:
                    radius = level * level_spacing
                    angle = 2.0 * math.pi * index / count
                    positions[node_id] = (radius * math.cos(angle), radius * math.sin(angle))

        return positions


class CustomLayout(OneShotLayout):
    """Positions supplied by a caller callable."""

    def __init__(self, store: GraphStore, get_node_position: CustomPositionFn):
        self._get_node_position = get_node_position
        super().__init__(LayoutType.CUSTOM, store)

    def compute(self) -> Dict[str, Sequence[float]]:
        positions: Dict[str, Sequence[float]] = {}
        for node_id in self._store.node_ids():
            value = self._get_node_position(node_id, self._store)
            positions[node_id] = value.as_tuple() if isinstance(value, Position) else value
        return positions
