"""
Layout Strategy Abstraction
===========================

Abstract interface for layout algorithms.

Two families:
- One-shot: positions computed on construction, step() reports
  convergence immediately
- Iterative: each step() advances a bounded simulation and reports
  whether it has converged

BOUNDARY ENFORCEMENT:
- Strategies read the graph store, never mutate it
- Positions are only read through get_node_position()
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, Sequence

from ...contracts.base import LayoutType
from ...contracts.elements import ORIGIN, Position
from ..store import GraphStore


class LayoutStrategy(ABC):
    """
    Abstract layout strategy.

    GUARANTEES:
    - step() is bounded and never blocks on an unbounded simulation
    - get_node_position() returns the latest computed position, or the
      origin for a node the layout never saw
    """

    def __init__(self, layout_type: LayoutType, store: GraphStore):
        self._layout_type = layout_type
        self._store = store
        self._iterations = 0

    @property
    def layout_type(self) -> LayoutType:
        return self._layout_type

    @property
    def iterations(self) -> int:
        """Number of steps that advanced the layout."""
        return self._iterations

    @property
    @abstractmethod
    def converged(self) -> bool:
        """Whether further steps would change positions."""

    @abstractmethod
    def step(self) -> bool:
        """Advance by one bounded step. Returns True once converged."""

    @abstractmethod
    def get_node_position(self, node_id: str) -> Position:
        """Current position of a node."""


class OneShotLayout(LayoutStrategy):
    """
    Layout computed in a single call at construction time.

    Subclasses implement compute() returning coordinates per node id.
    """

    def __init__(self, layout_type: LayoutType, store: GraphStore):
        super().__init__(layout_type, store)
        self._positions: Dict[str, Position] = {
            node_id: Position.from_coordinates(coords)
            for node_id, coords in self.compute().items()
        }

    @abstractmethod
    def compute(self) -> Dict[str, Sequence[float]]:
        """Compute all coordinates."""

    @property
    def converged(self) -> bool:
        return True

    def step(self) -> bool:
        return True

    def get_node_position(self, node_id: str) -> Position:
        return self._positions.get(node_id, ORIGIN)
