"""
Force-Directed Layout
=====================

Iterative Fruchterman-Reingold relaxation.

Each step() computes one round of pairwise forces in numpy, moves every
node by at most the current temperature, then cools linearly. The layout
converges when the largest move drops below epsilon or when
max_iterations is reached.
"""

from __future__ import annotations
from typing import Dict
import logging

import networkx as nx
import numpy as np

from ...config import LayoutConfig
from ...contracts.base import LayoutType
from ...contracts.elements import ORIGIN, Position
from ..store import GraphStore
from .base import LayoutStrategy


logger = logging.getLogger(__name__)

MIN_DISTANCE = 0.01


class ForceDirectedLayout(LayoutStrategy):
    """Iterative force-directed layout in 2 or 3 dimensions."""

    def __init__(
        self,
        store: GraphStore,
        config: LayoutConfig,
        dimensions: int = 2
    ):
        if dimensions not in (2, 3):
            raise ValueError(f"dimensions must be 2 or 3, got {dimensions}")
        layout_type = LayoutType.FORCE_DIRECTED_2D if dimensions == 2 else LayoutType.FORCE_DIRECTED_3D
        super().__init__(layout_type, store)

        self._config = config
        self._dimensions = dimensions
        self._node_ids = store.node_ids()
        self._index: Dict[str, int] = {node_id: i for i, node_id in enumerate(self._node_ids)}

        count = len(self._node_ids)
        directed = nx.to_numpy_array(store.view(), nodelist=self._node_ids) if count else np.zeros((0, 0))
        self._adjacency = ((directed + directed.T) > 0).astype(float)

        rng = np.random.default_rng(config.seed)
        spread = config.scale / 2.0
        if count > 1:
            self._positions = rng.uniform(-spread, spread, size=(count, dimensions))
        else:
            self._positions = np.zeros((count, dimensions))

        self._k = config.scale / np.sqrt(max(count, 1))
        self._initial_temperature = config.initial_temperature or config.scale / 10.0
        self._temperature = self._initial_temperature
        self._last_move = 0.0
        self._converged = count <= 1

    @property
    def converged(self) -> bool:
        return self._converged

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def last_move(self) -> float:
        """Largest single-node displacement of the latest step."""
        return self._last_move

    def step(self) -> bool:
        if self._converged:
            return True

        positions = self._positions
        delta = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]
        distance = np.linalg.norm(delta, axis=-1)
        np.clip(distance, MIN_DISTANCE, None, out=distance)

        # repulsion k^2/d for every pair, attraction d^2/k along links
        k = self._k
        strength = (k * k) / (distance * distance) - self._adjacency * distance / k
        displacement = np.einsum("ijd,ij->id", delta, strength)

        length = np.linalg.norm(displacement, axis=-1)
        np.clip(length, MIN_DISTANCE, None, out=length)
        move = displacement * (np.minimum(length, self._temperature) / length)[:, np.newaxis]
        self._positions = positions + move

        self._iterations += 1
        self._temperature = max(
            self._temperature - self._initial_temperature / self._config.max_iterations,
            0.0
        )
        self._last_move = float(np.linalg.norm(move, axis=-1).max())

        if self._last_move < self._config.epsilon or self._iterations >= self._config.max_iterations:
            self._converged = True
            logger.debug(
                "%s converged after %d iterations (last move %.4f)",
                self._layout_type.value, self._iterations, self._last_move
            )

        return self._converged

    def get_node_position(self, node_id: str) -> Position:
        index = self._index.get(node_id)
        if index is None:
            return ORIGIN
        return Position.from_coordinates(self._positions[index])
