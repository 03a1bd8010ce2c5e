"""
Sizing Provider
===============

Resolves the final numeric size of every node.

MODES:
======
- default:    declared size, else the configured default
- none:       configured default for every node
- attribute:  numeric attribute from the node's data, else the default
- centrality: in+out degree scaled into [min_size, max_size]
- pagerank:   PageRank scaled into [min_size, max_size]

Whole-graph modes are computed in one pass when the resolver is built,
so every lookup during a projection cycle sees the same normalization.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union
import logging
import math
import numbers

import networkx as nx

from ..config import SizingConfig
from ..contracts.base import Error, ErrorCode, SizingType, coerce_mode
from ..observability import AuditEventType, AuditLog
from .store import GraphStore


logger = logging.getLogger(__name__)

PAGERANK_DAMPING = 0.85
PAGERANK_TOLERANCE = 1.0e-6
PAGERANK_MAX_ITERATIONS = 100


def as_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it is not numeric."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class SizeResolver:
    """
    Maps (node_id, declared_size) to a final size.

    Stable for the lifetime of one projection cycle.
    """

    def __init__(
        self,
        sizing_type: SizingType,
        config: SizingConfig,
        sizes: Optional[Dict[str, float]] = None
    ):
        self._sizing_type = sizing_type
        self._config = config
        self._sizes = sizes or {}

    @property
    def sizing_type(self) -> SizingType:
        return self._sizing_type

    def get_size_for_node(self, node_id: str, declared_size: Any = None) -> float:
        default = self._config.default_size

        if self._sizing_type == SizingType.DEFAULT:
            declared = as_number(declared_size)
            return declared if declared else default

        return self._sizes.get(node_id, default)


def node_size_provider(
    store: GraphStore,
    sizing_type: Union[SizingType, str] = SizingType.DEFAULT,
    attribute: Optional[str] = None,
    config: Optional[SizingConfig] = None,
    audit: Optional[AuditLog] = None
) -> SizeResolver:
    """
    Build the size resolver for one projection cycle.

    Raises ConfigurationError for an unknown sizing type.
    """
    sizing_type = coerce_mode(SizingType, sizing_type)
    config = config or SizingConfig()

    if sizing_type in (SizingType.DEFAULT, SizingType.NONE):
        return SizeResolver(sizing_type, config)

    if sizing_type == SizingType.ATTRIBUTE:
        return SizeResolver(sizing_type, config, _attribute_sizes(store, attribute, audit))

    if sizing_type == SizingType.CENTRALITY:
        scores = {node_id: float(store.degree(node_id)) for node_id in store.node_ids()}
    else:
        scores = _pagerank_scores(store)

    return SizeResolver(sizing_type, config, _scale(scores, config))


def _attribute_sizes(
    store: GraphStore,
    attribute: Optional[str],
    audit: Optional[AuditLog] = None
) -> Dict[str, float]:
    if not attribute:
        logger.warning("Attribute sizing configured but no attribute provided")
        return {}

    sizes: Dict[str, float] = {}
    for node in store.nodes():
        if node.data is None:
            continue
        nested = node.data.nested_data
        raw = nested[attribute] if attribute in nested else node.data.get(attribute)
        value = as_number(raw)
        if value is None:
            if raw is not None:
                logger.debug("Attribute %r is not numeric for node %s", attribute, node.id)
                if audit is not None:
                    audit.record(
                        AuditEventType.SIZE_FALLBACK,
                        "Non-numeric size attribute; default size used",
                        {"node": node.id, "attribute": attribute},
                        error=Error(ErrorCode.NON_NUMERIC_ATTRIBUTE, f"{raw!r} is not numeric")
                    )
            continue
        sizes[node.id] = value
    return sizes


def _scale(scores: Dict[str, float], config: SizingConfig) -> Dict[str, float]:
    """Linearly map scores onto [min_size, max_size]. Zero range maps to nothing."""
    if not scores:
        return {}

    low = min(scores.values())
    high = max(scores.values())
    if high == low:
        return {}

    span = config.max_size - config.min_size
    return {
        node_id: config.min_size + (score - low) / (high - low) * span
        for node_id, score in scores.items()
    }


def _pagerank_scores(store: GraphStore) -> Dict[str, float]:
    """PageRank over the store graph; parallel links add weight."""
    if store.node_count == 0:
        return {}
    return nx.pagerank(
        store.view(),
        alpha=PAGERANK_DAMPING,
        max_iter=PAGERANK_MAX_ITERATIONS,
        tol=PAGERANK_TOLERANCE
    )
