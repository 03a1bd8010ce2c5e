"""
Visibility Policy
=================

Decides whether a node or edge label is shown.

The predicate is fixed by (node_count, mode) when it is built and never
looks at the graph again.
"""

from __future__ import annotations
from typing import Callable, Optional, Union

from ..config import VisibilityConfig
from ..contracts.base import ElementKind, LabelVisibilityType, coerce_mode
from .sizing import as_number


LabelPredicate = Callable[[Union[ElementKind, str], Optional[float]], bool]


def calc_label_visibility(
    node_count: int,
    label_type: Union[LabelVisibilityType, str] = LabelVisibilityType.AUTO,
    config: Optional[VisibilityConfig] = None
) -> LabelPredicate:
    """
    Build the label visibility predicate for one projection cycle.

    auto: shown only while node_count stays below the density threshold
    and the element is larger than the minimum legible size.
    A missing size counts as zero.
    """
    label_type = coerce_mode(LabelVisibilityType, label_type)
    config = config or VisibilityConfig()
    dense = node_count >= config.density_threshold

    def check_visibility(kind: Union[ElementKind, str], size: Optional[float]) -> bool:
        kind = coerce_mode(ElementKind, kind)

        if label_type == LabelVisibilityType.ALL:
            return True
        if label_type == LabelVisibilityType.NONE:
            return False
        if label_type == LabelVisibilityType.NODES:
            return kind == ElementKind.NODE
        if label_type == LabelVisibilityType.EDGES:
            return kind == ElementKind.EDGE

        if dense:
            return False
        return (as_number(size) or 0.0) > config.min_label_size

    return check_visibility
