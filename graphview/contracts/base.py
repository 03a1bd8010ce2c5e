"""
Base Contracts and Shared Types

Foundational types used across all layers of the projection pipeline.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Mode enums are a CLOSED set: unknown values fail at construction time
- Errors are data when they describe dropped elements,
  exceptions when they describe invalid configuration
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Tuple, Type, TypeVar, Union


# =============================================================================
# EXCEPTIONS (Configuration is the only fail-fast surface)
# =============================================================================

class GraphViewError(Exception):
    """Base class for all graphview exceptions."""


class ConfigurationError(GraphViewError, ValueError):
    """
    Invalid configuration supplied by the caller.

    Raised at construction time, never swallowed. An unknown layout,
    sizing or label mode is a programmer error, not a runtime degradation.
    """


# =============================================================================
# ERROR STATES (Silent degradations, recorded as data)
# =============================================================================

class ErrorCode(Enum):
    """
    Codes for degradations that are dropped rather than raised.
    Every dropped element maps to exactly one code.
    """
    # Graph store
    DANGLING_EDGE = auto()

    # Projection
    PLACEHOLDER_NODE = auto()
    UNRESOLVED_ENDPOINT = auto()

    # Sizing
    NON_NUMERIC_ATTRIBUTE = auto()

    # Layout
    STEP_CAP_EXHAUSTED = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error record with context.
    Stored in the audit log, never raised.
    """
    code: ErrorCode
    message: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)


# =============================================================================
# MODE ENUMS (Closed sets)
# =============================================================================

class LayoutType(str, Enum):
    """Layout strategy families."""
    FORCE_DIRECTED_2D = "forceDirected2d"
    FORCE_DIRECTED_3D = "forceDirected3d"
    CIRCULAR_2D = "circular2d"
    CONCENTRIC_2D = "concentric2d"
    TREE_TD_2D = "treeTd2d"
    TREE_LR_2D = "treeLr2d"
    RADIAL_OUT_2D = "radialOut2d"
    CUSTOM = "custom"


class SizingType(str, Enum):
    """Node sizing modes."""
    DEFAULT = "default"
    NONE = "none"
    ATTRIBUTE = "attribute"
    CENTRALITY = "centrality"
    PAGERANK = "pagerank"


class LabelVisibilityType(str, Enum):
    """Label visibility modes."""
    ALL = "all"
    NONE = "none"
    AUTO = "auto"
    NODES = "nodes"
    EDGES = "edges"


class ElementKind(str, Enum):
    """Kind of element a label belongs to."""
    NODE = "node"
    EDGE = "edge"


E = TypeVar("E", bound=Enum)


def coerce_mode(enum_type: Type[E], value: Union[E, str]) -> E:
    """
    Coerce a raw mode value into its enum.

    Raises ConfigurationError for anything outside the closed set.
    """
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Unknown {enum_type.__name__} {value!r} (expected one of: {allowed})"
        ) from None
