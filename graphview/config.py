"""
Pipeline Configuration

Dataclass configuration for every stage, unified in PipelineConfig.
Invalid values fail at construction time.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from .contracts.base import ConfigurationError


@dataclass
class SizingConfig:
    """Node sizing bounds."""
    default_size: float = 7.0
    min_size: float = 5.0
    max_size: float = 15.0

    def __post_init__(self):
        if self.min_size > self.max_size:
            raise ConfigurationError(
                f"min_size ({self.min_size}) must not exceed max_size ({self.max_size})"
            )
        if self.default_size <= 0:
            raise ConfigurationError("default_size must be positive")


@dataclass
class VisibilityConfig:
    """Thresholds for automatic label visibility."""
    density_threshold: int = 500  # labels hidden from this many nodes up
    min_label_size: float = 5.0

    def __post_init__(self):
        if self.density_threshold < 0:
            raise ConfigurationError("density_threshold must be non-negative")


@dataclass
class LayoutConfig:
    """Shared layout parameters."""
    scale: float = 300.0
    seed: int = 42
    max_iterations: int = 300
    epsilon: float = 0.01
    initial_temperature: Optional[float] = None  # defaults to scale / 10
    node_spacing: float = 50.0
    level_spacing: float = 100.0

    def __post_init__(self):
        if self.scale <= 0:
            raise ConfigurationError("scale must be positive")
        if self.node_spacing <= 0 or self.level_spacing <= 0:
            raise ConfigurationError("node_spacing and level_spacing must be positive")
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")
        if self.epsilon < 0:
            raise ConfigurationError("epsilon must be non-negative")


@dataclass
class DriverConfig:
    """Convergence driver safety net."""
    max_steps: int = 1000

    def __post_init__(self):
        if self.max_steps < 1:
            raise ConfigurationError("max_steps must be at least 1")


@dataclass
class ClusterConfig:
    """Cluster grouping parameters."""
    padding: float = 20.0


@dataclass
class PipelineConfig:
    """Unified configuration for the entire pipeline."""
    sizing: SizingConfig = None
    visibility: VisibilityConfig = None
    layout: LayoutConfig = None
    driver: DriverConfig = None
    cluster: ClusterConfig = None

    def __post_init__(self):
        self.sizing = self.sizing or SizingConfig()
        self.visibility = self.visibility or VisibilityConfig()
        self.layout = self.layout or LayoutConfig()
        self.driver = self.driver or DriverConfig()
        self.cluster = self.cluster or ClusterConfig()
