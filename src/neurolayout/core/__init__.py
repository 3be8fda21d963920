"""
Core modules for neurolayout.

This package contains the fundamental building blocks:
- types: Data structures (Node, Link, NeuralGraph, Pin)
- geometry: Coordinate validation and hit-testing helpers
- clock: Frame clocks driving the simulation
- config: Layout configuration
"""

from .types import (
    Link, NeuralGraph, Node, NodeType, Pin, PinSource, RelationType,
    clamp_unit, endpoint_id,
)
from .geometry import carry_positions, find_node_at, has_finite_position, touch_radius
from .clock import AsyncioFrameClock, FrameClock, ManualClock
from .config import LayoutConfig, Theme, load_config
from .exceptions import (
    ConfigError, EngineInitError, GraphLoadError, NeuroLayoutError, NodeNotFoundError,
)

__all__ = [
    # Types
    "Node", "Link", "NeuralGraph", "NodeType", "RelationType", "Pin", "PinSource",
    "clamp_unit", "endpoint_id",
    # Geometry
    "carry_positions", "find_node_at", "has_finite_position", "touch_radius",
    # Clock & config
    "FrameClock", "ManualClock", "AsyncioFrameClock", "LayoutConfig", "Theme", "load_config",
    # Errors
    "NeuroLayoutError", "GraphLoadError", "NodeNotFoundError", "EngineInitError", "ConfigError",
]
