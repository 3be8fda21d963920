"""
neurolayout - Adaptive force-directed layout for knowledge graphs.

Positions concept nodes and their relations in 2-D with a physical
simulation whose forces adapt to a cognitive load signal, and computes
focus lock emphasis weights for every node and link.

Key Components:
- core: Data types, geometry helpers, clocks and configuration
- physics: Force simulation engine and network metrics
- focus: Focus lock attention filter
- pipeline: Throttled update delivery and session orchestration

Usage:
    from neurolayout import ForceSimulationEngine, NeuralGraph

    engine = ForceSimulationEngine(800, 600)
    engine.update_graph(NeuralGraph.from_dict(data))
    engine.on_tick(render)
"""

__version__ = "0.1.0"

from .core.types import Link, NeuralGraph, Node, NodeType, RelationType
from .focus.filter import FocusLockFilter
from .physics.engine import ForceSimulationEngine, create_engine
from .pipeline.session import LayoutSession
from .pipeline.update import UpdatePipeline

__all__ = [
    "__version__",
    "Node",
    "Link",
    "NeuralGraph",
    "NodeType",
    "RelationType",
    "ForceSimulationEngine",
    "create_engine",
    "FocusLockFilter",
    "UpdatePipeline",
    "LayoutSession",
]
