"""
Force simulation for neurolayout.

- forces: link, many-body, center and collision forces
- simulation: the cooling tick loop
- engine: ForceSimulationEngine with load-adaptive force laws
- metrics: network analysis
"""

from .engine import ForceSimulationEngine, create_engine
from .metrics import ActivationDistribution, NetworkMetrics, calculate_network_metrics
from .simulation import Simulation

__all__ = [
    "ForceSimulationEngine", "create_engine", "Simulation",
    "NetworkMetrics", "ActivationDistribution", "calculate_network_metrics",
]
