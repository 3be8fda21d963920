"""
Velocity-Verlet style simulation loop.

Mirrors the d3-force simulation: an ``alpha`` energy term decays toward
``alpha_target`` on every tick, each registered force adjusts velocities,
and the integrator applies damped velocities to positions. Node state is
gathered into numpy arrays for the duration of a tick and written back to
the Node objects afterwards. Frames are scheduled on an injected
FrameClock; the loop stops itself once alpha falls below ``alpha_min``.
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..core.clock import FrameClock, ManualClock, ScheduledCall
from ..core.geometry import is_finite_number
from ..core.types import Node
from .forces import Force

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

TickListener = Callable[[], None]


class Simulation:
    """
    Owns the node list, the forces and the cooling schedule.

    Node positions are written here and nowhere else, apart from the
    centering force which translates the whole layout.
    """

    def __init__(
        self,
        clock: Optional[FrameClock] = None,
        frame_interval: float = 1.0 / 60.0,
        seed: int = 0,
    ):
        self.clock = clock or ManualClock()
        self.frame_interval = frame_interval
        self.rng = np.random.default_rng(seed)

        self.nodes: List[Node] = []
        self.forces: Dict[str, Force] = {}

        self.alpha = 1.0
        self.alpha_min = 0.001
        self.alpha_decay = 1 - math.pow(self.alpha_min, 1 / 300)
        self.alpha_target = 0.0
        self._velocity_retention = 0.6

        self._frame_handle: Optional[ScheduledCall] = None
        self._stopped = True
        self._tick_listeners: List[TickListener] = []
        self._end_listeners: List[TickListener] = []
        self.tick_count = 0

    @property
    def velocity_decay(self) -> float:
        """Fraction of velocity removed on every tick."""
        return 1 - self._velocity_retention

    @velocity_decay.setter
    def velocity_decay(self, value: float) -> None:
        self._velocity_retention = 1 - value

    def set_nodes(self, nodes: List[Node]) -> None:
        self.nodes = nodes
        self._initialize_nodes()
        for force in self.forces.values():
            force.initialize(self.nodes, self.rng)

    def force(self, name: str, force: Optional[Force] = None) -> Optional[Force]:
        """Get or register a named force."""
        if force is None:
            return self.forces.get(name)
        force.initialize(self.nodes, self.rng)
        self.forces[name] = force
        return force

    def _initialize_nodes(self) -> None:
        """Give unplaced nodes a phyllotaxis position and zero velocity."""
        index = np.arange(len(self.nodes))
        radius = INITIAL_RADIUS * np.sqrt(0.5 + index)
        angle = index * INITIAL_ANGLE
        spiral = np.column_stack([radius * np.cos(angle), radius * np.sin(angle)])

        for i, node in enumerate(self.nodes):
            if node.pin is not None:
                node.x = node.pin.x
                node.y = node.pin.y
            if not is_finite_number(node.x) or not is_finite_number(node.y):
                node.x = float(spiral[i, 0])
                node.y = float(spiral[i, 1])
            if not is_finite_number(node.vx) or not is_finite_number(node.vy):
                node.vx = 0.0
                node.vy = 0.0

    def _gather(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Node state as arrays: positions, velocities, pin mask, pin positions."""
        count = len(self.nodes)
        positions = np.empty((count, 2))
        velocities = np.empty((count, 2))
        pinned = np.zeros(count, dtype=bool)
        pin_positions = np.zeros((count, 2))
        for i, node in enumerate(self.nodes):
            positions[i] = (node.x, node.y)
            velocities[i] = (node.vx, node.vy)
            if node.pin is not None:
                pinned[i] = True
                pin_positions[i] = (node.pin.x, node.pin.y)
        return positions, velocities, pinned, pin_positions

    def _scatter(self, positions: np.ndarray, velocities: np.ndarray) -> None:
        for i, node in enumerate(self.nodes):
            node.x, node.y = float(positions[i, 0]), float(positions[i, 1])
            node.vx, node.vy = float(velocities[i, 0]), float(velocities[i, 1])

    def tick(self, iterations: int = 1) -> None:
        """Advance the simulation without scheduling or notifying listeners."""
        positions, velocities, pinned, pin_positions = self._gather()
        free = ~pinned

        for _ in range(iterations):
            self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay

            for force in self.forces.values():
                force.apply(self.alpha, positions, velocities)

            velocities[free] *= self._velocity_retention
            positions[free] += velocities[free]
            positions[pinned] = pin_positions[pinned]
            velocities[pinned] = 0.0
            self.tick_count += 1

        self._scatter(positions, velocities)

    def restart(self) -> "Simulation":
        """Resume the frame loop if it is not already scheduled."""
        self._stopped = False
        if self._frame_handle is None:
            self._schedule()
        return self

    def stop(self) -> "Simulation":
        """Cancel the pending frame. Safe to call repeatedly."""
        self._stopped = True
        if self._frame_handle is not None:
            self._frame_handle.cancel()
            self._frame_handle = None
        return self

    @property
    def is_scheduled(self) -> bool:
        return self._frame_handle is not None

    def on_tick(self, listener: TickListener) -> None:
        self._tick_listeners.append(listener)

    def on_end(self, listener: TickListener) -> None:
        self._end_listeners.append(listener)

    def remove_listener(self, listener: TickListener) -> None:
        if listener in self._tick_listeners:
            self._tick_listeners.remove(listener)
        if listener in self._end_listeners:
            self._end_listeners.remove(listener)

    def _schedule(self) -> None:
        self._frame_handle = self.clock.call_later(self.frame_interval, self._frame)

    def _frame(self) -> None:
        if self._stopped:
            return
        self._frame_handle = None
        self.tick()

        for listener in list(self._tick_listeners):
            listener()

        if self.alpha < self.alpha_min:
            self.stop()
            for listener in list(self._end_listeners):
                listener()
            return

        if not self._stopped and self._frame_handle is None:
            self._schedule()
