"""
Adaptive force-directed layout engine.

The engine lays out a knowledge graph with four composed forces (link,
charge, center, collision). Link distances, link pull and node repulsion all
depend on the current cognitive load: under high load the graph spreads out
and relaxes so it reads as less cluttered.

Force laws:
- link distance = 60 + (1 - strength) * 80 * type multiplier + load * 20
- link pull = (strength + Hebbian bonus) * confidence * load damping * type
  multiplier, capped at 1
- charge = -150 * sqrt(radius / 15), boosted for active nodes, reduced for
  mastered nodes, damped by load

The engine does not validate geometry on input; consumers filter malformed
nodes before rendering (see core.geometry).
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from ..core.clock import FrameClock, ManualClock, ScheduledCall
from ..core.config import LayoutConfig, Theme
from ..core.exceptions import EngineInitError
from ..core.geometry import carry_positions, is_finite_number
from ..core.result import Err, Ok, Result
from ..core.types import Link, NeuralGraph, Node, Pin, PinSource, RelationType, clamp_unit
from .colors import ColorScheme, scheme_for, with_opacity
from .forces import CenterForce, CollideForce, LinkForce, ManyBodyForce
from .metrics import NetworkMetrics, calculate_network_metrics
from .simulation import Simulation

logger = logging.getLogger(__name__)

# Link distance
BASE_LINK_DISTANCE = 60.0
STRENGTH_DISTANCE_SPAN = 80.0
LOAD_SPREAD = 20.0

LINK_DISTANCE_MULTIPLIERS: Dict[RelationType, float] = {
    RelationType.PREREQUISITE: 0.7,
    RelationType.ASSOCIATION: 1.0,
    RelationType.TEMPORAL: 1.3,
    RelationType.SIMILARITY: 0.8,
    RelationType.SPATIAL: 1.1,
}

# Link pull
HEBBIAN_RATE = 0.03
HEBBIAN_CAP = 0.4

LINK_STRENGTH_MULTIPLIERS: Dict[RelationType, float] = {
    RelationType.PREREQUISITE: 1.4,
    RelationType.ASSOCIATION: 1.0,
    RelationType.TEMPORAL: 0.7,
    RelationType.SIMILARITY: 0.9,
    RelationType.SPATIAL: 0.8,
}

# Charge
BASE_CHARGE = -150.0
REFERENCE_RADIUS = 15.0
ACTIVE_CHARGE_BOOST = 1.6
MASTERED_CHARGE_FACTOR = 0.6
MASTERED_CHARGE_THRESHOLD = 0.8
CHARGE_DISTANCE_MIN = 25.0
CHARGE_DISTANCE_MAX = 400.0

# Collision
COLLISION_PADDING = 8.0
COLLISION_STRENGTH = 0.9

# Cooling
ALPHA_DECAY = 0.0228
VELOCITY_DECAY = 0.3
INITIAL_ALPHA = 0.3
GRAPH_CHANGE_ALPHA = 0.5
LOAD_NUDGE_ALPHA = 0.1
RESIZE_ALPHA = 0.2
RESTART_ALPHA = 0.3
DRAG_ALPHA_TARGET = 0.2
SETTLE_ALPHA = 0.005

DEFAULT_COGNITIVE_LOAD = 0.5

TickCallback = Callable[[Tuple[Node, ...], Tuple[Link, ...]], None]


def resolve_theme(theme: Theme | str) -> Theme:
    try:
        return Theme(theme)
    except ValueError:
        logger.debug(f"Unknown theme {theme!r}, using dark")
        return Theme.DARK


def hash_code(text: str) -> int:
    """32-bit string hash, used to phase-shift per-node pulses."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


class ForceSimulationEngine:
    """
    Owns the live simulation state for a single graph.

    Entry points (update_graph, update_cognitive_load, set_focus_node and the
    drag methods) are the only ways to mutate state between ticks. Tick
    callbacks receive tuples of the live node and link objects; treat them as
    read-only snapshots valid until the next tick.
    """

    def __init__(
        self,
        width: float,
        height: float,
        theme: Theme | str = Theme.DARK,
        clock: Optional[FrameClock] = None,
        config: Optional[LayoutConfig] = None,
    ):
        if not (is_finite_number(width) and is_finite_number(height)) or width <= 0 or height <= 0:
            raise EngineInitError(f"Invalid viewport {width}x{height}")

        self.config = config or LayoutConfig()
        self.clock = clock or ManualClock()
        self.width = float(width)
        self.height = float(height)
        self.theme = resolve_theme(theme)
        self.colors: ColorScheme = scheme_for(self.theme)

        self._nodes: List[Node] = []
        self._links: List[Link] = []
        self._cognitive_load = DEFAULT_COGNITIVE_LOAD
        self._focus_node_id: Optional[str] = None
        self._running = False
        self._stopped = False
        self._tick_callbacks: List[TickCallback] = []
        self._pending_releases: Dict[str, ScheduledCall] = {}

        self._initialize_simulation()

    def _initialize_simulation(self) -> None:
        self._link_force = LinkForce(
            distance=self.calculate_link_distance,
            strength=self.calculate_link_strength,
        )
        self._charge_force = ManyBodyForce(
            strength=self.calculate_node_charge,
            distance_min=CHARGE_DISTANCE_MIN,
            distance_max=CHARGE_DISTANCE_MAX,
        )
        self._center_force = CenterForce(self.width / 2, self.height / 2)
        self._collide_force = CollideForce(
            radius=lambda node: node.radius + COLLISION_PADDING,
            strength=COLLISION_STRENGTH,
        )

        self.simulation = Simulation(
            clock=self.clock,
            frame_interval=self.config.frame_interval_ms / 1000.0,
        )
        self.simulation.force("link", self._link_force)
        self.simulation.force("charge", self._charge_force)
        self.simulation.force("center", self._center_force)
        self.simulation.force("collision", self._collide_force)
        self.simulation.alpha_decay = ALPHA_DECAY
        self.simulation.velocity_decay = VELOCITY_DECAY
        self.simulation.alpha = INITIAL_ALPHA
        self.simulation.on_tick(self._on_simulation_tick)

    # ------------------------------------------------------------------
    # Force laws
    # ------------------------------------------------------------------

    def calculate_link_distance(self, link: Link) -> float:
        """Resting length of a link: strong links are short, load spreads."""
        multiplier = LINK_DISTANCE_MULTIPLIERS.get(link.type, 1.0)
        strength_distance = (1 - clamp_unit(link.strength)) * STRENGTH_DISTANCE_SPAN
        return BASE_LINK_DISTANCE + strength_distance * multiplier + self._cognitive_load * LOAD_SPREAD

    def calculate_link_strength(self, link: Link) -> float:
        """Simulation pull of a link, always within [0, 1]."""
        strength = clamp_unit(link.strength)
        strength += min(HEBBIAN_CAP, max(0, link.activation_count) * HEBBIAN_RATE)
        strength *= clamp_unit(link.confidence)
        strength *= max(0.6, 1 - self._cognitive_load * 0.4)
        strength *= LINK_STRENGTH_MULTIPLIERS.get(link.type, 1.0)
        return max(0.0, min(1.0, strength))

    def calculate_node_charge(self, node: Node) -> float:
        """Repulsion of a node (negative); magnitude never grows with load."""
        charge = BASE_CHARGE * math.sqrt(node.radius / REFERENCE_RADIUS)
        if node.is_active:
            charge *= ACTIVE_CHARGE_BOOST
        if node.mastery_level > MASTERED_CHARGE_THRESHOLD:
            charge *= MASTERED_CHARGE_FACTOR
        charge *= max(0.7, 1 - self._cognitive_load * 0.3)
        return charge

    # ------------------------------------------------------------------
    # Graph and load updates
    # ------------------------------------------------------------------

    def update_graph(self, graph: NeuralGraph) -> None:
        """
        Replace the live nodes and links.

        Nodes that persist (by id) keep their last position. Only a change in
        node or link count re-energizes the simulation; value-only updates are
        applied to the forces in place without a restart.
        """
        nodes = carry_positions(self._nodes, list(graph.nodes))
        links = list(graph.links)

        has_significant_changes = (
            len(nodes) != len(self._nodes) or len(links) != len(self._links)
        )

        self._nodes = nodes
        self._links = links
        self.simulation.set_nodes(self._nodes)
        self._link_force.set_links(self._links)

        if has_significant_changes:
            logger.debug(f"Graph changed to {len(nodes)} nodes / {len(links)} links, restarting")
            self.simulation.alpha = GRAPH_CHANGE_ALPHA
            self._resume()

    def update_cognitive_load(self, load: float) -> None:
        """Clamp and store the load, then nudge the simulation gently."""
        self._cognitive_load = clamp_unit(load, default=self._cognitive_load)
        self._refresh_forces()

        if self._nodes:
            self.simulation.alpha = LOAD_NUDGE_ALPHA
            self._resume()

    def set_focus_node(self, node_id: Optional[str]) -> None:
        """Record the focus target. The layout does not react to it yet."""
        self._focus_node_id = node_id
        logger.debug(f"Focus node set to {node_id!r}")

    def _refresh_forces(self) -> None:
        self._link_force.refresh()
        self._charge_force.refresh()
        self._collide_force.refresh()

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def on_tick(self, callback: TickCallback) -> None:
        """Register a callback invoked on every simulation tick."""
        self._tick_callbacks.append(callback)

    def remove_tick_callback(self, callback: TickCallback) -> None:
        if callback in self._tick_callbacks:
            self._tick_callbacks.remove(callback)

    def tick(self) -> None:
        """Advance one step manually. A no-op once the engine is stopped."""
        if self._stopped:
            return
        self.simulation.tick()
        self._on_simulation_tick()

    def _on_simulation_tick(self) -> None:
        if self._stopped:
            return
        nodes, links = tuple(self._nodes), tuple(self._links)
        for callback in list(self._tick_callbacks):
            callback(nodes, links)

        if self.simulation.alpha < SETTLE_ALPHA:
            self._running = False

    def _resume(self) -> None:
        self._stopped = False
        self.simulation.restart()
        self._running = True

    def start(self) -> None:
        """Resume ticking at the current alpha."""
        self._resume()

    def restart(self) -> None:
        self.simulation.alpha = RESTART_ALPHA
        self._resume()

    def stop(self) -> None:
        """Stop ticking and cancel pending callbacks. Idempotent."""
        self.simulation.stop()
        for handle in self._pending_releases.values():
            handle.cancel()
        self._pending_releases.clear()
        self._running = False
        self._stopped = True

    def is_running(self) -> bool:
        return self._running

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Drag interaction
    # ------------------------------------------------------------------

    def _find_node(self, node_id: str) -> Optional[Node]:
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def start_drag(self, node_id: str) -> bool:
        """Pin the node where it is and warm the simulation up."""
        node = self._find_node(node_id)
        if node is None:
            logger.warning(f"Cannot drag unknown node {node_id!r}")
            return False

        pending = self._pending_releases.pop(node_id, None)
        if pending is not None:
            pending.cancel()

        self.simulation.alpha_target = DRAG_ALPHA_TARGET
        self._resume()
        if is_finite_number(node.x) and is_finite_number(node.y):
            node.pin = Pin(x=node.x, y=node.y, source=PinSource.DRAG)
        return True

    def drag_to(self, node_id: str, x: float, y: float) -> bool:
        """Move the drag pin to pointer coordinates."""
        if not (is_finite_number(x) and is_finite_number(y)):
            return False
        node = self._find_node(node_id)
        if node is None:
            return False
        node.pin = Pin(x=x, y=y, source=PinSource.DRAG)
        return True

    def end_drag(self, node_id: str) -> bool:
        """Let the simulation cool and release the drag pin after a short delay."""
        node = self._find_node(node_id)
        self.simulation.alpha_target = 0.0
        if node is None:
            return False

        def release() -> None:
            self._pending_releases.pop(node_id, None)
            # Resolve again: update_graph may have replaced the node object
            live = self._find_node(node_id)
            if live is not None and live.pin is not None and live.pin.source == PinSource.DRAG:
                live.pin = None

        self._pending_releases[node_id] = self.clock.call_later(
            self.config.drag_release_ms / 1000.0, release
        )
        return True

    # ------------------------------------------------------------------
    # Colors and effects
    # ------------------------------------------------------------------

    def get_node_color(self, node: Node) -> str:
        """
        Pick a palette entry, in priority order:
        overloaded active node, mastered, weak, default.
        """
        palette = self.colors.node_palette(node.type)
        if node.is_active and node.cognitive_load > 0.7:
            return palette.active
        if node.mastery_level > 0.85:
            return palette.mastered
        if node.mastery_level < 0.25 or node.cognitive_load > 0.8:
            return palette.weak
        return palette.default

    def get_link_opacity(self, link: Link) -> float:
        load_factor = max(0.3, 1 - self._cognitive_load * 0.5)
        return min(0.9, clamp_unit(link.strength) * clamp_unit(link.confidence) * load_factor)

    def get_link_color(self, link: Link) -> str:
        return with_opacity(self.colors.link_base(link.type), self.get_link_opacity(link))

    def get_neural_fire_effect(self, node: Node, now: Optional[float] = None) -> Dict[str, float]:
        """Pulse parameters for active nodes; inactive nodes are static."""
        if not node.is_active:
            return {"opacity": 0.8, "scale": 1.0, "glow": 0.0}

        seconds = self.clock.now() if now is None else now
        urgency = node.cognitive_load * node.activation_level
        pulse_speed = 1 + urgency * 2
        pulse = (math.sin(seconds * 2 * pulse_speed + hash_code(node.id)) + 1) / 2
        load_reduction = max(0.5, 1 - self._cognitive_load * 0.5)

        return {
            "opacity": 0.6 + pulse * 0.4 * load_reduction,
            "scale": 1.0 + pulse * 0.3 * load_reduction,
            "glow": pulse * urgency * load_reduction,
        }

    # ------------------------------------------------------------------
    # Analysis and viewport
    # ------------------------------------------------------------------

    def calculate_network_metrics(self) -> NetworkMetrics:
        return calculate_network_metrics(self._nodes, self._links)

    def update_theme(self, theme: Theme | str) -> None:
        self.theme = resolve_theme(theme)
        self.colors = scheme_for(self.theme)

    def resize(self, width: float, height: float) -> None:
        if not (is_finite_number(width) and is_finite_number(height)) or width <= 0 or height <= 0:
            logger.warning(f"Ignoring invalid viewport {width}x{height}")
            return
        self.width = float(width)
        self.height = float(height)
        self._center_force.x = self.width / 2
        self._center_force.y = self.height / 2
        self.simulation.alpha = RESIZE_ALPHA
        self._resume()

    def get_colors(self) -> ColorScheme:
        return self.colors

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def links(self) -> Tuple[Link, ...]:
        return tuple(self._links)

    @property
    def alpha(self) -> float:
        return self.simulation.alpha

    @property
    def cognitive_load(self) -> float:
        return self._cognitive_load

    @property
    def focus_node_id(self) -> Optional[str]:
        return self._focus_node_id


def create_engine(
    width: float,
    height: float,
    theme: Theme | str = Theme.DARK,
    clock: Optional[FrameClock] = None,
    config: Optional[LayoutConfig] = None,
) -> Result[ForceSimulationEngine, EngineInitError]:
    """
    Construct an engine, returning Err instead of raising.

    Callers use the Err branch to enter a degraded state and keep running
    without an engine.
    """
    try:
        return Ok(ForceSimulationEngine(width, height, theme=theme, clock=clock, config=config))
    except EngineInitError as e:
        logger.error(f"Engine initialization failed: {e}")
        return Err(e)
    except Exception as e:
        logger.error(f"Engine initialization failed: {e}")
        return Err(EngineInitError(str(e)))
