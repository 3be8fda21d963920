"""
Throttled, reentrancy-safe delivery of simulation ticks.

The simulation may tick far faster than a display refreshes. The pipeline
sits between the engine's tick stream and a consumer and guarantees:

- at most one delivery per throttle window (16 ms by default)
- ticks arriving while a delivery is in flight are ignored, not queued
- nothing is delivered after teardown, and teardown stops the engine
- delivered snapshots only contain nodes with finite coordinates

Ticks may be coalesced but are never reordered.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from ..core.clock import FrameClock, ManualClock
from ..core.geometry import renderable_nodes
from ..core.types import Link, Node

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSnapshot:
    """What a consumer sees for one delivered tick."""
    nodes: Tuple[Node, ...]
    links: Tuple[Link, ...]
    sequence: int
    timestamp: float
    skipped_nodes: int = 0


Consumer = Callable[[FrameSnapshot], None]


@dataclass
class PipelineStats:
    received: int = 0
    delivered: int = 0
    throttled: int = 0
    ignored: int = 0
    failed: int = 0


class UpdatePipeline:
    """
    Bridge between an engine's tick callbacks and a single consumer.
    """

    def __init__(
        self,
        consumer: Consumer,
        clock: Optional[FrameClock] = None,
        throttle_ms: float = 16.0,
    ):
        self.consumer = consumer
        self.clock = clock or ManualClock()
        self.throttle_ms = throttle_ms
        self.stats = PipelineStats()

        self._engine = None
        self._closed = False
        self._delivering = False
        self._last_delivery: Optional[float] = None
        self._last_sequence = 0
        self._sequence = 0
        self._pending: Optional[Tuple[Sequence[Node], Sequence[Link], int]] = None

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_delivering(self) -> bool:
        return self._delivering

    def attach(self, engine) -> None:
        """Subscribe to an engine's ticks; the pipeline then owns its teardown."""
        if self._closed:
            logger.warning("Refusing to attach an engine to a torn-down pipeline")
            return
        self._engine = engine
        engine.on_tick(self.handle_tick)
        engine.simulation.on_end(self.flush)

    def handle_tick(self, nodes: Sequence[Node], links: Sequence[Link]) -> bool:
        """
        Offer a tick for delivery. Returns True if the consumer was invoked.
        """
        self._sequence += 1
        self.stats.received += 1

        if self._closed:
            return False
        if self._delivering:
            self.stats.ignored += 1
            return False

        now = self.clock.now()
        if self._last_delivery is not None and (now - self._last_delivery) * 1000.0 < self.throttle_ms:
            self.stats.throttled += 1
            self._pending = (nodes, links, self._sequence)
            return False

        return self._deliver(nodes, links, self._sequence, now)

    def flush(self) -> bool:
        """Deliver the most recent throttled tick, if any, ignoring the window."""
        if self._closed or self._delivering or self._pending is None:
            return False
        nodes, links, sequence = self._pending
        return self._deliver(nodes, links, sequence, self.clock.now())

    def _deliver(self, nodes: Sequence[Node], links: Sequence[Link], sequence: int, now: float) -> bool:
        if sequence <= self._last_sequence:
            return False

        valid = tuple(renderable_nodes(nodes))
        skipped = len(nodes) - len(valid)
        if skipped:
            logger.debug(f"Skipping {skipped} nodes without finite coordinates")

        snapshot = FrameSnapshot(
            nodes=valid,
            links=tuple(links),
            sequence=sequence,
            timestamp=now,
            skipped_nodes=skipped,
        )

        self._delivering = True
        self._last_delivery = now
        self._last_sequence = sequence
        self._pending = None
        try:
            self.consumer(snapshot)
            self.stats.delivered += 1
        except Exception as e:
            self.stats.failed += 1
            logger.error(f"Tick delivery failed: {e}")
        finally:
            self._delivering = False
        return True

    def teardown(self) -> None:
        """Stop deliveries and the attached engine. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True
        self._pending = None
        if self._engine is not None:
            self._engine.remove_tick_callback(self.handle_tick)
            self._engine.simulation.remove_listener(self.flush)
            self._engine.stop()
        logger.debug("Update pipeline torn down")
