"""
Layout session orchestration.

A LayoutSession wires one graph provider, one engine, one focus filter and
one update pipeline together, and is the single place where UI events
(cognitive load, focus, drag, resize) enter the system.

If the engine cannot be constructed the session still works in a degraded
state: graph refreshes keep the focus filter current, and every engine
operation becomes a no-op.
"""

import logging
from enum import StrEnum
from typing import Any, Optional

from ..core.clock import FrameClock, ManualClock
from ..core.config import LayoutConfig
from ..core.geometry import find_node_at
from ..core.types import Link, NeuralGraph, Node, clamp_unit
from ..focus.filter import FocusLockFilter
from ..physics.engine import DEFAULT_COGNITIVE_LOAD, ForceSimulationEngine, create_engine
from .providers import GraphProvider
from .update import Consumer, UpdatePipeline

logger = logging.getLogger(__name__)


class SessionStatus(StrEnum):
    LOADING = "loading"
    READY = "ready"
    DEGRADED = "degraded"
    CLOSED = "closed"


class LayoutSession:
    """Owns the engine lifecycle for one visible graph."""

    def __init__(
        self,
        provider: GraphProvider,
        consumer: Consumer,
        config: Optional[LayoutConfig] = None,
        clock: Optional[FrameClock] = None,
    ):
        self.provider = provider
        self.config = config or LayoutConfig()
        self.clock = clock or ManualClock()
        self.graph: Optional[NeuralGraph] = None
        self.error: Optional[Exception] = None
        self._cognitive_load = DEFAULT_COGNITIVE_LOAD

        result = create_engine(
            self.config.width,
            self.config.height,
            theme=self.config.theme,
            clock=self.clock,
            config=self.config,
        )
        if result.is_ok():
            self.engine: Optional[ForceSimulationEngine] = result.unwrap()
            self.status = SessionStatus.LOADING
        else:
            self.engine = None
            self.error = result.error
            self.status = SessionStatus.DEGRADED
            logger.warning(f"Layout session running without engine: {self.error}")

        self.focus = FocusLockFilter(clock=self.clock, config=self.config, engine=self.engine)
        self.pipeline = UpdatePipeline(consumer, clock=self.clock, throttle_ms=self.config.throttle_ms)
        if self.engine is not None:
            self.pipeline.attach(self.engine)

    @property
    def is_closed(self) -> bool:
        return self.status == SessionStatus.CLOSED

    def refresh(self) -> Optional[NeuralGraph]:
        """Pull a fresh snapshot from the provider and push it to the engine."""
        if self.is_closed:
            return None

        try:
            graph = self.provider.generate_graph()
        except Exception as e:
            logger.error(f"Graph generation failed: {e}")
            self.error = e
            return None

        self.graph = graph
        self.focus.update_links(graph.links)

        if self.engine is not None and graph.nodes:
            # Pushing the load restarts the layout
            if self.engine.cognitive_load != self._cognitive_load:
                self.engine.update_cognitive_load(self._cognitive_load)
            self.engine.update_graph(graph)
            self.status = SessionStatus.READY
        return graph

    def set_cognitive_load(self, load: float) -> None:
        self._cognitive_load = clamp_unit(load, default=self._cognitive_load)
        if self.engine is not None and not self.is_closed:
            self.engine.update_cognitive_load(self._cognitive_load)

    def set_focus(self, node_id: Optional[str]) -> None:
        if self.is_closed:
            return
        self.focus.set_focus(node_id)

    def resize(self, width: float, height: float) -> None:
        if self.engine is not None and not self.is_closed:
            self.engine.resize(width, height)

    def drag_start(self, node_id: str) -> bool:
        if self.engine is None or self.is_closed:
            return False
        return self.engine.start_drag(node_id)

    def drag_move(self, node_id: str, x: float, y: float) -> bool:
        if self.engine is None or self.is_closed:
            return False
        return self.engine.drag_to(node_id, x, y)

    def drag_end(self, node_id: str) -> bool:
        if self.engine is None or self.is_closed:
            return False
        return self.engine.end_drag(node_id)

    def node_at(self, x: float, y: float) -> Optional[Node]:
        """Hit-test a pointer position against the current layout."""
        if self.engine is None:
            return None
        return find_node_at(self.engine.nodes, x, y)

    def node_opacity(self, node_id: str) -> float:
        return self.focus.node_opacity(node_id)

    def link_opacity(self, link: Any) -> float:
        return self.focus.link_opacity(link)

    def node_color(self, node: Node) -> Optional[str]:
        if self.engine is None:
            return None
        return self.engine.get_node_color(node)

    def link_color(self, link: Link) -> Optional[str]:
        if self.engine is None:
            return None
        return self.engine.get_link_color(link)

    def close(self) -> None:
        """Tear down the pipeline and engine. Idempotent."""
        if self.is_closed:
            return
        self.pipeline.teardown()
        self.status = SessionStatus.CLOSED
