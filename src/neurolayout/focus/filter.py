"""
Focus lock attention filter.

When a node is designated as the focus target, its direct neighbors stay
readable and everything else fades out. The filter keeps its own state: the
focus id, the set of directly connected node ids, and a time-based
transition. It only reads links; it never mutates them.
"""

import logging
from typing import Any, FrozenSet, Iterable, Optional, Tuple

from ..core.clock import FrameClock, ManualClock
from ..core.config import LayoutConfig
from ..core.types import endpoint_id
from .emphasis import EntityKind, Role, emphasis

logger = logging.getLogger(__name__)


def link_endpoints(link: Any) -> Optional[Tuple[str, str]]:
    """
    Extract (source_id, target_id) from a Link, a mapping or any object
    with source/target attributes. Returns None if either end is unusable.
    """
    if isinstance(link, dict):
        source, target = link.get("source"), link.get("target")
    else:
        source, target = getattr(link, "source", None), getattr(link, "target", None)
    try:
        return endpoint_id(source), endpoint_id(target)
    except ValueError:
        return None


def connected_ids(focus_id: Optional[str], links: Iterable[Any]) -> FrozenSet[str]:
    """Ids of nodes sharing a link with focus_id, in a single pass over links."""
    if focus_id is None:
        return frozenset()
    connected = set()
    for link in links:
        ends = link_endpoints(link)
        if ends is None:
            continue
        source, target = ends
        if source == focus_id:
            connected.add(target)
        elif target == focus_id:
            connected.add(source)
    connected.discard(focus_id)
    return frozenset(connected)


class Transition:
    """
    Linear progress animation toward a target value.

    Retargeting starts from wherever the animation currently is, and always
    takes the full duration, like a timing animation restarted mid-flight.
    """

    def __init__(self, duration: float, value: float = 0.0):
        self.duration = duration
        self._start_value = value
        self._target = value
        self._started_at = 0.0

    def value(self, now: float) -> float:
        if self.duration <= 0:
            return self._target
        fraction = max(0.0, min(1.0, (now - self._started_at) / self.duration))
        return self._start_value + (self._target - self._start_value) * fraction

    def retarget(self, target: float, now: float) -> None:
        self._start_value = self.value(now)
        self._target = target
        self._started_at = now

    @property
    def target(self) -> float:
        return self._target


class FocusLockFilter:
    """
    Computes per-node and per-link opacity for the current focus target.

    Priority: no focus (or progress 0) gives full opacity; the focus node and
    its links come next; then directly connected nodes and their links;
    everything else is a distraction.
    """

    def __init__(
        self,
        clock: Optional[FrameClock] = None,
        config: Optional[LayoutConfig] = None,
        engine=None,
    ):
        self.config = config or LayoutConfig()
        self.clock = clock or ManualClock()
        self.engine = engine
        self._focus_id: Optional[str] = None
        self._links: Tuple[Any, ...] = ()
        self._connected: FrozenSet[str] = frozenset()
        self._transition = Transition(self.config.transition_ms / 1000.0)
        self._glow_started_at: Optional[float] = None

    @property
    def focus_id(self) -> Optional[str]:
        return self._focus_id

    @property
    def connected(self) -> FrozenSet[str]:
        return self._connected

    def set_focus(self, node_id: Optional[str]) -> None:
        """Engage focus on node_id, or release it with None."""
        now = self.clock.now()
        self._focus_id = node_id

        if node_id is not None:
            self._transition.retarget(1.0, now)
            self._glow_started_at = now
            self._connected = connected_ids(node_id, self._links)
            logger.debug(f"Focus lock on {node_id!r}: {len(self._connected)} connected nodes")
        else:
            self._transition.retarget(0.0, now)
            self._glow_started_at = None
            self._connected = frozenset()
            logger.debug("Focus lock released")

        if self.engine is not None:
            self.engine.set_focus_node(node_id)

    def update_links(self, links: Iterable[Any]) -> None:
        """Take a new link set and recompute the connected neighbors."""
        self._links = tuple(links)
        self._connected = connected_ids(self._focus_id, self._links)

    def progress(self, now: Optional[float] = None) -> float:
        return self._transition.value(self.clock.now() if now is None else now)

    def glow(self, now: Optional[float] = None) -> float:
        """Decorative 0..1..0 pulse around the focus node; 0 without focus."""
        if self._focus_id is None or self._glow_started_at is None:
            return 0.0
        now = self.clock.now() if now is None else now
        period = self.config.glow_period_ms / 1000.0
        cycle = ((now - self._glow_started_at) / period) % 2.0
        return cycle if cycle <= 1.0 else 2.0 - cycle

    def is_engaged(self, now: Optional[float] = None) -> bool:
        return self._focus_id is not None and self.progress(now) > 0

    def node_role(self, node_id: str) -> Optional[Role]:
        if self._focus_id is None:
            return None
        if node_id == self._focus_id:
            return Role.FOCUS
        if node_id in self._connected:
            return Role.CONNECTED
        return Role.DISTRACTION

    def link_role(self, link: Any) -> Optional[Role]:
        if self._focus_id is None:
            return None
        ends = link_endpoints(link)
        if ends is None:
            return Role.DISTRACTION
        source, target = ends
        if self._focus_id in (source, target):
            return Role.FOCUS
        if source in self._connected or target in self._connected:
            return Role.CONNECTED
        return Role.DISTRACTION

    def node_opacity(self, node_id: str, now: Optional[float] = None) -> float:
        progress = self.progress(now)
        role = self.node_role(node_id)
        if role is None or progress == 0:
            return 1.0
        return emphasis(progress, role, EntityKind.NODE)

    def link_opacity(self, link: Any, now: Optional[float] = None) -> float:
        progress = self.progress(now)
        role = self.link_role(link)
        if role is None or progress == 0:
            return 1.0
        return emphasis(progress, role, EntityKind.LINK)
