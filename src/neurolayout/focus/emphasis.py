"""
Pure emphasis law for focus lock.

Given the transition progress (0 = no focus, 1 = fully engaged) and the role
an entity plays relative to the focus node, return its opacity weight. All
interpolations are linear in progress. Nothing here reads a clock.
"""

from enum import StrEnum
from typing import Dict, Tuple


class Role(StrEnum):
    """How an entity relates to the focus node."""
    FOCUS = "focus"
    CONNECTED = "connected"
    DISTRACTION = "distraction"


class EntityKind(StrEnum):
    NODE = "node"
    LINK = "link"


DIMMED_OPACITY = 0.2
CONNECTED_OPACITY = 0.6

# (opacity at progress 0, opacity at progress 1)
NODE_EMPHASIS: Dict[Role, Tuple[float, float]] = {
    Role.FOCUS: (1.0, 1.0),
    Role.CONNECTED: (1.0, CONNECTED_OPACITY),
    Role.DISTRACTION: (1.0, DIMMED_OPACITY),
}

LINK_EMPHASIS: Dict[Role, Tuple[float, float]] = {
    Role.FOCUS: (0.6, 0.9),
    Role.CONNECTED: (0.6, 0.5),
    Role.DISTRACTION: (0.6, DIMMED_OPACITY * 0.5),
}


def lerp(start: float, end: float, t: float) -> float:
    return start + (end - start) * t


def emphasis(progress: float, role: Role, kind: EntityKind = EntityKind.NODE) -> float:
    """Opacity weight for an entity in the given role."""
    t = max(0.0, min(1.0, progress))
    table = NODE_EMPHASIS if kind == EntityKind.NODE else LINK_EMPHASIS
    start, end = table[role]
    return lerp(start, end, t)
