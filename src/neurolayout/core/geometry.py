"""
Geometry helpers shared by the engine and its consumers.

The engine does not validate coordinates on input. Anything that hands nodes
to a render or hit-test path filters them through here first, so a node
without finite coordinates is treated as absent rather than crashing.
"""

import math
from typing import Iterable, Iterator, List, Optional

from .types import Node

TOUCH_PADDING = 10.0
MIN_TOUCH_RADIUS = 10.0


def is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def has_finite_position(node: Optional[Node]) -> bool:
    """True when the node has finite numeric x and y."""
    if node is None:
        return False
    return is_finite_number(node.x) and is_finite_number(node.y)


def renderable_nodes(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield only nodes with usable coordinates."""
    for node in nodes:
        if has_finite_position(node):
            yield node


def touch_radius(node: Node) -> float:
    """Effective hit radius: the node radius plus padding, never below 10."""
    return max(MIN_TOUCH_RADIUS, node.radius + TOUCH_PADDING)


def find_node_at(nodes: Iterable[Node], x: float, y: float) -> Optional[Node]:
    """
    Return the closest node whose touch radius contains (x, y).

    Malformed nodes and non-finite pointer coordinates yield no hit.
    """
    if not (is_finite_number(x) and is_finite_number(y)):
        return None

    best: Optional[Node] = None
    best_distance = math.inf
    for node in renderable_nodes(nodes):
        distance = math.hypot(x - node.x, y - node.y)
        if distance <= touch_radius(node) and distance < best_distance:
            best = node
            best_distance = distance
    return best


def carry_positions(previous: Iterable[Node], incoming: List[Node]) -> List[Node]:
    """
    Copy simulation state from previous nodes onto incoming nodes by id.

    Incoming nodes that already carry coordinates keep them. Returns the
    incoming list for chaining.
    """
    by_id = {node.id: node for node in previous}
    for node in incoming:
        old = by_id.get(node.id)
        if old is None or old is node:
            continue
        if node.x is None and node.y is None:
            node.x, node.y = old.x, old.y
            node.vx, node.vy = old.vx, old.vy
        if node.pin is None and old.pin is not None:
            node.pin = old.pin
    return incoming
