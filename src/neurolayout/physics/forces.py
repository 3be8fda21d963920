"""
Force primitives for the layout simulation.

Each force follows the d3-force contract: ``initialize(nodes, rng)`` is
called whenever the node set changes, and ``apply(alpha, positions,
velocities)`` nudges velocities for the current alpha. Positions and
velocities are (n, 2) float arrays in node order, owned by the Simulation;
forces update them in place. Only CenterForce writes positions, as in d3.

The many-body and collision forces evaluate all pairs at once as (n, n)
delta matrices instead of walking a quadtree.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import numpy as np

from ..core.types import Link, Node

logger = logging.getLogger(__name__)


def jiggle(rng: np.random.Generator, size=None):
    """Tiny random offset used to separate coincident nodes."""
    return (rng.random(size) - 0.5) * 1e-6


def fill_zeros(values: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Replace exact zeros with jiggle so directions stay defined."""
    zeros = values == 0
    if zeros.any():
        values[zeros] = jiggle(rng, int(zeros.sum()))
    return values


class Force(ABC):
    """Base class for all forces."""

    def __init__(self):
        self.nodes: List[Node] = []
        self.rng = np.random.default_rng(0)

    def initialize(self, nodes: List[Node], rng: Optional[np.random.Generator] = None) -> None:
        self.nodes = nodes
        if rng is not None:
            self.rng = rng

    @abstractmethod
    def apply(self, alpha: float, positions: np.ndarray, velocities: np.ndarray) -> None:
        """Adjust velocities (or positions) in place for one tick."""


class LinkForce(Force):
    """
    Spring force pulling linked nodes toward a target distance.

    Links are resolved to node indices by id. A link whose endpoints are not
    in the node set is skipped rather than raising.
    """

    def __init__(
        self,
        distance: Callable[[Link], float],
        strength: Callable[[Link], float],
        iterations: int = 1,
    ):
        super().__init__()
        self.distance_fn = distance
        self.strength_fn = strength
        self.iterations = iterations
        self.links: List[Link] = []
        self._source = np.empty(0, dtype=int)
        self._target = np.empty(0, dtype=int)
        self._bias = np.empty(0)
        self._distance = np.empty(0)
        self._strength = np.empty(0)

    def set_links(self, links: List[Link]) -> None:
        self.links = links
        self._resolve()

    def initialize(self, nodes: List[Node], rng: Optional[np.random.Generator] = None) -> None:
        super().initialize(nodes, rng)
        self._resolve()

    def _resolve(self) -> None:
        """Compute endpoint indices, degree bias, distances and strengths."""
        index: Dict[str, int] = {node.id: i for i, node in enumerate(self.nodes)}
        resolved = []
        for link in self.links:
            source = index.get(link.source)
            target = index.get(link.target)
            if source is None or target is None:
                logger.warning(f"Skipping link {link.id}: endpoint not in node set")
                continue
            resolved.append((link, source, target))

        self._source = np.array([s for _, s, _ in resolved], dtype=int)
        self._target = np.array([t for _, _, t in resolved], dtype=int)
        degree = np.bincount(
            np.concatenate([self._source, self._target]), minlength=len(self.nodes)
        ).astype(float)
        if resolved:
            self._bias = degree[self._source] / (degree[self._source] + degree[self._target])
        else:
            self._bias = np.empty(0)
        self._distance = np.array([self.distance_fn(link) for link, _, _ in resolved], dtype=float)
        self._strength = np.array([self.strength_fn(link) for link, _, _ in resolved], dtype=float)

    def refresh(self) -> None:
        """Re-evaluate distances and strengths, e.g. after a load change."""
        self._resolve()

    @property
    def active_link_count(self) -> int:
        return len(self._source)

    def apply(self, alpha: float, positions: np.ndarray, velocities: np.ndarray) -> None:
        if not len(self._source):
            return
        src, tgt = self._source, self._target
        for _ in range(self.iterations):
            delta = positions[tgt] + velocities[tgt] - positions[src] - velocities[src]
            fill_zeros(delta, self.rng)
            length = np.hypot(delta[:, 0], delta[:, 1])
            scale = (length - self._distance) / length * alpha * self._strength
            delta *= scale[:, np.newaxis]
            np.subtract.at(velocities, tgt, delta * self._bias[:, np.newaxis])
            np.add.at(velocities, src, delta * (1 - self._bias)[:, np.newaxis])


class ManyBodyForce(Force):
    """
    Pairwise charge between all nodes.

    Negative strength repels. Interactions beyond ``distance_max`` are
    ignored and distances below ``distance_min`` are softened.
    """

    def __init__(
        self,
        strength: Callable[[Node], float],
        distance_min: float = 1.0,
        distance_max: float = np.inf,
    ):
        super().__init__()
        self.strength_fn = strength
        self.distance_min = distance_min
        self.distance_max = distance_max
        self._strengths = np.empty(0)

    def initialize(self, nodes: List[Node], rng: Optional[np.random.Generator] = None) -> None:
        super().initialize(nodes, rng)
        self.refresh()

    def refresh(self) -> None:
        self._strengths = np.array([self.strength_fn(node) for node in self.nodes], dtype=float)

    def apply(self, alpha: float, positions: np.ndarray, velocities: np.ndarray) -> None:
        count = len(positions)
        if count < 2:
            return

        # delta[i, j] points from node i to node j
        delta = positions[np.newaxis, :, :] - positions[:, np.newaxis, :]
        off_diagonal = ~np.eye(count, dtype=bool)
        dist2 = np.sum(delta ** 2, axis=2)
        in_range = off_diagonal & (dist2 < self.distance_max ** 2)

        for axis in (0, 1):
            component = delta[:, :, axis]
            zeros = in_range & (component == 0)
            if zeros.any():
                component[zeros] = jiggle(self.rng, int(zeros.sum()))
                dist2[zeros] += component[zeros] ** 2

        min2 = self.distance_min ** 2
        dist2 = np.where(dist2 < min2, np.sqrt(min2 * dist2), dist2)

        weight = np.zeros_like(dist2)
        weight[in_range] = (self._strengths[np.newaxis, :] * alpha / np.where(in_range, dist2, 1.0))[in_range]
        velocities += np.sum(delta * weight[:, :, np.newaxis], axis=1)


class CenterForce(Force):
    """Translate all nodes so their centroid sits at (x, y)."""

    def __init__(self, x: float = 0.0, y: float = 0.0, strength: float = 1.0):
        super().__init__()
        self.x = x
        self.y = y
        self.strength = strength

    def apply(self, alpha: float, positions: np.ndarray, velocities: np.ndarray) -> None:
        if not len(positions):
            return
        shift = (positions.mean(axis=0) - np.array([self.x, self.y])) * self.strength
        positions -= shift


class CollideForce(Force):
    """
    Soft minimum separation between node circles.

    Overlaps are resolved with the given strength, splitting the correction
    in proportion to the squared radii.
    """

    def __init__(self, radius: Callable[[Node], float], strength: float = 1.0, iterations: int = 1):
        super().__init__()
        self.radius_fn = radius
        self.strength = strength
        self.iterations = iterations
        self._radii = np.empty(0)

    def initialize(self, nodes: List[Node], rng: Optional[np.random.Generator] = None) -> None:
        super().initialize(nodes, rng)
        self.refresh()

    def refresh(self) -> None:
        self._radii = np.array([self.radius_fn(node) for node in self.nodes], dtype=float)

    def apply(self, alpha: float, positions: np.ndarray, velocities: np.ndarray) -> None:
        count = len(positions)
        if count < 2:
            return

        radii = self._radii
        reach = radii[:, np.newaxis] + radii[np.newaxis, :]
        r2 = radii ** 2
        # Share of the push taken by node i against node j
        share = r2[np.newaxis, :] / (r2[:, np.newaxis] + r2[np.newaxis, :])
        off_diagonal = ~np.eye(count, dtype=bool)

        for _ in range(self.iterations):
            projected = positions + velocities
            # delta[i, j] points from node j to node i
            delta = projected[:, np.newaxis, :] - projected[np.newaxis, :, :]
            dist2 = np.sum(delta ** 2, axis=2)
            overlap = off_diagonal & (dist2 < reach ** 2)
            if not overlap.any():
                continue

            for axis in (0, 1):
                component = delta[:, :, axis]
                zeros = overlap & (component == 0)
                if zeros.any():
                    component[zeros] = jiggle(self.rng, int(zeros.sum()))
                    dist2[zeros] += component[zeros] ** 2

            dist = np.sqrt(np.where(overlap, dist2, 1.0))
            push = np.where(overlap, (reach - dist) / dist * self.strength, 0.0)
            velocities += np.sum(delta * (push * share)[:, :, np.newaxis], axis=1)
