"""Unit tests for the individual force primitives and the simulation loop."""

import math

import numpy as np
import pytest

from neurolayout.core.types import Link, Node, Pin
from neurolayout.physics.forces import CenterForce, CollideForce, Force, LinkForce, ManyBodyForce
from neurolayout.physics.simulation import Simulation


def placed(node_id, x, y, radius=10.0):
    return Node(id=node_id, x=x, y=y, vx=0.0, vy=0.0, radius=radius)


def state(*points):
    """Positions for the given points and zero velocities."""
    positions = np.array(points, dtype=float)
    return positions, np.zeros_like(positions)


class TestForceBase:
    def test_force_is_abstract(self):
        with pytest.raises(TypeError):
            Force()


class TestLinkForce:
    def test_pulls_stretched_link_together(self):
        force = LinkForce(distance=lambda link: 100.0, strength=lambda link: 1.0)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 200.0, 0.0)])
        force.set_links([Link(source="a", target="b")])
        positions, velocities = state((0.0, 0.0), (200.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert velocities[0, 0] == pytest.approx(50.0)
        assert velocities[1, 0] == pytest.approx(-50.0)

    def test_degree_bias_moves_leaf_more(self):
        nodes = [placed("hub", 0.0, 0.0), placed("x", 200.0, 0.0), placed("y", -200.0, 0.0)]
        force = LinkForce(distance=lambda link: 100.0, strength=lambda link: 1.0)
        force.initialize(nodes)
        force.set_links([Link(source="hub", target="x"), Link(source="hub", target="y")])
        positions, velocities = state((0.0, 0.0), (200.0, 0.0), (-200.0, 0.0))

        force.apply(1.0, positions, velocities)
        # hub has degree 2, so each leaf takes 2/3 of its link's correction
        assert velocities[1, 0] == pytest.approx(-100.0 * 2 / 3)
        assert velocities[0, 0] == pytest.approx(0.0, abs=1e-6)

    def test_skips_links_with_missing_endpoints(self):
        force = LinkForce(distance=lambda link: 100.0, strength=lambda link: 1.0)
        force.initialize([placed("a", 0.0, 0.0)])
        force.set_links([Link(source="a", target="ghost")])
        positions, velocities = state((0.0, 0.0))

        assert force.active_link_count == 0
        force.apply(1.0, positions, velocities)
        assert not velocities.any()

    def test_refresh_reevaluates_accessors(self):
        strength = {"value": 0.0}
        force = LinkForce(distance=lambda link: 100.0, strength=lambda link: strength["value"])
        force.initialize([placed("a", 0.0, 0.0), placed("b", 200.0, 0.0)])
        force.set_links([Link(source="a", target="b")])
        positions, velocities = state((0.0, 0.0), (200.0, 0.0))

        strength["value"] = 1.0
        force.refresh()
        force.apply(1.0, positions, velocities)
        assert velocities[0, 0] > 0


class TestManyBodyForce:
    def test_negative_strength_repels(self):
        force = ManyBodyForce(strength=lambda node: -30.0)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 100.0, 0.0)])
        positions, velocities = state((0.0, 0.0), (100.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert velocities[0, 0] == pytest.approx(-0.3)
        assert velocities[1, 0] == pytest.approx(0.3)

    def test_ignores_pairs_beyond_distance_max(self):
        force = ManyBodyForce(strength=lambda node: -30.0, distance_max=50.0)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 100.0, 0.0)])
        positions, velocities = state((0.0, 0.0), (100.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert not velocities.any()

    def test_close_pairs_are_softened(self):
        force = ManyBodyForce(strength=lambda node: -30.0, distance_min=25.0)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 1.0, 0.0)])
        positions, velocities = state((0.0, 0.0), (1.0, 0.0))

        force.apply(1.0, positions, velocities)
        # dist2 = 1 is softened to sqrt(625 * 1) = 25
        assert velocities[0, 0] == pytest.approx(-30.0 / 25.0)

    def test_coincident_nodes_stay_finite(self):
        force = ManyBodyForce(strength=lambda node: -30.0)
        force.initialize([placed("a", 5.0, 5.0), placed("b", 5.0, 5.0)])
        positions, velocities = state((5.0, 5.0), (5.0, 5.0))

        force.apply(1.0, positions, velocities)
        assert np.isfinite(velocities).all()


class TestCenterForce:
    def test_moves_centroid(self):
        force = CenterForce(100.0, 100.0)
        positions, velocities = state((0.0, 0.0), (10.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert positions[:, 0].tolist() == [95.0, 105.0]
        assert positions[:, 1].tolist() == [100.0, 100.0]


class TestCollideForce:
    def test_pushes_overlapping_nodes_apart(self):
        force = CollideForce(radius=lambda node: node.radius, strength=1.0)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 1.0, 0.0)])
        positions, velocities = state((0.0, 0.0), (1.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert velocities[0, 0] == pytest.approx(-9.5)
        assert velocities[1, 0] == pytest.approx(9.5)

    def test_larger_node_moves_less(self):
        force = CollideForce(radius=lambda node: node.radius, strength=1.0)
        force.initialize([placed("big", 0.0, 0.0, radius=30.0), placed("small", 10.0, 0.0, radius=10.0)])
        positions, velocities = state((0.0, 0.0), (10.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert abs(velocities[0, 0]) < abs(velocities[1, 0])

    def test_distant_nodes_unaffected(self):
        force = CollideForce(radius=lambda node: node.radius)
        force.initialize([placed("a", 0.0, 0.0), placed("b", 100.0, 0.0)])
        positions, velocities = state((0.0, 0.0), (100.0, 0.0))

        force.apply(1.0, positions, velocities)
        assert not velocities.any()


class TestSimulation:
    def test_places_unpositioned_nodes(self):
        sim = Simulation()
        nodes = [Node(id=str(i)) for i in range(5)]
        sim.set_nodes(nodes)

        positions = {(round(n.x, 6), round(n.y, 6)) for n in nodes}
        assert len(positions) == 5
        assert all(math.isfinite(n.x) and math.isfinite(n.y) for n in nodes)

    def test_alpha_decays_toward_target(self):
        sim = Simulation()
        sim.alpha = 0.5
        sim.alpha_decay = 0.1
        sim.tick()
        assert sim.alpha == pytest.approx(0.45)

    def test_velocity_decay_is_friction(self):
        sim = Simulation()
        node = placed("a", 0.0, 0.0)
        node.vx = 10.0
        sim.set_nodes([node])
        sim.velocity_decay = 0.3

        sim.tick()
        assert node.vx == pytest.approx(7.0)
        assert node.x == pytest.approx(7.0)
        assert isinstance(node.x, float)

    def test_pinned_nodes_hold_position(self):
        sim = Simulation()
        sim.force("charge", ManyBodyForce(strength=lambda node: -100.0))
        pinned = placed("p", 0.0, 0.0)
        pinned.pin = Pin(x=3.0, y=4.0)
        free = placed("f", 5.0, 4.0)
        sim.set_nodes([pinned, free])

        sim.tick(3)
        assert (pinned.x, pinned.y, pinned.vx, pinned.vy) == (3.0, 4.0, 0.0, 0.0)
        assert free.x > 5.0

    def test_empty_simulation_ticks(self):
        sim = Simulation()
        sim.force("center", CenterForce(10.0, 10.0))
        sim.force("collide", CollideForce(radius=lambda node: node.radius))
        sim.tick()
        assert sim.tick_count == 1

    def test_frames_stop_below_alpha_min(self, clock):
        sim = Simulation(clock=clock)
        ended = []
        sim.on_end(lambda: ended.append(True))
        sim.set_nodes([placed("a", 0.0, 0.0)])
        sim.alpha = 0.00101
        sim.restart()

        clock.advance(1.0)
        assert ended == [True]
        assert not sim.is_scheduled

    def test_stop_is_idempotent(self, clock):
        sim = Simulation(clock=clock)
        sim.restart()
        sim.stop()
        sim.stop()
        clock.advance(1.0)
        assert sim.tick_count == 0
