"""
Unit tests for the focus lock filter.

Ensures that:
1. Connected neighbors are found from links in any endpoint form.
2. Opacities follow the transition progress over time.
3. Releasing focus restores full opacity and is idempotent.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from neurolayout.core.config import LayoutConfig
from neurolayout.core.types import Link, Node
from neurolayout.focus.emphasis import Role
from neurolayout.focus.filter import FocusLockFilter, Transition, connected_ids, link_endpoints


@pytest.fixture
def chain_links():
    """A - B - C: C is two hops from A."""
    return [Link(source="A", target="B", strength=0.9), Link(source="B", target="C", strength=0.9)]


@pytest.fixture
def lock(clock, chain_links):
    f = FocusLockFilter(clock=clock)
    f.update_links(chain_links)
    return f


class TestConnectedIds:
    def test_raw_and_reference_links_agree(self):
        raw = [{"source": "A", "target": "B"}, {"source": "C", "target": "A"}]
        refs = [
            {"source": {"id": "A"}, "target": {"id": "B"}},
            SimpleNamespace(source=Node(id="C"), target=Node(id="A")),
        ]
        assert connected_ids("A", raw) == connected_ids("A", refs) == {"B", "C"}

    def test_no_focus(self, chain_links):
        assert connected_ids(None, chain_links) == frozenset()

    def test_self_loop_excluded(self):
        assert connected_ids("A", [{"source": "A", "target": "A"}]) == frozenset()

    def test_malformed_links_skipped(self):
        links = [{"source": None, "target": "A"}, {"source": "B", "target": "A"}]
        assert connected_ids("A", links) == {"B"}
        assert link_endpoints({"source": None, "target": "A"}) is None


class TestTransition:
    def test_linear_progress(self):
        t = Transition(0.8)
        t.retarget(1.0, now=0.0)
        assert t.value(0.4) == pytest.approx(0.5)
        assert t.value(5.0) == 1.0

    def test_retarget_mid_flight(self):
        t = Transition(1.0)
        t.retarget(1.0, now=0.0)
        t.retarget(0.0, now=0.5)
        assert t.value(0.5) == pytest.approx(0.5)
        assert t.value(1.0) == pytest.approx(0.25)
        assert t.value(1.5) == 0.0


class TestFocusLock:
    def test_round_trip_fully_engaged(self, lock, clock, chain_links):
        lock.set_focus("A")
        assert lock.connected == {"B"}
        clock.advance(0.8)

        assert lock.progress() == 1.0
        assert lock.node_opacity("A") == 1.0
        assert lock.node_opacity("B") == pytest.approx(0.6)
        assert lock.node_opacity("C") == pytest.approx(0.2)
        assert lock.link_opacity(chain_links[0]) == pytest.approx(0.9)
        assert lock.link_opacity(chain_links[1]) == pytest.approx(0.5)

    def test_distraction_link(self, lock, clock):
        lock.update_links([Link(source="A", target="B"), Link(source="C", target="D")])
        lock.set_focus("A")
        clock.advance(0.8)
        assert lock.link_role(Link(source="C", target="D")) == Role.DISTRACTION
        assert lock.link_opacity(Link(source="C", target="D")) == pytest.approx(0.1)

    def test_halfway_through_transition(self, lock, clock):
        lock.set_focus("A")
        clock.advance(0.4)
        assert lock.node_opacity("B") == pytest.approx(0.8)

    def test_zero_progress_is_fully_visible(self, lock):
        lock.set_focus("A")
        assert lock.node_opacity("C") == 1.0
        assert not lock.is_engaged()

    def test_clear_focus_twice(self, lock, clock):
        lock.set_focus("A")
        clock.advance(0.8)
        lock.set_focus(None)
        lock.set_focus(None)

        assert lock.focus_id is None
        assert lock.connected == frozenset()
        assert lock.node_opacity("C") == 1.0
        assert lock.node_role("C") is None

    def test_progress_animates_back(self, lock, clock):
        lock.set_focus("A")
        clock.advance(0.8)
        lock.set_focus(None)
        clock.advance(0.4)
        assert lock.progress() == pytest.approx(0.5)

    def test_links_update_recomputes_neighbors(self, lock):
        lock.set_focus("A")
        lock.update_links([Link(source="A", target="C")])
        assert lock.connected == {"C"}

    def test_switching_focus(self, lock, clock):
        lock.set_focus("A")
        clock.advance(0.8)
        lock.set_focus("C")
        assert lock.connected == {"B"}
        assert lock.node_role("A") == Role.DISTRACTION

    def test_glow_triangle_wave(self, lock, clock):
        assert lock.glow() == 0.0
        lock.set_focus("A")
        clock.advance(1.0)
        assert lock.glow() == pytest.approx(0.5)
        clock.advance(1.0)
        assert lock.glow() == pytest.approx(1.0)
        clock.advance(1.0)
        assert lock.glow() == pytest.approx(0.5)

    def test_custom_transition_duration(self, clock):
        lock = FocusLockFilter(clock=clock, config=LayoutConfig(transition_ms=200))
        lock.set_focus("A")
        clock.advance(0.2)
        assert lock.progress() == 1.0

    def test_focus_forwarded_to_engine(self, clock):
        engine = MagicMock()
        lock = FocusLockFilter(clock=clock, engine=engine)
        lock.set_focus("A")
        lock.set_focus(None)
        assert [c.args for c in engine.set_focus_node.call_args_list] == [("A",), (None,)]
