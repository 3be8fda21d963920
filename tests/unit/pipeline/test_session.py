"""Unit tests for LayoutSession wiring and degraded mode."""

from unittest.mock import MagicMock, patch

import pytest

from neurolayout.core.exceptions import EngineInitError
from neurolayout.core.result import Err
from neurolayout.pipeline.providers import DemoGraphProvider, StaticGraphProvider
from neurolayout.pipeline.session import LayoutSession, SessionStatus


@pytest.fixture
def received():
    return []


@pytest.fixture
def session(clock, received, triangle_graph):
    return LayoutSession(StaticGraphProvider(triangle_graph), consumer=received.append, clock=clock)


class TestLifecycle:
    def test_refresh_makes_session_ready(self, session):
        graph = session.refresh()
        assert graph is not None
        assert session.status == SessionStatus.READY
        assert len(session.engine.nodes) == 4

    def test_frames_reach_consumer(self, session, received, clock):
        session.refresh()
        clock.advance(0.5)
        assert received
        assert all(len(snapshot.nodes) == 4 for snapshot in received)

    def test_close_is_idempotent(self, session, received, clock):
        session.refresh()
        session.close()
        session.close()

        assert session.status == SessionStatus.CLOSED
        assert session.engine.is_stopped
        clock.advance(1.0)
        assert received == []
        assert session.refresh() is None

    def test_provider_failure_is_absorbed(self, clock, received):
        provider = MagicMock()
        provider.generate_graph.side_effect = RuntimeError("generator down")
        session = LayoutSession(provider, consumer=received.append, clock=clock)

        assert session.refresh() is None
        assert isinstance(session.error, RuntimeError)
        assert session.status == SessionStatus.LOADING

    def test_cognitive_load_applies_to_engine(self, session):
        session.refresh()
        session.set_cognitive_load(0.9)
        assert session.engine.cognitive_load == 0.9

    def test_load_set_before_refresh_is_kept(self, session):
        session.set_cognitive_load(0.2)
        session.refresh()
        assert session.engine.cognitive_load == 0.2

    def test_cosmetic_refresh_keeps_settled_layout(self, session, make_graph):
        session.refresh()
        session.engine.simulation.alpha = 0.004
        session.engine.tick()
        assert not session.engine.is_running()

        session.provider.graph = make_graph(
            ["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "a")], mastery_level=0.8
        )
        session.refresh()
        assert not session.engine.is_running()


class TestInteraction:
    def test_focus_uses_current_links(self, session, clock):
        session.refresh()
        session.set_focus("a")
        clock.advance(0.8)

        assert session.focus.connected == {"b", "c"}
        assert session.node_opacity("d") == pytest.approx(0.2)
        assert session.engine.focus_node_id == "a"

    def test_hit_test_and_drag(self, session, clock):
        session.refresh()
        clock.advance(0.2)
        node = session.engine.nodes[0]

        assert session.node_at(node.x, node.y) is node
        assert session.drag_start(node.id)
        assert session.drag_move(node.id, 10.0, 10.0)
        assert session.drag_end(node.id)
        clock.advance(0.2)
        assert node.pin is None

    def test_colors(self, session, triangle_graph):
        session.refresh()
        assert session.node_color(triangle_graph.nodes[0]).startswith("#")
        assert session.link_color(triangle_graph.links[0]).startswith("rgba(")

    def test_demo_provider(self, clock, received):
        session = LayoutSession(DemoGraphProvider(seed=1), consumer=received.append, clock=clock)
        graph = session.refresh()
        assert len(graph.nodes) == 19
        assert len(graph.links) == 27


class TestDegradedMode:
    @pytest.fixture
    def degraded(self, clock, received, triangle_graph):
        with patch(
            "neurolayout.pipeline.session.create_engine",
            return_value=Err(EngineInitError("no canvas")),
        ):
            return LayoutSession(StaticGraphProvider(triangle_graph), consumer=received.append, clock=clock)

    def test_starts_degraded(self, degraded):
        assert degraded.engine is None
        assert degraded.status == SessionStatus.DEGRADED
        assert isinstance(degraded.error, EngineInitError)

    def test_operations_are_no_ops(self, degraded, received, clock):
        assert degraded.refresh() is not None
        degraded.set_cognitive_load(0.9)
        degraded.resize(100, 100)
        assert not degraded.drag_start("a")
        assert not degraded.drag_move("a", 1.0, 1.0)
        assert not degraded.drag_end("a")
        assert degraded.node_at(0.0, 0.0) is None
        assert degraded.node_color(degraded.graph.nodes[0]) is None
        clock.advance(1.0)
        assert received == []
        assert degraded.status == SessionStatus.DEGRADED

    def test_focus_still_works(self, degraded, clock):
        degraded.refresh()
        degraded.set_focus("a")
        clock.advance(0.8)
        assert degraded.node_opacity("b") == pytest.approx(0.6)

    def test_close(self, degraded):
        degraded.close()
        degraded.close()
        assert degraded.is_closed
