"""Unit tests for the focus emphasis law."""

import pytest

from neurolayout.focus.emphasis import EntityKind, Role, emphasis


class TestNodeEmphasis:
    @pytest.mark.parametrize("role", list(Role))
    def test_no_progress_is_fully_visible(self, role):
        assert emphasis(0.0, role) == 1.0

    def test_fully_engaged(self):
        assert emphasis(1.0, Role.FOCUS) == 1.0
        assert emphasis(1.0, Role.CONNECTED) == pytest.approx(0.6)
        assert emphasis(1.0, Role.DISTRACTION) == pytest.approx(0.2)

    def test_halfway(self):
        assert emphasis(0.5, Role.CONNECTED) == pytest.approx(0.8)
        assert emphasis(0.5, Role.DISTRACTION) == pytest.approx(0.6)

    def test_progress_is_clamped(self):
        assert emphasis(3.0, Role.DISTRACTION) == pytest.approx(0.2)
        assert emphasis(-1.0, Role.DISTRACTION) == 1.0


class TestLinkEmphasis:
    def test_fully_engaged(self):
        assert emphasis(1.0, Role.FOCUS, EntityKind.LINK) == pytest.approx(0.9)
        assert emphasis(1.0, Role.CONNECTED, EntityKind.LINK) == pytest.approx(0.5)
        assert emphasis(1.0, Role.DISTRACTION, EntityKind.LINK) == pytest.approx(0.1)

    def test_starting_point(self):
        for role in Role:
            assert emphasis(0.0, role, EntityKind.LINK) == pytest.approx(0.6)
