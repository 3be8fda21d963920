"""Shared fixtures for neurolayout tests."""

import pytest

from neurolayout.core.clock import ManualClock
from neurolayout.core.types import Link, NeuralGraph, Node


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def make_graph():
    """Factory for small graphs: make_graph(["a", "b"], [("a", "b")])."""

    def _make(node_ids, edges=(), **node_fields):
        nodes = [Node(id=node_id, label=node_id, **node_fields) for node_id in node_ids]
        links = [Link(source=s, target=t, strength=0.9) for s, t in edges]
        return NeuralGraph(nodes=nodes, links=links)

    return _make


@pytest.fixture
def triangle_graph(make_graph):
    """Triangle a-b-c plus an isolated node d."""
    return make_graph(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "a")])
