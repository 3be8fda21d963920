"""
Graph providers.

A provider is whatever produces graph snapshots: a generator service, a
file, a fixed fixture. Sessions receive one explicitly instead of looking a
service up globally.
"""

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from ..core.demo import DemoGraphBuilder
from ..core.exceptions import GraphLoadError
from ..core.types import NeuralGraph

logger = logging.getLogger(__name__)


@runtime_checkable
class GraphProvider(Protocol):
    def generate_graph(self) -> NeuralGraph:
        ...


class StaticGraphProvider:
    """Always returns the same snapshot."""

    def __init__(self, graph: NeuralGraph):
        self.graph = graph

    def generate_graph(self) -> NeuralGraph:
        return self.graph


class FileGraphProvider:
    """Reads a snapshot from a JSON file on every call."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def generate_graph(self) -> NeuralGraph:
        return load_graph_file(self.path)


class DemoGraphProvider:
    """Serves the built-in demo graph."""

    def __init__(self, seed: int = 7):
        self.seed = seed

    def generate_graph(self) -> NeuralGraph:
        return DemoGraphBuilder(seed=self.seed).build()


def load_graph_file(path: str | Path) -> NeuralGraph:
    """
    Load and validate a graph snapshot from JSON.

    Raises GraphLoadError for missing files, bad JSON or invalid structure.
    """
    graph_path = Path(path)
    if not graph_path.exists():
        raise GraphLoadError(str(graph_path), "file not found")

    try:
        data = json.loads(graph_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise GraphLoadError(str(graph_path), str(e)) from e

    if not isinstance(data, dict):
        raise GraphLoadError(str(graph_path), "expected a JSON object")

    try:
        graph = NeuralGraph.from_dict(data)
    except ValidationError as e:
        raise GraphLoadError(str(graph_path), f"{e.error_count()} validation errors") from e

    logger.debug(f"Loaded {len(graph.nodes)} nodes and {len(graph.links)} links from {graph_path}")
    return graph
