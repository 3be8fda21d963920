"""
Network metrics for dashboards and health views.

Metrics are computed on demand from the engine's current node and link
lists. The neighbor structure is built as an undirected rustworkx graph;
density and centrality count raw links so duplicate links still weigh in.
"""

from itertools import combinations
from typing import Dict, List, Sequence

import rustworkx as rx
from pydantic import BaseModel, Field

from ..core.types import Link, Node

LOW_ACTIVATION = 0.3
HIGH_ACTIVATION = 0.7


class ActivationDistribution(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class NetworkMetrics(BaseModel):
    density: float = 0.0
    average_cluster_coefficient: float = 0.0
    centrality_scores: Dict[str, float] = Field(default_factory=dict)
    cognitive_complexity: float = 0.0
    activation_distribution: ActivationDistribution = Field(default_factory=ActivationDistribution)


def build_undirected(nodes: Sequence[Node], links: Sequence[Link]) -> tuple:
    """
    Build a simple undirected graph over the nodes.

    Returns (graph, id_to_index). Self-loops and links to unknown nodes are
    left out.
    """
    graph = rx.PyGraph(multigraph=False)
    id_to_idx: Dict[str, int] = {}
    for node in nodes:
        if node.id not in id_to_idx:
            id_to_idx[node.id] = graph.add_node(node.id)

    for link in links:
        u = id_to_idx.get(link.source)
        v = id_to_idx.get(link.target)
        if u is None or v is None or u == v:
            continue
        graph.add_edge(u, v, link.id)
    return graph, id_to_idx


def local_clustering(graph: rx.PyGraph, index: int) -> float:
    """Fraction of neighbor pairs that are themselves connected."""
    neighbors: List[int] = list(graph.neighbors(index))
    if len(neighbors) < 2:
        return 0.0
    closed = sum(1 for a, b in combinations(neighbors, 2) if graph.has_edge(a, b))
    possible = len(neighbors) * (len(neighbors) - 1) / 2
    return closed / possible


def calculate_network_metrics(nodes: Sequence[Node], links: Sequence[Link]) -> NetworkMetrics:
    node_count = len(nodes)
    if node_count == 0:
        return NetworkMetrics()

    link_count = len(links)
    max_links = node_count * (node_count - 1) / 2
    density = link_count / max_links if max_links > 0 else 0.0

    degree: Dict[str, int] = {}
    for link in links:
        degree[link.source] = degree.get(link.source, 0) + 1
        if link.target != link.source:
            degree[link.target] = degree.get(link.target, 0) + 1
    centrality = {
        node.id: degree.get(node.id, 0) / max(1, node_count - 1)
        for node in nodes
    }

    graph, id_to_idx = build_undirected(nodes, links)
    total_clustering = sum(local_clustering(graph, id_to_idx[node.id]) for node in nodes)

    complexity = sum(node.activation_level * node.cognitive_load for node in nodes) / node_count

    distribution = ActivationDistribution()
    for node in nodes:
        if node.activation_level < LOW_ACTIVATION:
            distribution.low += 1
        elif node.activation_level < HIGH_ACTIVATION:
            distribution.medium += 1
        else:
            distribution.high += 1

    return NetworkMetrics(
        density=density,
        average_cluster_coefficient=total_clustering / node_count,
        centrality_scores=centrality,
        cognitive_complexity=complexity,
        activation_distribution=distribution,
    )
