"""
Metrics Command - Network analysis for a graph snapshot.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from ...physics.engine import ForceSimulationEngine
from ..utils import load_graph

console = Console()


@click.command()
@click.argument("graph_file", default=".")
@click.option("--top", default=5, type=int, help="Number of most central nodes to list")
@click.option("--json", "json_mode", is_flag=True, help="Output metrics as JSON")
def metrics(graph_file: str, top: int, json_mode: bool):
    """
    Compute density, centrality, clustering and activation metrics.
    """
    graph = load_graph(graph_file)
    if graph is None:
        raise SystemExit(1)

    engine = ForceSimulationEngine(800, 600)
    engine.update_graph(graph)
    result = engine.calculate_network_metrics()
    engine.stop()

    if json_mode:
        click.echo(json.dumps({"meta": {"status": "success"}, "data": result.model_dump()}, indent=2))
        return

    summary = Table(title="Network Metrics", show_header=False)
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", justify="right")
    summary.add_row("Nodes", str(len(graph.nodes)))
    summary.add_row("Links", str(len(graph.links)))
    summary.add_row("Density", f"{result.density:.3f}")
    summary.add_row("Avg. clustering", f"{result.average_cluster_coefficient:.3f}")
    summary.add_row("Cognitive complexity", f"{result.cognitive_complexity:.3f}")
    dist = result.activation_distribution
    summary.add_row("Activation low/med/high", f"{dist.low}/{dist.medium}/{dist.high}")
    console.print(summary)

    ranked = sorted(result.centrality_scores.items(), key=lambda item: item[1], reverse=True)
    if ranked and top > 0:
        central = Table(title=f"Top {min(top, len(ranked))} by centrality")
        central.add_column("Node")
        central.add_column("Centrality", justify="right")
        for node_id, score in ranked[:top]:
            central.add_row(node_id, f"{score:.3f}")
        console.print(central)
