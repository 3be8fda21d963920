"""
Focus Command - Preview focus lock dimming.

Shows which nodes a focus lock on NODE_ID keeps visible and the opacity
each node and link would have at a given point of the transition.
"""

import json

import click
from rich.console import Console
from rich.table import Table

from ...core.clock import ManualClock
from ...core.exceptions import NodeNotFoundError
from ...focus.filter import FocusLockFilter
from ..utils import echo_error, load_graph, load_layout_config

console = Console()

ROLE_STYLES = {"focus": "bold green", "connected": "cyan", "distraction": "dim"}


@click.command()
@click.argument("graph_file")
@click.argument("node_id")
@click.option("--progress", default=1.0, type=click.FloatRange(0.0, 1.0),
              help="Transition progress to evaluate (0-1)")
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--json", "json_mode", is_flag=True, help="Output opacities as JSON")
def focus(graph_file: str, node_id: str, progress: float, config_path: str, json_mode: bool):
    """
    Show per-node and per-link opacity with NODE_ID as focus target.
    """
    graph = load_graph(graph_file)
    if graph is None:
        raise SystemExit(1)

    config = load_layout_config(config_path)
    if config is None:
        raise SystemExit(1)

    if graph.get_node(node_id) is None:
        echo_error(str(NodeNotFoundError(node_id)))
        raise SystemExit(1)

    clock = ManualClock()
    lock = FocusLockFilter(clock=clock, config=config)
    lock.update_links(graph.links)
    lock.set_focus(node_id)
    clock.advance(progress * config.transition_ms / 1000.0)

    node_rows = [
        {"id": node.id, "role": lock.node_role(node.id).value, "opacity": round(lock.node_opacity(node.id), 3)}
        for node in graph.nodes
    ]
    link_rows = [
        {"id": link.id, "role": lock.link_role(link).value, "opacity": round(lock.link_opacity(link), 3)}
        for link in graph.links
    ]

    if json_mode:
        click.echo(json.dumps({
            "meta": {"focus": node_id, "progress": progress, "connected": sorted(lock.connected)},
            "nodes": node_rows,
            "links": link_rows,
        }, indent=2))
        return

    table = Table(title=f"Focus lock on {node_id} (progress {progress:.2f})")
    table.add_column("Node")
    table.add_column("Role")
    table.add_column("Opacity", justify="right")
    for row in sorted(node_rows, key=lambda r: r["opacity"], reverse=True):
        style = ROLE_STYLES.get(row["role"], "")
        table.add_row(row["id"], f"[{style}]{row['role']}[/{style}]", f"{row['opacity']:.2f}")
    console.print(table)
    console.print(f"{len(lock.connected)} connected nodes, {len(graph.nodes) - len(lock.connected) - 1} dimmed")
