"""
Demo Command - Write a sample knowledge graph.
"""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from ...core.demo import DemoGraphBuilder
from ..utils import echo_warning

console = Console()


@click.command()
@click.option("-o", "--output", default="graph.json", help="Where to write the demo graph")
@click.option("--seed", default=7, type=int, help="Random seed for node and link attributes")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def demo(output: str, seed: int, force: bool):
    """
    Generate a demo graph to try the layout commands on.
    """
    output_path = Path(output)
    if output_path.exists() and not force:
        echo_warning(f"{output_path} already exists. Use --force to overwrite.")
        return

    graph = DemoGraphBuilder(seed=seed).build()
    output_path.write_text(json.dumps(graph.to_dict(), indent=2))

    console.print(Panel.fit("🧠 [bold blue]Demo graph created[/bold blue]", border_style="blue"))
    console.print(f"   {len(graph.nodes)} nodes, {len(graph.links)} links in [dim]{output_path}[/dim]")
    console.print("\n[bold green]Try these commands:[/bold green]")
    console.print(f"1. [bold cyan]neurolayout simulate {output_path}[/bold cyan]")
    console.print(f"2. [bold cyan]neurolayout metrics {output_path}[/bold cyan]")
    console.print(f"3. [bold cyan]neurolayout focus {output_path} goal:python[/bold cyan]")
