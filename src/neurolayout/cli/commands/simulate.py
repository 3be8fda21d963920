"""
Simulate Command - Lay out a graph and export positions.

Runs the force simulation on a manual clock, frame by frame, through the
same session and update pipeline a live renderer would use, then writes the
settled layout (positions, colors, opacities) as JSON.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ...core.clock import ManualClock
from ...pipeline.providers import StaticGraphProvider
from ...pipeline.session import LayoutSession
from ...pipeline.update import FrameSnapshot
from ..utils import echo_error, echo_info, echo_success, load_graph, load_layout_config

logger = logging.getLogger(__name__)


def run_layout(session: LayoutSession, clock: ManualClock, max_frames: int) -> int:
    """Advance the clock until the engine settles or max_frames elapse."""
    engine = session.engine
    frame = session.config.frame_interval_ms / 1000.0
    frames = 0
    while frames < max_frames and engine.simulation.is_scheduled:
        clock.advance(frame)
        frames += 1
    logger.debug(f"Ran {frames} frames, alpha {engine.alpha:.4f}")
    return frames


def export_layout(session: LayoutSession, snapshot: Optional[FrameSnapshot]) -> Dict[str, Any]:
    engine = session.engine
    nodes = snapshot.nodes if snapshot else engine.nodes
    node_rows: List[Dict[str, Any]] = [
        {
            "id": node.id,
            "x": round(node.x, 3),
            "y": round(node.y, 3),
            "radius": node.radius,
            "color": engine.get_node_color(node),
            "opacity": round(session.node_opacity(node.id), 3),
        }
        for node in nodes
    ]
    link_rows = [
        {
            "id": link.id,
            "source": link.source,
            "target": link.target,
            "color": engine.get_link_color(link),
            "opacity": round(session.link_opacity(link), 3),
        }
        for link in engine.links
    ]
    return {
        "meta": {
            "width": engine.width,
            "height": engine.height,
            "theme": engine.theme.value,
            "cognitive_load": engine.cognitive_load,
            "alpha": engine.alpha,
            "focus": session.focus.focus_id,
            "skipped_nodes": snapshot.skipped_nodes if snapshot else 0,
        },
        "nodes": node_rows,
        "links": link_rows,
    }


@click.command()
@click.argument("graph_file", default=".")
@click.option("-o", "--output", default="layout.json", help="Output JSON file")
@click.option("--frames", default=600, type=int, help="Maximum frames to simulate")
@click.option("--load", "cognitive_load", default=0.5, type=float, help="Cognitive load (0-1)")
@click.option("--focus", "focus_id", default=None, help="Node id to focus")
@click.option("--width", default=None, type=float, help="Viewport width")
@click.option("--height", default=None, type=float, help="Viewport height")
@click.option("--theme", type=click.Choice(["dark", "light"]), default=None)
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.option("--json", "json_mode", is_flag=True, help="Print layout JSON to stdout")
def simulate(
    graph_file: str,
    output: str,
    frames: int,
    cognitive_load: float,
    focus_id: Optional[str],
    width: Optional[float],
    height: Optional[float],
    theme: Optional[str],
    config_path: Optional[str],
    json_mode: bool,
):
    """
    Run the layout simulation and export node positions.
    """
    graph = load_graph(graph_file)
    if graph is None:
        raise SystemExit(1)

    config = load_layout_config(config_path, width=width, height=height, theme=theme)
    if config is None:
        raise SystemExit(1)

    clock = ManualClock()
    delivered: List[FrameSnapshot] = []
    session = LayoutSession(
        StaticGraphProvider(graph),
        consumer=delivered.append,
        config=config,
        clock=clock,
    )
    if session.engine is None:
        echo_error(f"Simulation unavailable: {session.error}")
        raise SystemExit(1)

    session.set_cognitive_load(cognitive_load)
    session.refresh()
    if focus_id:
        session.set_focus(focus_id)

    ran = run_layout(session, clock, frames)
    session.pipeline.flush()
    layout = export_layout(session, delivered[-1] if delivered else None)
    stats = session.pipeline.stats
    session.close()

    if json_mode:
        click.echo(json.dumps(layout, indent=2))
        return

    output_path = Path(output)
    output_path.write_text(json.dumps(layout, indent=2))
    echo_success(f"Generated: {output_path}")
    echo_info(f"{ran} frames, {stats.delivered} deliveries, {stats.throttled} throttled ticks")
