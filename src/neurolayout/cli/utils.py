"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing and graph/config loading shared by all commands.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from ..core.config import LayoutConfig, load_config
from ..core.exceptions import ConfigError, GraphLoadError
from ..core.types import NeuralGraph
from ..pipeline.providers import load_graph_file

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_FILES = ("graph.json", ".neurolayout/graph.json")


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def resolve_graph_path(graph_file: str) -> Optional[Path]:
    """
    Resolve a file or directory argument to a graph JSON path.

    Directories are searched for graph.json, then .neurolayout/graph.json.
    """
    graph_path = Path(graph_file)
    if graph_path.is_dir():
        for name in DEFAULT_GRAPH_FILES:
            candidate = graph_path / name
            if candidate.exists():
                return candidate
        return None
    return graph_path


def load_graph(graph_file: str) -> Optional[NeuralGraph]:
    """
    Load a NeuralGraph for a command, reporting problems to the user.

    Returns None if the graph could not be loaded.
    """
    graph_path = resolve_graph_path(graph_file)
    if graph_path is None:
        echo_error(f"No graph found in directory: {graph_file}")
        click.echo("Expected graph.json. Run 'neurolayout demo' to create one.")
        return None

    try:
        return load_graph_file(graph_path)
    except GraphLoadError as e:
        echo_error(str(e))
        return None


def load_layout_config(config_path: Optional[str], **overrides) -> Optional[LayoutConfig]:
    """Load config from YAML and apply non-None command line overrides."""
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ConfigError as e:
        echo_error(str(e))
        return None

    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        try:
            config = LayoutConfig.model_validate({**config.model_dump(), **updates})
        except ValidationError as e:
            echo_error(f"Invalid option: {e.errors()[0]['msg']}")
            return None
    return config
