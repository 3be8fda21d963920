"""
neurolayout CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import demo, focus, metrics, simulate


@click.group()
@click.version_option(package_name="neurolayout")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """neurolayout: Adaptive layout for knowledge graphs.

    Lays out concept graphs with a cognitive-load-aware force simulation
    and previews focus lock dimming.

    \b
    Quick Start:
      neurolayout demo
      neurolayout simulate graph.json --load 0.7
      neurolayout metrics graph.json
      neurolayout focus graph.json goal:python
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(simulate.simulate)
main.add_command(metrics.metrics)
main.add_command(focus.focus)
main.add_command(demo.demo)

if __name__ == "__main__":
    main()
