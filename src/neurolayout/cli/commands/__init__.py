"""
CLI command modules.

Each module defines one click command registered in cli/main.py.
"""

from . import demo, focus, metrics, simulate

__all__ = ["demo", "focus", "metrics", "simulate"]
