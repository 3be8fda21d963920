"""
Delivery of simulation output to consumers.

- update: throttled, teardown-safe UpdatePipeline
- providers: GraphProvider implementations
- session: LayoutSession tying provider, engine, focus and pipeline together
"""

from .providers import DemoGraphProvider, FileGraphProvider, GraphProvider, StaticGraphProvider
from .session import LayoutSession, SessionStatus
from .update import FrameSnapshot, UpdatePipeline

__all__ = [
    "UpdatePipeline", "FrameSnapshot",
    "GraphProvider", "StaticGraphProvider", "FileGraphProvider", "DemoGraphProvider",
    "LayoutSession", "SessionStatus",
]
