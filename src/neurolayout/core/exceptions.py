"""
Exception hierarchy for neurolayout.

The physics core absorbs recoverable data problems (bad geometry, unknown
enum values) instead of raising. These exceptions are for the edges of the
system: loading graphs, reading configuration and constructing engines.
"""


class NeuroLayoutError(Exception):
    """Base class for all neurolayout errors."""


class GraphLoadError(NeuroLayoutError):
    """A graph snapshot could not be read or validated."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Failed to load graph from {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NodeNotFoundError(NeuroLayoutError):
    """A node id does not exist in the current graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class EngineInitError(NeuroLayoutError):
    """The simulation engine or one of its resources failed to construct."""


class ConfigError(NeuroLayoutError):
    """A configuration file is unreadable or invalid."""
