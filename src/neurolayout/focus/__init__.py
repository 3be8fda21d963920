"""Focus lock attention filtering."""

from .emphasis import EntityKind, Role, emphasis
from .filter import FocusLockFilter, connected_ids

__all__ = ["FocusLockFilter", "connected_ids", "emphasis", "Role", "EntityKind"]
