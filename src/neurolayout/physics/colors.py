"""
Theme-aware color palettes.

Colors never influence the physics; they are returned to the renderer next
to positions. Node palettes are keyed by node type and link colors by
relation type. Types without an entry use the concept / association entry.
"""

import re
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from ..core.config import Theme
from ..core.types import NodeType, RelationType

RGBA_PATTERN = re.compile(r"rgba\((\d+),\s*(\d+),\s*(\d+),\s*([\d.]+)\)")


class NodePalette(BaseModel):
    default: str
    active: str
    mastered: str
    weak: str

    model_config = ConfigDict(frozen=True)


class UiPalette(BaseModel):
    background: str
    canvas: str
    text: str
    text_secondary: str
    glass_highlight: str

    model_config = ConfigDict(frozen=True)


class ColorScheme(BaseModel):
    nodes: Dict[NodeType, NodePalette]
    links: Dict[RelationType, str]
    ui: UiPalette

    model_config = ConfigDict(frozen=True)

    def node_palette(self, node_type: NodeType) -> NodePalette:
        return self.nodes.get(node_type) or self.nodes[NodeType.CONCEPT]

    def link_base(self, relation: RelationType) -> str:
        return self.links.get(relation) or self.links[RelationType.ASSOCIATION]


def _palette(default: str, active: str, mastered: str, weak: str) -> NodePalette:
    return NodePalette(default=default, active=active, mastered=mastered, weak=weak)


DARK_SCHEME = ColorScheme(
    nodes={
        NodeType.CONCEPT: _palette("#0EA5E9", "#EF4444", "#10B981", "#F59E0B"),
        NodeType.SKILL: _palette("#8B5CF6", "#EF4444", "#10B981", "#F59E0B"),
        NodeType.GOAL: _palette("#06B6D4", "#EF4444", "#10B981", "#F59E0B"),
        NodeType.MEMORY: _palette("#32808D", "#EF4444", "#10B981", "#F59E0B"),
        # Habits are green by default, so mastery uses teal instead
        NodeType.HABIT: _palette("#10B981", "#EF4444", "#32808D", "#F59E0B"),
    },
    links={
        RelationType.ASSOCIATION: "rgba(14, 165, 233, 0.6)",
        RelationType.PREREQUISITE: "rgba(139, 92, 246, 0.8)",
        RelationType.SIMILARITY: "rgba(245, 158, 11, 0.6)",
        RelationType.TEMPORAL: "rgba(16, 185, 129, 0.5)",
        RelationType.SPATIAL: "rgba(6, 182, 212, 0.7)",
    },
    ui=UiPalette(
        background="#0A0F1A",
        canvas="#111827",
        text="#F0F9FF",
        text_secondary="#E0F2FE",
        glass_highlight="rgba(255, 255, 255, 0.1)",
    ),
)

LIGHT_SCHEME = ColorScheme(
    nodes={
        NodeType.CONCEPT: _palette("#0284C7", "#DC2626", "#059669", "#D97706"),
        NodeType.SKILL: _palette("#7C3AED", "#DC2626", "#059669", "#D97706"),
        NodeType.GOAL: _palette("#0891B2", "#DC2626", "#059669", "#D97706"),
        NodeType.MEMORY: _palette("#0F766E", "#DC2626", "#059669", "#D97706"),
        NodeType.HABIT: _palette("#059669", "#DC2626", "#0F766E", "#D97706"),
    },
    links={
        RelationType.ASSOCIATION: "rgba(2, 132, 199, 0.6)",
        RelationType.PREREQUISITE: "rgba(124, 58, 237, 0.8)",
        RelationType.SIMILARITY: "rgba(217, 119, 6, 0.6)",
        RelationType.TEMPORAL: "rgba(5, 150, 105, 0.5)",
        RelationType.SPATIAL: "rgba(8, 145, 178, 0.7)",
    },
    ui=UiPalette(
        background="#FAFBFC",
        canvas="#FFFFFF",
        text="#1E293B",
        text_secondary="#64748B",
        glass_highlight="rgba(0, 0, 0, 0.05)",
    ),
)


def scheme_for(theme: Theme | str) -> ColorScheme:
    """Return the palette for a theme; unknown themes get the dark scheme."""
    try:
        theme = Theme(theme)
    except ValueError:
        theme = Theme.DARK
    return LIGHT_SCHEME if theme == Theme.LIGHT else DARK_SCHEME


def with_opacity(color: str, opacity: float) -> str:
    """Replace the alpha of an rgba() color. Other formats pass through."""
    match = RGBA_PATTERN.match(color)
    if not match:
        return color
    r, g, b, _ = match.groups()
    return f"rgba({r}, {g}, {b}, {opacity:g})"


def parse_opacity(color: str) -> Optional[float]:
    match = RGBA_PATTERN.match(color)
    return float(match.group(4)) if match else None
