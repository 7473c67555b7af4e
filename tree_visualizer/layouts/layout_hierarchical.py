"""
Hierarchical Layout - Top-down rows by depth.

Each depth level becomes a horizontal row:
- Single-node rows sit on the canvas centre line
- Wider rows use fixed spacing, centred as a group
- Row order is document (pre-order) order, not subtree-balanced
"""

from typing import Dict, List

from ..core.math_utils import Vector2D
from ..core.node import TreeNode
from ..core.registry import register_layout
from .base import LayoutStrategy, CanvasSize


def collect_levels(root: TreeNode) -> Dict[int, List[TreeNode]]:
    """Group visible nodes by level, preserving pre-order within each level."""
    levels: Dict[int, List[TreeNode]] = {}

    def visit(node: TreeNode, level: int) -> None:
        levels.setdefault(level, []).append(node)
        if node.expanded:
            for child in node.children:
                visit(child, level + 1)

    visit(root, 0)
    return levels


@register_layout("hierarchical")
class HierarchicalLayout(LayoutStrategy):
    """Rows of nodes, one per depth level."""

    name = "hierarchical"
    description = "Top-down rows grouped by depth"

    def apply(self, root: TreeNode, canvas_size: CanvasSize, scale: float) -> None:
        width = canvas_size[0]
        cfg = self.config
        spacing = cfg.min_node_spacing * scale

        for level, nodes in collect_levels(root).items():
            y = level * cfg.level_height * scale + cfg.base_node_radius + cfg.top_margin

            if len(nodes) == 1:
                nodes[0].position = Vector2D(width / 2, y)
                continue

            total_width = (len(nodes) - 1) * spacing
            start_x = (width - total_width) / 2
            for i, node in enumerate(nodes):
                node.position = Vector2D(start_x + i * spacing, y)
