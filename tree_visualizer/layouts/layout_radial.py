"""
Radial Layout - Nested wedges around the root.

Creates a star that fans outward from the canvas centre:
- Root sits at the centre and owns the full circle
- Each node splits its wedge evenly among its children
- Ring radius shrinks geometrically with depth
"""

import math

from ..core.math_utils import Vector2D, slice_midpoints
from ..core.node import TreeNode
from ..core.registry import register_layout
from .base import LayoutStrategy, CanvasSize


@register_layout("radial")
class RadialLayout(LayoutStrategy):
    """Children confined to equal slices of their parent's wedge."""

    name = "radial"
    description = "Star pattern with nested angular sectors"

    def apply(self, root: TreeNode, canvas_size: CanvasSize, scale: float) -> None:
        root.position = self.canvas_center(canvas_size)
        self._place_children(
            root, 0.0, 2 * math.pi, self.config.radial_base_radius * scale
        )

    def _place_children(self, node: TreeNode, start_angle: float,
                        end_angle: float, radius: float) -> None:
        if not node.children or not node.expanded:
            return

        step = (end_angle - start_angle) / len(node.children)
        angles = slice_midpoints(len(node.children), start_angle, end_angle - start_angle)

        for child, angle in zip(node.children, angles):
            child.position = node.position + Vector2D.from_angle(angle, radius)
            self._place_children(
                child,
                angle - step / 2,
                angle + step / 2,
                radius * self.config.radial_decay,
            )
