"""
Organic Layout - Jittered spread around each parent.

Creates a loose, hand-drawn looking tree:
- Siblings spread evenly around their parent, plus a small angular jitter
- Distance to the parent varies within a band
- Jitter is seeded from each node's own id, so a node keeps its offset
  between passes as long as its id and sibling slot are unchanged
"""

import math
import random

from ..core.math_utils import Vector2D, stable_seed
from ..core.node import TreeNode
from ..core.registry import register_layout
from .base import LayoutStrategy, CanvasSize


@register_layout("organic")
class OrganicLayout(LayoutStrategy):
    """Natural spread with deterministic per-node jitter."""

    name = "organic"
    description = "Natural spread with varied angles and distances"

    def apply(self, root: TreeNode, canvas_size: CanvasSize, scale: float) -> None:
        root.position = self.canvas_center(canvas_size)
        self._place_children(root, scale)

    def _place_children(self, node: TreeNode, scale: float) -> None:
        if not node.children or not node.expanded:
            return

        cfg = self.config
        count = len(node.children)
        base_distance = cfg.organic_base_distance * scale

        for i, child in enumerate(node.children):
            rng = random.Random(stable_seed(child.id))
            angle = (i / count) * 2 * math.pi + rng.random() * cfg.organic_jitter
            distance = base_distance + rng.random() * cfg.organic_distance_spread * scale

            child.position = node.position + Vector2D.from_angle(angle, distance)
            self._place_children(child, scale)
