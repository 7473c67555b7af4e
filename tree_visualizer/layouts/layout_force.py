"""
Force-Directed Layout - Spring/repulsion relaxation.

Simulates the tree as a physical system:
- Every pair of visible nodes repels (inverse-square)
- Every visible parent-child edge is a spring with a rest length
- Root is pinned at the canvas centre; everything else takes damped
  Euler steps for a fixed number of iterations

Cost is O(V^2) per iteration; intended for small-to-moderate trees.
"""

from typing import List, Tuple
import logging
import time

import numpy as np

from ..core.math_utils import Vector2D
from ..core.node import TreeNode
from ..core.registry import register_layout
from .base import LayoutStrategy, CanvasSize

logger = logging.getLogger(__name__)


def collect_visible(root: TreeNode) -> Tuple[List[TreeNode], np.ndarray]:
    """
    Visible nodes in pre-order plus their parent->child edges.

    Returns:
        (nodes, edges) where edges is an (E, 2) int array of node indices
    """
    nodes: List[TreeNode] = []
    edges: List[Tuple[int, int]] = []

    def visit(node: TreeNode) -> int:
        index = len(nodes)
        nodes.append(node)
        if node.expanded:
            for child in node.children:
                edges.append((index, visit(child)))
        return index

    visit(root)
    return nodes, np.array(edges, dtype=np.intp).reshape(-1, 2)


@register_layout("force")
class ForceDirectedLayout(LayoutStrategy):
    """Relaxes visible nodes under spring attraction and pairwise repulsion."""

    name = "force"
    description = "Physical simulation with springs and repulsion"

    def apply(self, root: TreeNode, canvas_size: CanvasSize, scale: float) -> None:
        cfg = self.config
        started = time.perf_counter()

        nodes, edges = collect_visible(root)
        width, height = canvas_size
        center = np.array([width / 2, height / 2], dtype=float)

        rng = np.random.default_rng(cfg.force_seed)
        positions = rng.random((len(nodes), 2)) * np.array([width, height], dtype=float)
        positions[0] = center

        repulsion = cfg.force_repulsion * scale
        rest_length = cfg.force_rest_length * scale

        for _ in range(cfg.force_iterations):
            forces = self._repulsion_forces(positions, repulsion)
            if len(edges):
                self._add_spring_forces(positions, edges, forces, rest_length)
            # Root stays pinned
            forces[0] = 0.0
            positions += forces * cfg.force_step

        for node, (x, y) in zip(nodes, positions):
            node.position = Vector2D(float(x), float(y))
        root.position = Vector2D(float(center[0]), float(center[1]))

        logger.debug(
            f"[Layout] force: {len(nodes)} nodes, {cfg.force_iterations} iterations "
            f"in {time.perf_counter() - started:.3f}s"
        )

    @staticmethod
    def _repulsion_forces(positions: np.ndarray, strength: float) -> np.ndarray:
        """Sum of (p_i - p_j)/d * strength/d^2 over all j != i, with d floored at 1."""
        diff = positions[:, None, :] - positions[None, :, :]
        distance = np.maximum(np.linalg.norm(diff, axis=2), 1.0)
        magnitude = strength / (distance ** 3)
        # Self-pairs have zero diff, so they contribute nothing
        return (diff * magnitude[:, :, None]).sum(axis=1)

    def _add_spring_forces(self, positions: np.ndarray, edges: np.ndarray,
                           forces: np.ndarray, rest_length: float) -> None:
        parents, children = edges[:, 0], edges[:, 1]
        diff = positions[children] - positions[parents]
        distance = np.maximum(np.linalg.norm(diff, axis=1), 1.0)
        pull = diff / distance[:, None] * ((distance - rest_length) * self.config.force_spring)[:, None]
        np.add.at(forces, parents, pull)
        np.subtract.at(forces, children, pull)
