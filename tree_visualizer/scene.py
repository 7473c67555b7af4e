"""
Scene Builder - converts a laid-out tree into draw primitives.

The output is an ordered list handed to an external renderer:
1. One edge per visible parent->child pair
2. One node glyph (circle + label + accents) per visible node
3. Connection-strength lines between nearby selected nodes
4. Optional presentation overlay text

Painting details (shadows, gradients, animation) belong to the renderer.
"""

from typing import Dict, Any, List, Optional, Iterable, Union
from dataclasses import dataclass, field, asdict
from datetime import datetime, timedelta

from .config import LayoutConfig, SceneConfig
from .core.math_utils import Vector2D
from .core.node import TreeNode
from .hit_test import node_radius


@dataclass
class EdgePrimitive:
    start: Vector2D
    end: Vector2D
    parent_id: str
    child_id: str
    color: str
    width: float
    highlighted: bool = False
    kind: str = 'edge'


@dataclass
class NodePrimitive:
    node_id: str
    center: Vector2D
    radius: float
    fill: str
    label: Optional[str]
    text_color: str
    border_width: float = 1.0
    active: bool = False
    hovered: bool = False
    selected: bool = False
    shadow: bool = False
    collapsed: bool = False
    child_count: int = 0
    is_new: bool = False
    description: Optional[str] = None
    kind: str = 'node'


@dataclass
class ConnectionPrimitive:
    start: Vector2D
    end: Vector2D
    node_ids: tuple
    strength: float
    width: float
    opacity: float
    kind: str = 'connection'


@dataclass
class OverlayText:
    text: str
    kind: str = 'overlay'


Primitive = Union[EdgePrimitive, NodePrimitive, ConnectionPrimitive, OverlayText]


@dataclass
class Scene:
    """Ordered primitives for one frame."""

    primitives: List[Primitive] = field(default_factory=list)

    def of_kind(self, kind: str) -> List[Primitive]:
        return [p for p in self.primitives if p.kind == kind]

    @property
    def edges(self) -> List[EdgePrimitive]:
        return self.of_kind('edge')

    @property
    def nodes(self) -> List[NodePrimitive]:
        return self.of_kind('node')

    @property
    def connections(self) -> List[ConnectionPrimitive]:
        return self.of_kind('connection')

    def to_dict(self) -> Dict[str, Any]:
        return {'primitives': [asdict(p) for p in self.primitives]}


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of a '#RRGGBB' colour."""
    channels = []
    for i in (1, 3, 5):
        c = int(hex_color[i:i + 2], 16) / 255.0
        channels.append(c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4)
    r, g, b = channels
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_text_color(hex_color: str) -> str:
    return '#000000' if relative_luminance(hex_color) > 0.5 else '#FFFFFF'


class SceneBuilder:
    """Builds draw primitives from a tree that has already been laid out."""

    def __init__(self, config: Optional[SceneConfig] = None,
                 layout_config: Optional[LayoutConfig] = None):
        self.config = config or SceneConfig()
        self.layout_config = layout_config or LayoutConfig()

    def build(self, root: TreeNode, scale: float = 1.0,
              selected: Iterable[str] = (),
              active_id: Optional[str] = None,
              hovered_id: Optional[str] = None,
              show_labels: bool = True,
              show_3d: bool = True,
              presentation: bool = False,
              now: Optional[datetime] = None) -> Scene:
        """
        Produce the primitive list for the visible part of the tree.

        Nodes that have never been laid out (no position) are skipped.
        """
        selected_ids = set(selected)
        now = now or datetime.now()
        visible = [n for n in root.iter_visible() if n.position is not None]

        scene = Scene()
        scene.primitives.extend(self._edges(root, selected_ids))
        for node in visible:
            scene.primitives.append(self._node(
                node, scale, selected_ids, active_id, hovered_id,
                show_labels, show_3d, now,
            ))
        scene.primitives.extend(self._connections(visible, selected_ids))

        if presentation:
            scene.primitives.append(OverlayText(
                f"Nodes: {root.total_descendants + 1} | Depth: {root.depth + 1}"
            ))
        return scene

    def _edges(self, root: TreeNode, selected_ids: set) -> List[EdgePrimitive]:
        neutral = self.config.edge_color_dark if self.config.dark_mode else self.config.edge_color
        edges = []
        for node in root.iter_visible():
            if not node.expanded or node.position is None:
                continue
            for child in node.children:
                if child.position is None:
                    continue
                highlighted = node.id in selected_ids or child.id in selected_ids
                edges.append(EdgePrimitive(
                    start=node.position,
                    end=child.position,
                    parent_id=node.id,
                    child_id=child.id,
                    color=node.color if highlighted else neutral,
                    width=2.0 if highlighted else 1.0,
                    highlighted=highlighted,
                ))
        return edges

    def _node(self, node: TreeNode, scale: float, selected_ids: set,
              active_id: Optional[str], hovered_id: Optional[str],
              show_labels: bool, show_3d: bool, now: datetime) -> NodePrimitive:
        active = node.id == active_id
        hovered = node.id == hovered_id
        age = now - node.created_at
        return NodePrimitive(
            node_id=node.id,
            center=node.position,
            radius=node_radius(node, scale, self.layout_config),
            fill=node.color,
            label=node.label if show_labels else None,
            text_color=contrast_text_color(node.color),
            border_width=3.0 if active else (2.0 if hovered else 1.0),
            active=active,
            hovered=hovered,
            selected=node.id in selected_ids,
            shadow=show_3d,
            collapsed=bool(node.children) and not node.expanded,
            child_count=len(node.children),
            is_new=age < timedelta(hours=self.config.new_node_hours),
            description=node.description if active and show_labels else None,
        )

    def _connections(self, visible: List[TreeNode],
                     selected_ids: set) -> List[ConnectionPrimitive]:
        chosen = [n for n in visible if n.id in selected_ids]
        connections = []
        for i, first in enumerate(chosen):
            for second in chosen[i + 1:]:
                strength = self.connection_strength(first.position, second.position)
                if strength > self.config.connection_min_strength:
                    connections.append(ConnectionPrimitive(
                        start=first.position,
                        end=second.position,
                        node_ids=(first.id, second.id),
                        strength=strength,
                        width=strength * 5,
                        opacity=strength * 0.5,
                    ))
        return connections

    def connection_strength(self, a: Vector2D, b: Vector2D) -> float:
        """1 at zero distance, falling linearly to 0 at the connection distance."""
        return max(0.0, 1 - a.distance_to(b) / self.config.connection_distance)
