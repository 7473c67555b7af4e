"""
Base class for layout strategies.

A strategy is a pure function of (tree, canvas size, scale) that writes a
position onto every visible node. Collapsed nodes are laid out as leaves;
their descendants keep whatever position they had before.
"""

from typing import Optional, Tuple
from abc import ABC, abstractmethod

from ..config import LayoutConfig
from ..core.math_utils import Vector2D
from ..core.node import TreeNode


CanvasSize = Tuple[float, float]


class LayoutStrategy(ABC):
    """Base class for all layout strategies."""

    name: str = "base"
    description: str = ""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    @abstractmethod
    def apply(self, root: TreeNode, canvas_size: CanvasSize, scale: float) -> None:
        """Assign positions to every visible node under root."""

    @staticmethod
    def canvas_center(canvas_size: CanvasSize) -> Vector2D:
        width, height = canvas_size
        return Vector2D(width / 2, height / 2)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
