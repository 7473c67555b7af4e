"""
Layout strategies for the tree visualizer.

Each strategy maps (tree, canvas size, scale) to node positions:
- hierarchical: rows by depth
- radial: nested angular sectors
- organic: jittered spread around each parent
- force: spring/repulsion relaxation

Strategies are auto-discovered via the @register_layout decorator.
"""

from enum import Enum
from typing import Optional, Union
import importlib
import logging
import pkgutil
from pathlib import Path

from ..config import LayoutConfig
from ..core.node import TreeNode
from ..core.registry import LayoutRegistry

logger = logging.getLogger(__name__)

# Auto-import all layout_*.py modules to trigger registration
_package_dir = Path(__file__).parent
for _, module_name, _ in pkgutil.iter_modules([str(_package_dir)]):
    if module_name.startswith('layout_'):
        importlib.import_module(f'.{module_name}', package=__name__)

# Re-export for convenience
from .base import LayoutStrategy, CanvasSize  # noqa: E402


class LayoutKind(str, Enum):
    HIERARCHICAL = 'hierarchical'
    RADIAL = 'radial'
    ORGANIC = 'organic'
    FORCE = 'force'


__all__ = [
    'LayoutStrategy',
    'LayoutKind',
    'LayoutRegistry',
    'CanvasSize',
    'compute_layout',
    'get_layout',
    'list_layouts',
]


def get_layout(name: Union[str, LayoutKind],
               config: Optional[LayoutConfig] = None) -> LayoutStrategy:
    """
    Get a layout strategy instance by name.

    Raises:
        KeyError: If no strategy has this name
    """
    if isinstance(name, LayoutKind):
        name = name.value
    return LayoutRegistry.create(name, config)


def list_layouts() -> list:
    """Get list of all available layout names."""
    return LayoutRegistry.list_names()


def compute_layout(root: TreeNode, canvas_size: CanvasSize, scale: float = 1.0,
                   strategy: Union[str, LayoutKind] = LayoutKind.HIERARCHICAL,
                   config: Optional[LayoutConfig] = None) -> None:
    """
    Recompute positions for every visible node.

    Args:
        root: Tree root
        canvas_size: (width, height) of the drawing area
        scale: Zoom factor applied to distances
        strategy: Registered layout name or LayoutKind
        config: Geometry overrides, defaults when None
    """
    layout = get_layout(strategy, config)
    logger.debug(f"[Layout] {layout.name} on {canvas_size[0]}x{canvas_size[1]} at scale {scale}")
    layout.apply(root, canvas_size, scale)
