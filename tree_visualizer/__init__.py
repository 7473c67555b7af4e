"""
Tree visualizer core.

Build and edit an in-memory tree, lay it out with one of four strategies,
hit-test pointer locations and produce draw primitives for a renderer.

    doc = TreeDocument()
    child = doc.add_child(doc.root.id)
    compute_layout(doc.root, (800, 600), 1.0, "radial")
    node = hit_test((400, 300), doc.root)
"""

from .config import LayoutConfig, SceneConfig, load_config
from .core import (
    TreeNode,
    TreeDocument,
    TreeStatistics,
    TreeError,
    NodeNotFoundError,
    RootDeletionError,
    InvalidNodeValueError,
    Vector2D,
)
from .layouts import LayoutKind, compute_layout, get_layout, list_layouts
from .hit_test import hit_test
from .scene import Scene, SceneBuilder

__version__ = '0.1.0'

__all__ = [
    'LayoutConfig',
    'SceneConfig',
    'load_config',
    'TreeNode',
    'TreeDocument',
    'TreeStatistics',
    'TreeError',
    'NodeNotFoundError',
    'RootDeletionError',
    'InvalidNodeValueError',
    'Vector2D',
    'LayoutKind',
    'compute_layout',
    'get_layout',
    'list_layouts',
    'hit_test',
    'Scene',
    'SceneBuilder',
]
