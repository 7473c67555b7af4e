"""
Core model for the tree visualizer.

Provides:
- TreeNode: Node entity with traversal helpers
- TreeDocument: Session-owned tree with mutation and statistics
- Vector2D, math utilities: Geometry helpers
- LayoutRegistry: Plugin auto-discovery for layout strategies
- Error taxonomy
"""

from .node import TreeNode, PALETTE
from .document import TreeDocument, TreeStatistics, ROOT_ID
from .errors import TreeError, NodeNotFoundError, RootDeletionError, InvalidNodeValueError
from .math_utils import Vector2D, stable_seed
from .registry import LayoutRegistry, register_layout

__all__ = [
    'TreeNode',
    'PALETTE',
    'TreeDocument',
    'TreeStatistics',
    'ROOT_ID',
    'TreeError',
    'NodeNotFoundError',
    'RootDeletionError',
    'InvalidNodeValueError',
    'Vector2D',
    'stable_seed',
    'LayoutRegistry',
    'register_layout',
]
