"""
Tree node entity.

A TreeNode owns its children exclusively; nodes are only ever attached
through TreeDocument.add_child, which always creates a fresh node, so the
structure stays acyclic.
"""

from typing import Dict, Any, List, Optional, Union, Iterator
from dataclasses import dataclass, field
from datetime import datetime
import re

from .errors import InvalidNodeValueError
from .math_utils import Vector2D


MetadataValue = Union[str, int, float, bool]

SIZE_FACTOR_MIN = 0.5
SIZE_FACTOR_MAX = 2.0

# Named palette offered by the editor (Material colour primaries)
PALETTE: Dict[str, str] = {
    'Blue': '#2196F3',
    'Red': '#F44336',
    'Green': '#4CAF50',
    'Orange': '#FF9800',
    'Purple': '#9C27B0',
    'Teal': '#009688',
    'Amber': '#FFC107',
    'Pink': '#E91E63',
    'Indigo': '#3F51B5',
    'Cyan': '#00BCD4',
    'Lime': '#CDDC39',
    'Deep Orange': '#FF5722',
}

# Colours cycled through for new children
CHILD_COLORS = [PALETTE[name] for name in ('Blue', 'Red', 'Green', 'Orange', 'Purple')]

DEFAULT_COLOR = PALETTE['Blue']
ROOT_COLOR = PALETTE['Indigo']

_HEX_COLOR = re.compile(r'^#[0-9A-Fa-f]{6}$')
_COLOR_NAMES = {hex_value: name for name, hex_value in PALETTE.items()}


def normalize_color(value: str) -> str:
    """
    Accept a palette name or '#RRGGBB' string and return upper-case hex.

    Raises:
        InvalidNodeValueError: For anything else
    """
    if isinstance(value, str):
        for name, hex_value in PALETTE.items():
            if value.lower() == name.lower():
                return hex_value
        if _HEX_COLOR.match(value):
            return value.upper()
    raise InvalidNodeValueError('color', value, "expected '#RRGGBB' or a palette name")


def color_name(value: str) -> str:
    """Palette name for a colour, 'Other' when it is not in the palette."""
    return _COLOR_NAMES.get(value.upper(), 'Other')


def validate_label(value: str) -> str:
    if not isinstance(value, str):
        raise InvalidNodeValueError('label', value, 'expected a string')
    return value


def validate_size_factor(value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidNodeValueError('size_factor', value, 'expected a number')
    if not SIZE_FACTOR_MIN <= value <= SIZE_FACTOR_MAX:
        raise InvalidNodeValueError(
            'size_factor', value,
            f'must be within [{SIZE_FACTOR_MIN}, {SIZE_FACTOR_MAX}]'
        )
    return float(value)


def validate_metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, MetadataValue]:
    """Copy a metadata mapping, rejecting keys/values outside str->(str|int|float|bool)."""
    if metadata is not None and not isinstance(metadata, dict):
        raise InvalidNodeValueError('metadata', metadata, 'expected a mapping')
    result: Dict[str, MetadataValue] = {}
    for key, value in (metadata or {}).items():
        if not isinstance(key, str):
            raise InvalidNodeValueError('metadata', key, 'keys must be strings')
        if not isinstance(value, (str, int, float, bool)):
            raise InvalidNodeValueError(
                'metadata', value, f"unsupported value kind for key '{key}'"
            )
        result[key] = value
    return result


@dataclass(eq=False)
class TreeNode:
    """A node in the visualised tree."""

    id: str
    label: str
    children: List['TreeNode'] = field(default_factory=list)
    expanded: bool = True
    position: Optional[Vector2D] = None
    color: str = DEFAULT_COLOR
    size_factor: float = 1.0
    description: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, MetadataValue] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def depth(self) -> int:
        """Height of the subtree below this node, ignoring expand state."""
        if not self.children:
            return 0
        return 1 + max(child.depth for child in self.children)

    @property
    def total_descendants(self) -> int:
        """Count of every node strictly beneath this one, ignoring expand state."""
        count = len(self.children)
        for child in self.children:
            count += child.total_descendants
        return count

    def find(self, node_id: str) -> Optional['TreeNode']:
        """Pre-order depth-first search of this subtree."""
        if self.id == node_id:
            return self
        for child in self.children:
            found = child.find(node_id)
            if found is not None:
                return found
        return None

    def find_parent(self, node_id: str) -> Optional['TreeNode']:
        """Return the node whose children list holds node_id."""
        for child in self.children:
            if child.id == node_id:
                return self
            parent = child.find_parent(node_id)
            if parent is not None:
                return parent
        return None

    def remove_child(self, child_id: str) -> bool:
        for index, child in enumerate(self.children):
            if child.id == child_id:
                del self.children[index]
                return True
        return False

    def iter_nodes(self) -> Iterator['TreeNode']:
        """Every node of the subtree in pre-order, collapsed or not."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_visible(self) -> Iterator['TreeNode']:
        """Pre-order walk that does not descend below collapsed nodes."""
        yield self
        if self.expanded:
            for child in self.children:
                yield from child.iter_visible()

    def to_dict(self, include_children: bool = False) -> Dict[str, Any]:
        """Plain view of the node for the bridge protocol."""
        d = {
            'id': self.id,
            'label': self.label,
            'expanded': self.expanded,
            'position': self.position.to_tuple() if self.position else None,
            'color': self.color,
            'size_factor': self.size_factor,
            'description': self.description,
            'created_at': self.created_at.isoformat(),
            'metadata': dict(self.metadata),
            'child_ids': [child.id for child in self.children],
        }
        if include_children:
            d['children'] = [child.to_dict(include_children=True) for child in self.children]
        return d

    def __repr__(self) -> str:
        return f"TreeNode(id={self.id!r}, label={self.label!r}, children={len(self.children)})"
