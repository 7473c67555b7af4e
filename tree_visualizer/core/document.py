"""
Session document owning one tree.

The document holds the root node and the id counter. All structural
mutation goes through it:
- add_child / delete_subtree / toggle_expand / update
- statistics over the whole tree
- fuzzy label search
- bulk editing helpers (random subtree, recolour, expand/collapse all, clear)

Lookups walk the tree from the root on every call; there is no id index.
"""

from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field
import logging
import random

from thefuzz import fuzz

from .errors import NodeNotFoundError, RootDeletionError
from .node import (
    TreeNode,
    PALETTE,
    CHILD_COLORS,
    ROOT_COLOR,
    color_name,
    normalize_color,
    validate_label,
    validate_metadata,
    validate_size_factor,
)

logger = logging.getLogger(__name__)

ROOT_ID = '1'

# Sentinel for update(): distinguishes "not given" from an explicit None
_UNSET = object()


@dataclass
class TreeStatistics:
    """Aggregate figures for a tree."""

    total_nodes: int = 0
    max_depth: int = 0
    leaf_count: int = 0
    avg_children_per_node: float = 0.0
    color_histogram: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_nodes': self.total_nodes,
            'max_depth': self.max_depth,
            'leaf_count': self.leaf_count,
            'avg_children_per_node': self.avg_children_per_node,
            'color_histogram': dict(self.color_histogram),
        }


class TreeDocument:
    """
    Owns a single tree and its id counter.

    Several documents can coexist; each counts ids independently.
    """

    def __init__(self, root_label: Optional[str] = None):
        self._counter = int(ROOT_ID)
        self.root = TreeNode(
            id=ROOT_ID,
            label=root_label or ROOT_ID,
            color=ROOT_COLOR,
            description='Root Node',
        )

    @property
    def next_id(self) -> str:
        """Id the next add_child call will assign."""
        return str(self._counter + 1)

    # ---------- lookup ----------

    def get(self, node_id: str) -> Optional[TreeNode]:
        return self.root.find(node_id)

    def find(self, node_id: str) -> TreeNode:
        """
        Resolve a node id with a pre-order search from the root.

        Raises:
            NodeNotFoundError: If no node has this id
        """
        node = self.root.find(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def visible_nodes(self) -> List[TreeNode]:
        return list(self.root.iter_visible())

    # ---------- mutation ----------

    def add_child(self, parent_id: str, label: Optional[str] = None,
                  color: Optional[str] = None, size_factor: float = 1.0,
                  description: Optional[str] = None,
                  metadata: Optional[Dict[str, Any]] = None) -> str:
        """
        Create a node and append it to the parent's children.

        Args:
            parent_id: Id of the node receiving the child
            label: Display text, defaults to the new id
            color: '#RRGGBB' or palette name, defaults to the child colour cycle
            size_factor: Radius multiplier in [0.5, 2.0]
            description: Free text, defaults to "Node <id> - Child of <parent>"
            metadata: Extension values (str/int/float/bool only)

        Returns:
            The new node's id

        Raises:
            NodeNotFoundError: If the parent does not exist
            InvalidNodeValueError: If a field value is out of its domain
        """
        parent = self.get(parent_id)
        if parent is None:
            logger.warning(f"[Document] add_child: parent '{parent_id}' not found")
            raise NodeNotFoundError(parent_id)

        # Validate everything before the counter moves
        if label is not None:
            validate_label(label)
        size = validate_size_factor(size_factor)
        meta = validate_metadata(metadata)
        counter = self._counter + 1
        node_color = normalize_color(color) if color is not None else \
            CHILD_COLORS[(counter - 1) % len(CHILD_COLORS)]

        self._counter = counter
        node_id = str(counter)
        child = TreeNode(
            id=node_id,
            label=label if label is not None else node_id,
            color=node_color,
            size_factor=size,
            description=description if description is not None
            else f"Node {node_id} - Child of {parent.label}",
            metadata=meta,
        )
        parent.children.append(child)
        logger.debug(f"[Document] Added node {node_id} under {parent_id}")
        return node_id

    def delete_subtree(self, node_id: str) -> int:
        """
        Detach a node and everything beneath it.

        Returns:
            Number of nodes removed (1 + prior descendant count)

        Raises:
            RootDeletionError: If node_id is the root
            NodeNotFoundError: If the node does not exist
        """
        if node_id == self.root.id:
            logger.warning("[Document] Rejected deletion of root")
            raise RootDeletionError(node_id)

        parent = self.root.find_parent(node_id)
        if parent is None:
            logger.warning(f"[Document] delete_subtree: node '{node_id}' not found")
            raise NodeNotFoundError(node_id)

        target = next(child for child in parent.children if child.id == node_id)
        removed = 1 + target.total_descendants
        parent.remove_child(node_id)
        logger.debug(f"[Document] Deleted subtree {node_id} ({removed} nodes)")
        return removed

    def toggle_expand(self, node_id: str) -> bool:
        """Flip a node's expanded flag and return the new value."""
        node = self.find(node_id)
        node.expanded = not node.expanded
        logger.debug(f"[Document] Node {node_id} {'expanded' if node.expanded else 'collapsed'}")
        return node.expanded

    def update(self, node_id: str, label: Any = _UNSET, description: Any = _UNSET,
               color: Any = _UNSET, size_factor: Any = _UNSET) -> TreeNode:
        """
        Apply field changes to a node in place.

        Only the given fields change. All values are validated before any
        is applied, so a bad value leaves the node untouched.
        """
        node = self.find(node_id)

        changes: Dict[str, Any] = {}
        if label is not _UNSET:
            changes['label'] = validate_label(label)
        if description is not _UNSET:
            changes['description'] = description or None
        if color is not _UNSET:
            changes['color'] = normalize_color(color)
        if size_factor is not _UNSET:
            changes['size_factor'] = validate_size_factor(size_factor)

        for attr, value in changes.items():
            setattr(node, attr, value)
        logger.debug(f"[Document] Updated node {node_id}: {sorted(changes)}")
        return node

    # ---------- queries ----------

    def statistics(self) -> TreeStatistics:
        """Totals, depth, leaf count, mean fan-out and colour histogram in one pass."""
        stats = TreeStatistics()
        total_children = 0

        for node in self.root.iter_nodes():
            stats.total_nodes += 1
            total_children += len(node.children)
            if node.is_leaf:
                stats.leaf_count += 1
            name = color_name(node.color)
            stats.color_histogram[name] = stats.color_histogram.get(name, 0) + 1

        stats.max_depth = self.root.depth
        if total_children:
            stats.avg_children_per_node = total_children / stats.total_nodes
        return stats

    def search(self, query: str, limit: int = 10,
               min_score: int = 60) -> List[Tuple[TreeNode, int]]:
        """
        Fuzzy-match node labels and descriptions.

        Returns:
            (node, score) pairs, best first; equal scores keep tree order
        """
        query = query.strip()
        if not query:
            return []

        lowered = query.lower()
        matches = []
        for node in self.root.iter_nodes():
            score = max(
                fuzz.token_sort_ratio(query, node.label),
                fuzz.partial_ratio(lowered, node.label.lower()),
            )
            if node.description:
                score = max(score, fuzz.partial_ratio(lowered, node.description.lower()) - 10)
            if score >= min_score:
                matches.append((node, score))

        matches.sort(key=lambda m: m[1], reverse=True)
        return matches[:limit]

    # ---------- bulk helpers ----------

    def add_random_subtree(self, parent_id: str, max_depth: int = 3,
                           seed: Optional[int] = None) -> List[str]:
        """
        Grow a random subtree under a node.

        Each level adds 1-4 children; each child continues growing with
        probability 1/2 until max_depth levels exist.

        Returns:
            Ids of the new nodes in creation order
        """
        parent = self.find(parent_id)
        rng = random.Random(seed)
        created: List[str] = []

        def grow(node: TreeNode, depth: int) -> None:
            if depth >= max_depth:
                return
            for _ in range(rng.randint(1, 4)):
                child_id = self.add_child(
                    node.id,
                    color=rng.choice(CHILD_COLORS),
                    size_factor=round(0.8 + rng.random() * 0.4, 3),
                    description=f"Random node {self.next_id}",
                )
                created.append(child_id)
                if rng.random() < 0.5:
                    grow(node.children[-1], depth + 1)

        grow(parent, 0)
        logger.debug(f"[Document] Random subtree under {parent_id}: {len(created)} nodes")
        return created

    def randomize_colors(self, seed: Optional[int] = None) -> None:
        rng = random.Random(seed)
        colors = list(PALETTE.values())
        for node in self.root.iter_nodes():
            node.color = rng.choice(colors)

    def expand_all(self) -> None:
        for node in self.root.iter_nodes():
            node.expanded = True

    def collapse_all(self) -> None:
        """Collapse every node except the root."""
        for node in self.root.iter_nodes():
            if node is not self.root:
                node.expanded = False

    def clear(self) -> int:
        """
        Remove every child of the root.

        The id counter keeps counting so ids are never handed out twice.
        """
        removed = self.root.total_descendants
        self.root.children.clear()
        logger.debug(f"[Document] Cleared tree ({removed} nodes)")
        return removed
