"""Error taxonomy for tree operations."""

from typing import Optional


class TreeError(Exception):
    """Base class for tree model errors."""


class NodeNotFoundError(TreeError, KeyError):
    """An operation referenced a node id that does not exist."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Node '{self.node_id}' not found"


class RootDeletionError(TreeError, ValueError):
    """Attempt to delete the root node."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Root node '{node_id}' cannot be deleted")


class InvalidNodeValueError(TreeError, ValueError):
    """A node field was given a value outside its domain."""

    def __init__(self, field_name: str, value: object, reason: Optional[str] = None):
        self.field_name = field_name
        self.value = value
        message = f"Invalid value for '{field_name}': {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
